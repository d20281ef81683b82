"""Custom exceptions for splitfetch."""

import typing as t
from pathlib import Path

if t.TYPE_CHECKING:
    from .slices import SliceTask


class SplitFetchError(Exception):
    """Base exception for all splitfetch errors."""

    pass


class SessionStateError(SplitFetchError):
    """Base exception for lifecycle misuse of a DownloadSession.

    These are programming errors: the call sequence is wrong. They are
    raised synchronously and must not be retried.
    """

    pass


class SessionAlreadyInitializedError(SessionStateError):
    """Raised when init() is called on a session that is already bound."""

    pass


class SessionNotInitializedError(SessionStateError):
    """Raised when start() or pause() is called before init()."""

    pass


class DownloadInProgressError(SessionStateError):
    """Raised when start() is called while a download job is running."""

    pass


class DownloadNotRunningError(SessionStateError):
    """Raised when pause() is called and no download job is running."""

    pass


class DownloadNotStartedError(SessionStateError):
    """Raised when wait() is called on a session that was never started."""

    pass


class WriterNotOpenError(SessionStateError):
    """Raised when writing through a SliceWriter that is not open."""

    pass


class PreflightError(SplitFetchError):
    """Base exception for failures validating a resource before download."""

    pass


class RangeNotSupportedError(PreflightError):
    """Raised when the server does not advertise byte-range support."""

    def __init__(self, url: str, accept_ranges: str | None) -> None:
        self.url = url
        self.accept_ranges = accept_ranges
        super().__init__(
            f"{url} does not support ranged downloads "
            f"(Accept-Ranges: {accept_ranges or 'missing'})"
        )


class InvalidResponseError(PreflightError):
    """Raised when a server response violates what the download relies on.

    Covers a missing or non-positive Content-Length on the preflight probe
    as well as protocol violations while fetching a slice (ignored Range
    header, too many or too few bytes).
    """

    pass


class DownloadError(SplitFetchError):
    """Base exception for download operation errors."""

    pass


class SliceFetchError(DownloadError):
    """Raised when fetching a single slice fails.

    The underlying transport or protocol error is available as
    ``__cause__``. Failure of one slice aborts the whole job.
    """

    def __init__(self, task: "SliceTask", cause: BaseException) -> None:
        self.task = task
        super().__init__(
            f"Slice [{task.start}, {task.end}) failed: "
            f"{type(cause).__name__}: {cause}"
        )


class FileValidationError(SplitFetchError):
    """Base exception for file validation failures."""

    pass


class FileAccessError(FileValidationError):
    """Raised when files cannot be accessed for validation."""

    pass


class HashMismatchError(FileValidationError):
    """Raised when calculated hash does not match expected value."""

    def __init__(
        self,
        *,
        expected_hash: str,
        actual_hash: str | None,
        file_path: Path,
    ) -> None:
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash
        self.file_path = file_path
        message = (
            f"Hash mismatch for {file_path}: expected {expected_hash[:16]}..., "
            f"got {actual_hash[:16] if actual_hash else 'unknown'}..."
        )
        super().__init__(message)
