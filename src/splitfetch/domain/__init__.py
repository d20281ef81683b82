"""Domain layer - core models and exceptions."""

from .exceptions import (
    DownloadError,
    DownloadInProgressError,
    DownloadNotRunningError,
    DownloadNotStartedError,
    FileAccessError,
    FileValidationError,
    HashMismatchError,
    InvalidResponseError,
    PreflightError,
    RangeNotSupportedError,
    SessionAlreadyInitializedError,
    SessionNotInitializedError,
    SessionStateError,
    SliceFetchError,
    SplitFetchError,
    WriterNotOpenError,
)
from .hash_validation import HashAlgorithm, HashConfig
from .run_state import RunState
from .session_config import SessionConfig
from .slices import SliceTask, validate_partition

__all__ = [
    # Models
    "HashAlgorithm",
    "HashConfig",
    "RunState",
    "SessionConfig",
    "SliceTask",
    "validate_partition",
    # Exceptions
    "DownloadError",
    "DownloadInProgressError",
    "DownloadNotRunningError",
    "DownloadNotStartedError",
    "FileAccessError",
    "FileValidationError",
    "HashMismatchError",
    "InvalidResponseError",
    "PreflightError",
    "RangeNotSupportedError",
    "SessionAlreadyInitializedError",
    "SessionNotInitializedError",
    "SessionStateError",
    "SliceFetchError",
    "SplitFetchError",
    "WriterNotOpenError",
]
