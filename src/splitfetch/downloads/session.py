"""Download session: orchestrates concurrent slice fetches for one resource.

This module provides the DownloadSession class which owns the slice task
list, spawns one fetcher per incomplete slice, and exposes progress and
lifecycle control (init, start, wait, pause).
"""

import asyncio
import typing as t
from pathlib import Path

import aiohttp

from ..domain.exceptions import (
    DownloadInProgressError,
    DownloadNotRunningError,
    DownloadNotStartedError,
    SessionAlreadyInitializedError,
    SessionNotInitializedError,
)
from ..domain.run_state import RunState
from ..domain.session_config import (
    DEFAULT_BLOCK_COUNT,
    DEFAULT_BUFFER_SIZE,
    SessionConfig,
)
from ..domain.slices import SliceTask, validate_partition
from ..infrastructure.logging import get_logger
from .fetcher import RequestCustomizer, SliceFetcher
from .planner import plan_slices
from .writer import SliceWriter

if t.TYPE_CHECKING:
    import loguru


class DownloadSession:
    """Resumable, parallel-chunked download of a single resource.

    The resource is split into slices which are fetched concurrently with
    HTTP range requests and written at their offsets of one shared file.
    Progress lives in memory only: pausing and starting again resumes each
    slice where it stopped, but nothing survives the process.

    Lifecycle:
        IDLE -> RUNNING -> (COMPLETED | CANCELLED | FAILED)
        CANCELLED and FAILED sessions can be started again.

    Key responsibilities:
    - Plans slices once, on init(), unless a task list was supplied
    - Runs every fetch of a job inside one asyncio.TaskGroup, so a failing
      slice cancels its siblings and pause() cancels them all at once
    - Keeps an explicit RunState instead of inferring it from a job handle;
      a finishing job only updates the state if it is still the current job
    - Waits for a paused job to unwind before a new job touches the file,
      so an in-flight write of the old job never overlaps the new one

    Usage:
        session = await DownloadSession.create(
            SessionConfig(url="https://example.com/big.iso", target_path=path)
        )
        async with aiohttp.ClientSession() as client:
            session.init(client)
            session.start()
            await session.wait()
        assert session.progress == 1.0

    The client passed to init() is shared read-only by all fetchers and is
    never closed by the session.
    """

    def __init__(
        self,
        url: str,
        content_length: int,
        target_path: Path,
        *,
        block_count: int = DEFAULT_BLOCK_COUNT,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        tasks: t.Sequence[SliceTask] | None = None,
        durable_writes: bool = True,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        """Initialize the session identity. No I/O happens here.

        Args:
            url: HTTP/HTTPS URL of the resource
            content_length: Total size in bytes, as reported by the server
            target_path: Destination file; bytes land at their own offsets
            block_count: Number of slices to plan on init()
            buffer_size: Maximum bytes read from the network per write
            tasks: Existing slice tasks to resume from. Must partition
                ``[0, content_length)``. Planned on init() when omitted.
            durable_writes: fsync every write before counting it
            logger: Logger instance for recording session events

        Raises:
            ValueError: On a non-positive size, block count or buffer size,
                or a task list that does not partition the resource.
        """
        if content_length <= 0:
            raise ValueError(f"content_length must be positive, got {content_length}")
        if block_count < 1:
            raise ValueError(f"block_count must be at least 1, got {block_count}")
        if buffer_size < 1:
            raise ValueError(f"buffer_size must be at least 1, got {buffer_size}")

        self.url = url
        self.content_length = content_length
        self.target_path = target_path
        self.block_count = block_count
        self.buffer_size = buffer_size
        self.durable_writes = durable_writes
        self._logger = logger

        self._tasks: list[SliceTask] = []
        if tasks:
            validate_partition(tasks, content_length)
            self._tasks = [task.model_copy() for task in tasks]

        self._client: aiohttp.ClientSession | None = None
        self._job: asyncio.Task[None] | None = None
        self._state = RunState.IDLE

    @classmethod
    async def create(
        cls,
        config: SessionConfig,
        client: aiohttp.ClientSession | None = None,
        **session_kwargs: t.Any,
    ) -> "DownloadSession":
        """Probe the resource and build a session for it.

        See :func:`splitfetch.downloads.preflight.create_session`.
        """
        from .preflight import create_session

        return await create_session(config, client=client, **session_kwargs)

    def __repr__(self) -> str:
        return (
            f"DownloadSession(url={self.url!r}, state={self._state}, "
            f"downloaded={self.download_size}/{self.content_length})"
        )

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_downloading(self) -> bool:
        """True while a job is in flight."""
        return self._state is RunState.RUNNING

    @property
    def tasks(self) -> tuple[SliceTask, ...]:
        """Snapshot copies of the slice tasks, in offset order."""
        return tuple(task.model_copy() for task in self._tasks)

    @property
    def download_size(self) -> int:
        """Bytes persisted so far across all slices. Never decreases."""
        return sum(task.downloaded_bytes for task in self._tasks)

    @property
    def remaining_bytes(self) -> int:
        return self.content_length - self.download_size

    @property
    def progress(self) -> float:
        """Fraction of the resource persisted, from 0.0 to 1.0."""
        return self.download_size / self.content_length

    @property
    def is_complete(self) -> bool:
        return bool(self._tasks) and all(task.is_complete for task in self._tasks)

    def init(self, client: aiohttp.ClientSession) -> None:
        """Bind the HTTP client and plan slices if none exist yet.

        Raises:
            SessionAlreadyInitializedError: If init() was already called.
                The task list is left untouched.
        """
        if self.is_initialized:
            raise SessionAlreadyInitializedError("Session already initialized")

        self._client = client
        if not self._tasks:
            self._tasks = plan_slices(self.content_length, self.block_count)

        self._logger.debug(
            f"Session initialized for {self.url}: {len(self._tasks)} slices, "
            f"{self.download_size}/{self.content_length} bytes already persisted"
        )

    def start(
        self,
        scope: asyncio.TaskGroup | None = None,
        request_customizer: RequestCustomizer | None = None,
    ) -> None:
        """Start fetching every incomplete slice in the background.

        Must be called from a running event loop. Returns immediately; use
        wait() to block until the job ends.

        Args:
            scope: Task group to run the job in. When omitted the job runs
                as a plain task on the running loop.
            request_customizer: Applied to the request kwargs of every
                slice request (headers, auth, timeout, ...). The Range header
                is always set by the session.

        Raises:
            SessionNotInitializedError: If init() was not called.
            DownloadInProgressError: If a job is already running.
            RuntimeError: If there is no running event loop.
        """
        if not self.is_initialized:
            raise SessionNotInitializedError("Session not initialized, call init() first")
        if self._state is RunState.RUNNING:
            raise DownloadInProgressError(f"Download of {self.url} still in progress")

        loop = asyncio.get_running_loop()
        job_coro = self._run(self._job, request_customizer)
        if scope is not None:
            job = scope.create_task(job_coro)
        else:
            job = loop.create_task(job_coro)
        job.add_done_callback(_retrieve_failure)

        self._job = job
        self._state = RunState.RUNNING
        self._logger.debug(f"Download job started for {self.url}")

    async def wait(self) -> None:
        """Wait until the latest job ends.

        Returns normally when the job completed or was paused. A paused
        session stays resumable.

        Raises:
            DownloadNotStartedError: If start() was never called.
            SliceFetchError: If a slice failed and aborted the job.
            OSError: If the target file could not be opened.
        """
        job = self._job
        if job is None:
            raise DownloadNotStartedError("Download was never started")

        await asyncio.wait({job})
        if job.cancelled():
            return
        job.result()

    def pause(self) -> None:
        """Cancel the running job. Non-blocking.

        Every in-flight fetch is cancelled. A write already handed to the
        file system still lands and is counted, so progress stops on a
        buffer boundary and the next start() resumes from there.

        Raises:
            SessionNotInitializedError: If init() was not called.
            DownloadNotRunningError: If no job is running.
        """
        if not self.is_initialized:
            raise SessionNotInitializedError("Session not initialized, call init() first")
        if self._state is not RunState.RUNNING or self._job is None:
            raise DownloadNotRunningError(f"No download of {self.url} is running")

        self._state = RunState.CANCELLED
        self._job.cancel()
        self._logger.debug(
            f"Download of {self.url} paused at {self.download_size}/"
            f"{self.content_length} bytes"
        )

    async def _run(
        self,
        previous_job: asyncio.Task[None] | None,
        request_customizer: RequestCustomizer | None,
    ) -> None:
        """Job body: fetch all incomplete slices, then record the outcome."""
        job = asyncio.current_task()

        try:
            if previous_job is not None and not previous_job.done():
                # A paused job may still be flushing its last write.
                await asyncio.wait({previous_job})
            await self._fetch_incomplete(request_customizer)

        except asyncio.CancelledError:
            self._finish(job, RunState.CANCELLED)
            raise

        except BaseExceptionGroup as group_error:
            self._finish(job, RunState.FAILED)
            first_error = group_error.exceptions[0]
            self._logger.error(
                f"Download of {self.url} failed with {len(group_error.exceptions)} "
                f"slice error(s), {self.download_size}/{self.content_length} "
                f"bytes persisted"
            )
            raise first_error

        except Exception as job_error:
            self._finish(job, RunState.FAILED)
            self._logger.error(f"Download of {self.url} failed: {job_error}")
            raise

        self._finish(job, RunState.COMPLETED)
        self._logger.debug(f"Download of {self.url} completed: {self.target_path}")

    async def _fetch_incomplete(
        self, request_customizer: RequestCustomizer | None
    ) -> None:
        pending = [task for task in self._tasks if not task.is_complete]

        assert self._client is not None
        async with SliceWriter(
            self.target_path, durable=self.durable_writes, logger=self._logger
        ) as writer:
            if pending:
                fetcher = SliceFetcher(
                    self._client,
                    self.url,
                    self.content_length,
                    writer,
                    buffer_size=self.buffer_size,
                    logger=self._logger,
                )
                self._logger.debug(f"Fetching {len(pending)} slices of {self.url}")
                async with asyncio.TaskGroup() as group:
                    for task in pending:
                        group.create_task(fetcher.fetch(task, request_customizer))

            # Every slice is on disk; drop whatever a pre-existing file held
            # past the end of the resource.
            await writer.trim(self.content_length)

    def _finish(self, job: asyncio.Task[t.Any] | None, state: RunState) -> None:
        """Record a job's outcome unless a newer job has replaced it."""
        if job is self._job and self._state is RunState.RUNNING:
            self._state = state


def _retrieve_failure(job: asyncio.Task[None]) -> None:
    """Mark a job's failure as retrieved.

    The job logs its own failure, and callers are free to never wait() on
    a session. Without this asyncio reports the exception again when the
    task is garbage collected.
    """
    if not job.cancelled():
        job.exception()
