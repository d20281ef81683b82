"""Synchronized random-access writer for the shared output file."""

import asyncio
import os
import typing as t
from pathlib import Path

import aiofiles
import aiofiles.os
from aiofiles.threadpool.binary import AsyncBufferedIOBase

from ..domain.exceptions import WriterNotOpenError
from ..domain.slices import SliceTask
from ..infrastructure.logging import get_logger

if t.TYPE_CHECKING:
    import loguru


class SliceWriter:
    """Owns the output file and serializes every seek+write pair.

    ``seek`` followed by ``write`` is not atomic, so all fetchers go
    through one ``asyncio.Lock``. The same lock covers the slice progress
    counter: a slice's ``downloaded_bytes`` only moves after its bytes
    have landed on disk.

    Implementation decisions:
    - File I/O runs in aiofiles' thread pool to keep the event loop free
    - With ``durable=True`` every write is flushed and fsynced before the
      counter advances, so progress never claims bytes a crash would lose
    - A write cannot be interrupted once handed to the thread pool. If the
      caller is cancelled meanwhile, the lock is held until that write
      lands so no other write can overlap it

    Usage:
        async with SliceWriter(Path("/tmp/out.bin")) as writer:
            await writer.write_slice(task, chunk)
    """

    def __init__(
        self,
        target_path: Path,
        *,
        durable: bool = True,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        self.target_path = target_path
        self.durable = durable
        self._logger = logger
        self._lock = asyncio.Lock()
        self._file: AsyncBufferedIOBase | None = None

    @property
    def is_open(self) -> bool:
        return self._file is not None

    async def __aenter__(self) -> "SliceWriter":
        await self.open()
        return self

    async def __aexit__(self, *args: t.Any) -> None:
        await self.close()

    async def open(self) -> None:
        """Open the target for random access, creating it if missing.

        Idempotent. An existing file is never truncated: its bytes are
        the progress a resumed download relies on.
        """
        if self._file is not None:
            return
        if not await aiofiles.os.path.exists(self.target_path):
            async with aiofiles.open(self.target_path, "xb"):
                pass
            self._logger.debug(f"Created empty target file: {self.target_path}")
        self._file = await aiofiles.open(self.target_path, "r+b")

    async def close(self) -> None:
        """Close the file handle. Safe to call more than once."""
        if self._file is None:
            return
        async with self._lock:
            file_handle, self._file = self._file, None
            await file_handle.close()

    async def trim(self, size: int) -> None:
        """Cut the file down to ``size`` bytes if it is longer.

        A target that already existed may hold stale bytes past the end of
        the resource. Shorter files are left alone.
        """
        async with self._lock:
            file_handle = self._file
            if file_handle is None:
                raise WriterNotOpenError(f"Writer for {self.target_path} is not open")
            current_size = await file_handle.seek(0, os.SEEK_END)
            if current_size <= size:
                return
            await file_handle.truncate(size)
            await file_handle.flush()
            if self.durable:
                await asyncio.to_thread(os.fsync, file_handle.fileno())
            self._logger.debug(
                f"Trimmed {self.target_path} from {current_size} to {size} bytes"
            )

    async def write(self, offset: int, data: bytes) -> None:
        """Write ``data`` at absolute ``offset`` under the lock."""
        async with self._lock:
            await self._persist_shielded(offset, data)

    async def write_slice(self, task: SliceTask, data: bytes) -> None:
        """Persist the next chunk of a slice and advance its counter.

        The offset is taken from the task itself, so chunks of one slice
        are written back to back.

        Raises:
            ValueError: If ``data`` is larger than what the slice still misses.
        """
        if len(data) > task.remaining:
            raise ValueError(
                f"{len(data)} bytes overflow slice [{task.start}, {task.end}) "
                f"with {task.remaining} bytes remaining"
            )
        async with self._lock:
            await self._persist_shielded(
                task.next_offset, data, on_persisted=lambda: task.advance(len(data))
            )

    async def _persist_shielded(
        self,
        offset: int,
        data: bytes,
        on_persisted: t.Callable[[], None] | None = None,
    ) -> None:
        """Run one physical write to completion even if the caller is cancelled.

        Must be called with the lock held. On cancellation the in-flight
        write is awaited before CancelledError propagates, so the lock is
        only released once the file is quiescent. ``on_persisted`` runs
        whenever the write landed, cancelled or not.
        """
        persist = asyncio.ensure_future(self._persist(offset, data))
        try:
            await asyncio.shield(persist)
        except asyncio.CancelledError:
            await asyncio.wait({persist})
            landed = not persist.cancelled() and persist.exception() is None
            if landed and on_persisted is not None:
                on_persisted()
            raise
        if on_persisted is not None:
            on_persisted()

    async def _persist(self, offset: int, data: bytes) -> None:
        file_handle = self._file
        if file_handle is None:
            raise WriterNotOpenError(f"Writer for {self.target_path} is not open")
        await file_handle.seek(offset)
        await file_handle.write(data)
        await file_handle.flush()
        if self.durable:
            await asyncio.to_thread(os.fsync, file_handle.fileno())
