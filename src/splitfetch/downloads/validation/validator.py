"""Checksum validation of a completed download."""

import hmac
import stat
import typing as t
from pathlib import Path

import aiofiles
import aiofiles.os

from ...domain.exceptions import FileAccessError, HashMismatchError
from ...domain.hash_validation import HashConfig
from ...infrastructure.logging import get_logger

if t.TYPE_CHECKING:
    import loguru

DEFAULT_READ_SIZE = 1024 * 1024


async def digest_file(path: Path, config: HashConfig, read_size: int) -> str:
    """Stream ``path`` through the configured hash and return the hex digest.

    Reads go through aiofiles' thread pool; hashing happens on the loop in
    ``read_size`` pieces.
    """
    hasher = config.algorithm.new()
    async with aiofiles.open(path, "rb") as source:
        while block := await source.read(read_size):
            hasher.update(block)
    return hasher.hexdigest()


class FileValidator:
    """Checks a finished target against an expected checksum."""

    def __init__(
        self,
        *,
        chunk_size: int = DEFAULT_READ_SIZE,
        logger: t.Optional["loguru.Logger"] = None,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
        self.chunk_size = chunk_size
        self._logger = logger or get_logger(__name__)

    async def validate(self, file_path: Path, config: HashConfig) -> str:
        """Return the file's digest if it equals ``config.expected_hash``.

        Raises:
            FileAccessError: The path is missing, not a regular file, or
                could not be read.
            HashMismatchError: The digests differ.
        """
        try:
            file_stat = await aiofiles.os.stat(file_path)
            if not stat.S_ISREG(file_stat.st_mode):
                raise FileAccessError(f"{file_path} is not a regular file")
            digest = await digest_file(file_path, config, self.chunk_size)
        except OSError as exc:
            raise FileAccessError(f"Cannot read {file_path}: {exc}") from exc

        if hmac.compare_digest(digest, config.expected_hash):
            self._logger.debug(
                f"{config.algorithm} of {file_path} ({file_stat.st_size} bytes) verified"
            )
            return digest

        raise HashMismatchError(
            expected_hash=config.expected_hash,
            actual_hash=digest,
            file_path=file_path,
        )
