"""splitfetch - resumable, parallel-chunked HTTP downloads of one resource."""

from .config.settings import Settings
from .domain import (
    HashAlgorithm,
    HashConfig,
    RunState,
    SessionConfig,
    SliceTask,
    SplitFetchError,
)
from .downloads import DownloadSession, FileValidator, create_session, plan_slices

__all__ = [
    "DownloadSession",
    "FileValidator",
    "HashAlgorithm",
    "HashConfig",
    "RunState",
    "SessionConfig",
    "Settings",
    "SliceTask",
    "SplitFetchError",
    "create_session",
    "plan_slices",
]
