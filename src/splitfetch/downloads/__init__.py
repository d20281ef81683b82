"""Download operations - planning, fetching, writing and orchestration."""

from ..domain.exceptions import FileAccessError, FileValidationError, HashMismatchError
from .fetcher import RequestCustomizer, SliceFetcher
from .planner import plan_slices
from .preflight import create_session, probe_resource
from .session import DownloadSession
from .validation import FileValidator
from .writer import SliceWriter

__all__ = [
    # Core downloads
    "DownloadSession",
    "SliceFetcher",
    "SliceWriter",
    "RequestCustomizer",
    "plan_slices",
    # Preflight
    "create_session",
    "probe_resource",
    # Validation
    "FileValidator",
    "FileValidationError",
    "FileAccessError",
    "HashMismatchError",
]
