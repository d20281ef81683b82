from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

DEFAULT_FILENAME = "download.bin"


def filename_from_url(url: str) -> str:
    """Derive a local filename from the last path segment of a URL.

    Query strings and fragments are ignored and percent-escapes decoded.
    Falls back to DEFAULT_FILENAME when the URL has no usable segment.
    """
    path = unquote(urlparse(url).path)
    name = PurePosixPath(path).name
    if name in ("", ".", ".."):
        return DEFAULT_FILENAME
    return name
