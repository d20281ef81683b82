"""Session factory: probe a resource and build a DownloadSession for it."""

import typing as t

import aiohttp

from ..domain.exceptions import InvalidResponseError, RangeNotSupportedError
from ..domain.session_config import SessionConfig
from ..infrastructure.http import create_client_session
from ..infrastructure.logging import get_logger
from .session import DownloadSession

if t.TYPE_CHECKING:
    import loguru


async def probe_resource(
    client: aiohttp.ClientSession,
    url: str,
    logger: "loguru.Logger",
) -> int:
    """HEAD the resource and return its size in bytes.

    Raises:
        InvalidResponseError: On a non-2xx status or a missing, malformed
            or non-positive Content-Length.
        RangeNotSupportedError: If the response does not advertise
            ``Accept-Ranges: bytes``.
        aiohttp.ClientError: On transport failure.
    """
    async with client.head(url, allow_redirects=True) as response:
        if not 200 <= response.status < 300:
            raise InvalidResponseError(
                f"Preflight HEAD {url} returned HTTP {response.status}"
            )

        accept_ranges = response.headers.get("Accept-Ranges")
        units = {unit.strip().lower() for unit in (accept_ranges or "").split(",")}
        if "bytes" not in units:
            raise RangeNotSupportedError(url, accept_ranges)

        raw_length = response.headers.get("Content-Length")
        try:
            content_length = int(raw_length) if raw_length is not None else None
        except ValueError:
            content_length = None
        if content_length is None or content_length <= 0:
            raise InvalidResponseError(
                f"Preflight HEAD {url} has no usable Content-Length: {raw_length!r}"
            )

    logger.debug(f"Preflight {url}: {content_length} bytes, ranges supported")
    return content_length


async def create_session(
    config: SessionConfig,
    client: aiohttp.ClientSession | None = None,
    *,
    logger: "loguru.Logger" = get_logger(__name__),
    **session_kwargs: t.Any,
) -> DownloadSession:
    """Validate the resource and build an uninitialized DownloadSession.

    Args:
        config: What to download and how to split it
        client: Session to probe with. When omitted a probe-only session is
            created and always closed before returning or raising. A
            supplied client is left open.
        logger: Logger for preflight and the created session
        **session_kwargs: Extra DownloadSession arguments, e.g.
            ``durable_writes``

    Returns:
        A session with its identity populated. Call init() before start().

    Raises:
        RangeNotSupportedError: If the server cannot serve byte ranges.
        InvalidResponseError: If the size of the resource is unusable.
    """
    url = str(config.url)
    owns_client = client is None
    probe_client = client if client is not None else create_client_session()

    try:
        content_length = await probe_resource(probe_client, url, logger)
    except Exception as probe_error:
        logger.error(f"Preflight failed for {url}: {probe_error}")
        raise
    finally:
        if owns_client:
            await probe_client.close()

    return DownloadSession(
        url=url,
        content_length=content_length,
        target_path=config.target_path,
        block_count=config.block_count,
        buffer_size=config.buffer_size,
        logger=logger,
        **session_kwargs,
    )
