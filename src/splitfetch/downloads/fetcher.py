"""Slice fetcher: one ranged GET per slice, streamed into the writer."""

import asyncio
import typing as t
from http import HTTPStatus

import aiohttp

from ..domain.exceptions import InvalidResponseError, SliceFetchError
from ..domain.slices import SliceTask
from ..infrastructure.logging import get_logger
from .writer import SliceWriter

if t.TYPE_CHECKING:
    import loguru

# Hook applied to the keyword arguments of every slice request before the
# Range header is set, e.g. to add auth or extra headers.
RequestCustomizer = t.Callable[[dict[str, t.Any]], None]


class SliceFetcher:
    """Downloads slices of one resource into a shared SliceWriter.

    A fetch resumes from the slice's own progress: the Range header starts
    at ``task.next_offset``, not at ``task.start``.

    Implementation decisions:
    - Streams with ``iter_chunked(buffer_size)`` so memory stays bounded
      regardless of slice size
    - Requires 206 Partial Content; a 200 is only accepted when the range
      asked for is the whole resource, because a server that ignores Range
      would otherwise have its body written at the wrong offsets
    - No retry: any failure is logged, wrapped in SliceFetchError and
      re-raised so the orchestrator can abort the whole job
    """

    def __init__(
        self,
        client: aiohttp.ClientSession,
        url: str,
        content_length: int,
        writer: SliceWriter,
        *,
        buffer_size: int = 1024,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        self.client = client
        self.url = url
        self.content_length = content_length
        self.writer = writer
        self.buffer_size = buffer_size
        self.logger = logger

    def build_request_kwargs(
        self, task: SliceTask, request_customizer: RequestCustomizer | None = None
    ) -> dict[str, t.Any]:
        """Request kwargs for a slice, with the customizer applied first.

        The Range header always wins over one set by the customizer.
        """
        request_kwargs: dict[str, t.Any] = {"headers": {}}
        if request_customizer is not None:
            request_customizer(request_kwargs)
        headers = {
            name: value
            for name, value in (request_kwargs.get("headers") or {}).items()
            if name.lower() != "range"
        }
        headers["Range"] = task.range_header()
        request_kwargs["headers"] = headers
        return request_kwargs

    async def fetch(
        self, task: SliceTask, request_customizer: RequestCustomizer | None = None
    ) -> None:
        """Fetch whatever part of ``task`` is still missing.

        Raises:
            SliceFetchError: Wrapping the transport, protocol or file
                system error that stopped the slice.
        """
        if task.is_complete:
            return

        request_kwargs = self.build_request_kwargs(task, request_customizer)
        self.logger.debug(
            f"Fetching slice [{task.start}, {task.end}) of {self.url} "
            f"with {request_kwargs['headers']['Range']}"
        )

        try:
            async with self.client.get(self.url, **request_kwargs) as response:
                response.raise_for_status()
                self._check_status(task, response.status)

                async for chunk in response.content.iter_chunked(self.buffer_size):
                    if not chunk:
                        continue
                    if len(chunk) > task.remaining:
                        raise InvalidResponseError(
                            f"Server sent more than the {task.width} bytes of "
                            f"slice [{task.start}, {task.end})"
                        )
                    await self.writer.write_slice(task, chunk)

            if not task.is_complete:
                raise InvalidResponseError(
                    f"Stream ended with {task.remaining} bytes of slice "
                    f"[{task.start}, {task.end}) missing"
                )

        except asyncio.CancelledError:
            self.logger.debug(
                f"Slice [{task.start}, {task.end}) cancelled at offset "
                f"{task.next_offset}"
            )
            raise

        except Exception as fetch_error:
            self._log_and_categorise_error(fetch_error, task)
            raise SliceFetchError(task, fetch_error) from fetch_error

        self.logger.debug(f"Slice [{task.start}, {task.end}) complete")

    def _check_status(self, task: SliceTask, status: int) -> None:
        if status == HTTPStatus.PARTIAL_CONTENT:
            return
        whole_resource = task.next_offset == 0 and task.end == self.content_length
        if status == HTTPStatus.OK and whole_resource:
            return
        raise InvalidResponseError(
            f"Expected 206 Partial Content for {task.range_header()}, "
            f"got {status} from {self.url}"
        )

    def _log_and_categorise_error(self, exception: Exception, task: SliceTask) -> None:
        """Log a slice failure with a category that makes patterns obvious."""
        match exception:
            # Network connection errors - issues establishing connection
            case aiohttp.ClientSSLError():
                error_category = "SSL/TLS error connecting to"
            case aiohttp.ClientConnectorError():
                error_category = "Failed to connect to"
            case aiohttp.ClientOSError():
                error_category = "Network error connecting to"

            # HTTP response errors - server responded but with error
            case aiohttp.ClientResponseError():
                error_category = f"HTTP {exception.status} error from"
            case aiohttp.ClientPayloadError():
                error_category = "Invalid response payload from"
            case InvalidResponseError():
                error_category = "Protocol violation from"

            case asyncio.TimeoutError():
                error_category = "Timeout downloading from"

            # File system errors - issues writing to disk
            case PermissionError():
                error_category = "Permission denied writing slice from"
            case OSError():
                error_category = "File system error writing slice from"

            case _:
                error_category = "Unexpected error downloading from"
                self.logger.debug(
                    f"Uncaught exception of type {type(exception).__name__}: "
                    f"{exception}"
                )

        self.logger.error(
            f"{error_category} {self.url} "
            f"(slice [{task.start}, {task.end})): {exception}"
        )
