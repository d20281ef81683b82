"""Local HTTP server for integration tests."""

import asyncio
import threading
import typing as t
from dataclasses import dataclass
from pathlib import Path

import pytest
from aiohttp import web

from tests.helpers import make_payload

RESOURCE_SIZE = 1_000_000
_THROTTLE_CHUNK = 4096


@dataclass(frozen=True)
class ServedResource:
    base_url: str
    payload: bytes

    @property
    def file_url(self) -> str:
        """Static file with native Range support."""
        return f"{self.base_url}/files/resource.bin"

    @property
    def throttled_url(self) -> str:
        """Range-aware stream that trickles bytes out slowly."""
        return f"{self.base_url}/throttled/resource.bin"

    @property
    def no_ranges_url(self) -> str:
        """Plain response without Accept-Ranges."""
        return f"{self.base_url}/plain/resource.bin"


def _build_app(payload: bytes, file_path: Path) -> web.Application:
    async def file_handler(request: web.Request) -> web.FileResponse:
        return web.FileResponse(file_path)

    async def throttled_handler(request: web.Request) -> web.StreamResponse:
        byte_range = request.http_range
        start = byte_range.start or 0
        stop = byte_range.stop if byte_range.stop is not None else len(payload)
        response = web.StreamResponse(
            status=206 if request.headers.get("Range") else 200,
            headers={
                "Accept-Ranges": "bytes",
                "Content-Range": f"bytes {start}-{stop - 1}/{len(payload)}",
            },
        )
        response.content_length = stop - start
        await response.prepare(request)
        if request.method == "HEAD":
            return response
        for offset in range(start, stop, _THROTTLE_CHUNK):
            await response.write(payload[offset : min(offset + _THROTTLE_CHUNK, stop)])
            await asyncio.sleep(0.002)
        return response

    async def plain_handler(request: web.Request) -> web.Response:
        return web.Response(body=payload, content_type="application/octet-stream")

    app = web.Application()
    app.router.add_get("/files/resource.bin", file_handler)
    app.router.add_get("/throttled/resource.bin", throttled_handler)
    app.router.add_get("/plain/resource.bin", plain_handler)
    return app


class _RangeServer:
    """HTTP server running in a background thread.

    A separate loop keeps the server reachable from sync CLI tests, whose
    command runs its own event loop.
    """

    def __init__(self, app: web.Application) -> None:
        self._app = app
        self._base_url: str | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._runner: web.AppRunner | None = None
        self._started = threading.Event()
        self._error: BaseException | None = None

    @property
    def base_url(self) -> str:
        if self._base_url is None:
            raise RuntimeError("Server not started")
        return self._base_url

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        self._started.wait(timeout=10)
        if self._error is not None:
            raise RuntimeError(f"Server failed to start: {self._error}") from self._error
        if self._base_url is None:
            raise RuntimeError("Server failed to start (timeout)")

    def stop(self) -> None:
        if self._loop and self._runner:
            future = asyncio.run_coroutine_threadsafe(
                self._runner.cleanup(), self._loop
            )
            future.result(timeout=5)
        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)
        if self._thread:
            self._thread.join(timeout=5)

    def _run_server(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        try:
            self._loop.run_until_complete(self._start_server())
            self._started.set()
            self._loop.run_forever()
        except BaseException as e:
            self._error = e
            self._started.set()
        finally:
            self._loop.close()

    async def _start_server(self) -> None:
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()

        site = web.TCPSite(self._runner, host="127.0.0.1", port=0)
        await site.start()

        sockets = site._server.sockets if site._server else []
        if not sockets:
            raise RuntimeError("Failed to bind server socket")
        port = sockets[0].getsockname()[1]
        self._base_url = f"http://127.0.0.1:{port}"


@pytest.fixture(scope="session")
def served_resource(tmp_path_factory) -> t.Iterator[ServedResource]:
    """Serve a 1,000,000 byte resource three ways and yield its URLs."""
    payload = make_payload(RESOURCE_SIZE)
    file_path = tmp_path_factory.mktemp("served") / "resource.bin"
    file_path.write_bytes(payload)

    server = _RangeServer(_build_app(payload, file_path))
    server.start()
    try:
        yield ServedResource(base_url=server.base_url, payload=payload)
    finally:
        server.stop()
