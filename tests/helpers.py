"""Shared helpers for splitfetch tests."""

import asyncio
import hashlib
import typing as t
from http import HTTPStatus

from aioresponses import CallbackResult

TEST_URL = "https://example.com/files/resource.bin"


def make_payload(size: int) -> bytes:
    """Deterministic, non-repeating-looking content of ``size`` bytes."""
    return bytes((i * 31 + i // 251) % 256 for i in range(size))


def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class RangeResponder:
    """Serves byte ranges of a payload through an aioresponses callback.

    Records every Range header it receives. Per-slice behaviour can be
    tuned through ``delays`` (seconds before responding, keyed by the first
    requested offset) and ``failures`` (HTTP status to return instead).
    """

    def __init__(self, payload: bytes) -> None:
        self.payload = payload
        self.requests: list[str] = []
        self.request_kwargs: list[dict[str, t.Any]] = []
        self.delays: dict[int, float] = {}
        self.default_delay = 0.0
        self.failures: dict[int, int] = {}
        self.ignore_range = False
        self.truncate_by = 0

    async def handle(self, url: t.Any, **kwargs: t.Any) -> CallbackResult:
        self.request_kwargs.append(kwargs)
        range_header = (kwargs.get("headers") or {}).get("Range", "")
        self.requests.append(range_header)
        first, last = (
            int(part) for part in range_header.removeprefix("bytes=").split("-")
        )

        delay = self.delays.get(first, self.default_delay)
        if delay:
            await asyncio.sleep(delay)

        if first in self.failures:
            status = self.failures[first]
            return CallbackResult(
                status=status, body=b"error", reason=HTTPStatus(status).phrase
            )
        if self.ignore_range:
            return CallbackResult(status=200, body=self.payload, reason="OK")

        body = self.payload[first : last + 1]
        if self.truncate_by:
            body = body[: -self.truncate_by]
        return CallbackResult(
            status=206,
            body=body,
            reason=HTTPStatus.PARTIAL_CONTENT.phrase,
            headers={
                "Content-Range": f"bytes {first}-{last}/{len(self.payload)}",
            },
        )


async def wait_for_condition(
    condition: t.Callable[[], bool], timeout: float = 2.0, interval: float = 0.005
) -> None:
    """Poll ``condition`` until true, failing the test on timeout."""
    async with asyncio.timeout(timeout):
        while not condition():
            await asyncio.sleep(interval)
