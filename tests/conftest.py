"""Pytest configuration and fixtures for splitfetch tests."""

import typing as t
from pathlib import Path

import loguru
import pytest
import pytest_asyncio
from aiohttp import ClientSession
from aioresponses import aioresponses

from splitfetch.downloads import DownloadSession
from splitfetch.infrastructure.logging import reset_logging
from tests.helpers import TEST_URL, RangeResponder, make_payload


@pytest.fixture(autouse=True)
def clean_logging_state():
    """Automatically reset logging before each test for isolation."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def mock_logger(mocker):
    """Provide a mock logger for testing that captures log calls."""
    logger = mocker.Mock(spec=loguru.logger)
    return logger


@pytest_asyncio.fixture
async def aio_client():
    """Provide a real aiohttp ClientSession for integration testing."""
    session = ClientSession()
    yield session
    await session.close()


@pytest.fixture
def mock_http():
    """Activate aioresponses for the duration of a test."""
    with aioresponses() as mock:
        yield mock


@pytest.fixture
def payload() -> bytes:
    """A 10,000 byte resource, served by default at TEST_URL."""
    return make_payload(10_000)


@pytest.fixture
def responder(mock_http, payload) -> RangeResponder:
    """Range-aware server for TEST_URL, with HEAD advertising range support."""
    range_responder = RangeResponder(payload)
    mock_http.head(
        TEST_URL,
        status=200,
        headers={"Accept-Ranges": "bytes", "Content-Length": str(len(payload))},
        repeat=True,
    )
    mock_http.get(TEST_URL, callback=range_responder.handle, repeat=True)
    return range_responder


@pytest.fixture
def target_path(tmp_path: Path) -> Path:
    """Pre-created, empty output file."""
    path = tmp_path / "resource.bin"
    path.touch()
    return path


@pytest.fixture
def make_session(target_path, mock_logger, payload):
    """Factory for sessions over the default payload, without fsync."""

    def _make_session(**kwargs: t.Any) -> DownloadSession:
        options: dict[str, t.Any] = {
            "url": TEST_URL,
            "content_length": len(payload),
            "target_path": target_path,
            "block_count": 4,
            "buffer_size": 256,
            "durable_writes": False,
            "logger": mock_logger,
        }
        options.update(kwargs)
        return DownloadSession(**options)

    return _make_session


@pytest.fixture
def mock_aio_client(mocker):
    """Provide a mocked aiohttp ClientSession for tests that never fetch."""
    mock_client = mocker.Mock(spec=ClientSession)
    mock_client.closed = False
    return mock_client
