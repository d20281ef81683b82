"""HTTP client construction."""

import ssl
import typing as t

import aiohttp
import certifi


def create_ssl_context() -> ssl.SSLContext:
    """Create an SSL context backed by certifi's CA bundle.

    Portable certificate verification, e.g. SSL certs not handled by
    default on macOS with some Python builds.
    """
    return ssl.create_default_context(cafile=certifi.where())


def create_secure_connector(
    ssl_context: ssl.SSLContext | None = None, **connector_kwargs: t.Any
) -> aiohttp.TCPConnector:
    """Create a TCPConnector verifying TLS with the certifi bundle.

    Must be called with a running event loop.
    """
    return aiohttp.TCPConnector(
        ssl=ssl_context or create_ssl_context(), **connector_kwargs
    )


def create_client_session(timeout: float | None = None) -> aiohttp.ClientSession:
    """Create an aiohttp ClientSession suitable for large downloads.

    The caller owns the session and must close it.

    Args:
        timeout: Total timeout in seconds for each request, None to
            disable. Large slices can take a long time so there is no
            default limit.
    """
    return aiohttp.ClientSession(
        connector=create_secure_connector(),
        timeout=aiohttp.ClientTimeout(total=timeout),
    )
