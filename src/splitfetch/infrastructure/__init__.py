"""Infrastructure - logging and HTTP client construction."""

from .http import (
    create_client_session,
    create_secure_connector,
    create_ssl_context,
)
from .logging import configure_logger, get_logger, reset_logging, setup_logging

__all__ = [
    "configure_logger",
    "create_client_session",
    "create_secure_connector",
    "create_ssl_context",
    "get_logger",
    "reset_logging",
    "setup_logging",
]
