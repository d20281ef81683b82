"""Logging setup built on loguru.

loguru exposes a single global logger. This module owns its sink
configuration so that library code only ever calls get_logger() and
never touches handlers directly.
"""

import sys
import typing as t

from loguru import logger

from ..config.settings import Environment, LogLevel, Settings

if t.TYPE_CHECKING:
    import loguru

_DEVELOPMENT_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_configured = False


def configure_logger(
    level: LogLevel | str = LogLevel.INFO,
    environment: Environment = Environment.DEVELOPMENT,
) -> None:
    """Replace loguru's sinks with one configured for the environment.

    Production logs are serialised to JSON lines; other environments get
    a compact coloured format on stderr.
    """
    global _configured

    logger.remove()
    logger.configure(extra={"name": "splitfetch"})

    if environment == Environment.PRODUCTION:
        logger.add(sys.stderr, level=str(level), serialize=True)
    else:
        logger.add(
            sys.stderr,
            level=str(level),
            format=_DEVELOPMENT_FORMAT,
            colorize=environment == Environment.DEVELOPMENT,
            backtrace=environment == Environment.DEVELOPMENT,
            diagnose=False,
        )
    _configured = True


def setup_logging(settings: Settings) -> None:
    """Configure logging from application settings."""
    configure_logger(level=settings.log_level, environment=settings.environment)


def get_logger(name: str) -> "loguru.Logger":
    """Return the shared logger bound to a module name.

    Configures logging with defaults on first use so that the library
    works without any explicit setup.
    """
    if not _configured:
        configure_logger()
    return logger.bind(name=name)


def reset_logging() -> None:
    """Drop all sinks and forget configuration. Used for test isolation."""
    global _configured

    logger.remove()
    _configured = False
