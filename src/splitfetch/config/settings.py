import enum
import typing as t
from dataclasses import dataclass, fields


class Environment(enum.StrEnum):
    """Runtime environment for the application.

    Drives logging format only: human readable output in development,
    structured JSON in production.
    """

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(enum.StrEnum):
    """Log levels understood by loguru."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class Settings:
    """Immutable settings container used to bootstrap the app.

    Defaults mirror the session defaults so that the CLI and library
    behave the same when nothing is overridden.
    """

    environment: Environment = Environment.DEVELOPMENT
    log_level: LogLevel = LogLevel.INFO
    block_count: int = 16
    buffer_size: int = 1024
    timeout: float | None = None
    durable_writes: bool = True

    def __post_init__(self) -> None:
        if self.block_count < 1:
            raise ValueError("block_count must be at least 1")
        if self.buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive when set")


def build_settings(**overrides: t.Any) -> Settings:
    """Build Settings from keyword overrides, ignoring None values.

    Lets CLI options that were not supplied fall back to the defaults.

    Raises:
        TypeError: If an override does not name a Settings field.
    """
    known = {field.name for field in fields(Settings)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
