"""Immutable configuration for creating a download session."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

DEFAULT_BLOCK_COUNT = 16
DEFAULT_BUFFER_SIZE = 1024


class SessionConfig(BaseModel):
    """What to download, where to, and how to split it.

    Validated once on construction and frozen afterwards.

    Example:
        config = SessionConfig(
            url="https://example.com/big.iso",
            target_path=Path("big.iso"),
            block_count=8,
        )
    """

    model_config = ConfigDict(frozen=True)

    url: HttpUrl = Field(description="HTTP/HTTPS URL of the resource")
    target_path: Path = Field(description="Destination file, made absolute")
    block_count: int = Field(
        default=DEFAULT_BLOCK_COUNT,
        ge=1,
        description="Number of slices the resource is split into",
    )
    buffer_size: int = Field(
        default=DEFAULT_BUFFER_SIZE,
        ge=1,
        description="Maximum bytes read from the network per write",
    )

    @field_validator("target_path")
    @classmethod
    def _make_absolute(cls, value: Path) -> Path:
        return value.expanduser().absolute()
