"""Checksum configuration for verifying a completed download."""

import enum
import hashlib
import re
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_HEX_PATTERN: Final = re.compile(r"^[0-9a-f]+$")


class HashAlgorithm(enum.StrEnum):
    """Supported checksum algorithms."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @property
    def hex_length(self) -> int:
        """Length of a hex digest produced by the algorithm."""
        return hashlib.new(self.value).digest_size * 2

    def new(self) -> "hashlib._Hash":
        return hashlib.new(self.value)


class HashConfig(BaseModel):
    """Expected checksum of the downloaded resource."""

    model_config = ConfigDict(frozen=True)

    algorithm: HashAlgorithm = Field(description="Hash algorithm to use")
    expected_hash: str = Field(
        min_length=1,
        description="Expected checksum in hexadecimal form",
    )

    @field_validator("expected_hash")
    @classmethod
    def _normalise_hash(cls, value: str) -> str:
        normalised = value.strip().lower()
        if not _HEX_PATTERN.fullmatch(normalised):
            raise ValueError("Expected hash must be hexadecimal")
        return normalised

    @model_validator(mode="after")
    def _check_length(self) -> "HashConfig":
        if len(self.expected_hash) != self.algorithm.hex_length:
            raise ValueError(
                f"{self.algorithm} hash must be "
                f"{self.algorithm.hex_length} characters"
            )
        return self

    @classmethod
    def from_checksum_string(cls, checksum: str) -> "HashConfig":
        """Parse '<algorithm>:<hash>', e.g. 'sha256:ab12...'."""
        algorithm_part, sep, hash_part = checksum.partition(":")
        if not sep:
            raise ValueError("Checksum must be in format '<algorithm>:<hash>'")
        algorithm_value = algorithm_part.strip().lower()
        try:
            algorithm = HashAlgorithm(algorithm_value)
        except ValueError as exc:
            raise ValueError(
                f"Unsupported hash algorithm '{algorithm_value}'"
            ) from exc

        return cls(algorithm=algorithm, expected_hash=hash_part)
