"""Post-download checksum validation."""

from .validator import FileValidator

__all__ = ["FileValidator"]
