"""Slice task model: one byte range of the resource and its progress."""

import typing as t

from pydantic import BaseModel, Field, model_validator


class SliceTask(BaseModel):
    """A contiguous byte range of the resource, downloaded independently.

    Ranges are half-open: the slice covers offsets ``start`` up to but not
    including ``end``. ``downloaded_bytes`` counts bytes of this slice that
    have been persisted, starting at ``start``. Only the writer advances it,
    while holding its lock.
    """

    start: int = Field(ge=0, description="First byte offset of the slice")
    end: int = Field(ge=0, description="Offset one past the last byte")
    downloaded_bytes: int = Field(
        default=0,
        ge=0,
        description="Bytes of this slice already written to disk",
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> "SliceTask":
        if self.end <= self.start:
            raise ValueError(f"Empty slice: start={self.start}, end={self.end}")
        if self.downloaded_bytes > self.width:
            raise ValueError(
                f"downloaded_bytes {self.downloaded_bytes} exceeds slice "
                f"width {self.width}"
            )
        return self

    @property
    def width(self) -> int:
        return self.end - self.start

    @property
    def next_offset(self) -> int:
        """Absolute file offset of the next byte to fetch."""
        return self.start + self.downloaded_bytes

    @property
    def remaining(self) -> int:
        return self.width - self.downloaded_bytes

    @property
    def is_complete(self) -> bool:
        return self.downloaded_bytes == self.width

    def range_header(self) -> str:
        """HTTP Range value for the part of the slice still missing.

        HTTP byte ranges are inclusive, hence ``end - 1``.
        """
        return f"bytes={self.next_offset}-{self.end - 1}"

    def advance(self, count: int) -> None:
        """Record ``count`` more bytes as persisted.

        Raises:
            ValueError: If count is negative or would overflow the slice.
        """
        if count < 0:
            raise ValueError("Cannot move slice progress backwards")
        if count > self.remaining:
            raise ValueError(
                f"Advancing by {count} overflows slice [{self.start}, {self.end}) "
                f"with {self.remaining} bytes remaining"
            )
        self.downloaded_bytes += count


def validate_partition(tasks: t.Sequence[SliceTask], total: int) -> None:
    """Check that tasks cover [0, total) exactly, in order.

    Raises:
        ValueError: On a gap, an overlap, or a wrong final offset.
    """
    expected_start = 0
    for task in tasks:
        if task.start != expected_start:
            raise ValueError(
                f"Slices do not partition the resource: expected a slice "
                f"starting at {expected_start}, got {task.start}"
            )
        expected_start = task.end
    if expected_start != total:
        raise ValueError(
            f"Slices end at {expected_start} but the resource has {total} bytes"
        )
