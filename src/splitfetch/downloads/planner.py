"""Range planning: split a resource into slice tasks."""

import math

from ..domain.slices import SliceTask


def plan_slices(content_length: int, chunk_count: int) -> list[SliceTask]:
    """Split ``[0, content_length)`` into at most ``chunk_count`` slices.

    Every slice except possibly the last is ``ceil(content_length /
    chunk_count)`` bytes wide. When the resource is smaller than the chunk
    count, or the division leaves the tail empty, fewer slices are returned
    rather than empty ones.

    Raises:
        ValueError: If either argument is not positive.
    """
    if content_length <= 0:
        raise ValueError(f"content_length must be positive, got {content_length}")
    if chunk_count <= 0:
        raise ValueError(f"chunk_count must be positive, got {chunk_count}")

    block_size = math.ceil(content_length / chunk_count)
    return [
        SliceTask(start=start, end=min(start + block_size, content_length))
        for start in range(0, content_length, block_size)
    ]
