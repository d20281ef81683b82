"""Tests for slice planning."""

import pytest

from splitfetch.downloads import plan_slices


def assert_partitions(tasks, content_length):
    assert tasks[0].start == 0
    for previous, current in zip(tasks, tasks[1:]):
        assert current.start == previous.end
    assert tasks[-1].end == content_length
    assert sum(task.width for task in tasks) == content_length


class TestPlanSlices:
    """Test range partitioning."""

    def test_one_million_bytes_in_four_chunks(self):
        tasks = plan_slices(1_000_000, 4)

        assert [(task.start, task.end) for task in tasks] == [
            (0, 250_000),
            (250_000, 500_000),
            (500_000, 750_000),
            (750_000, 1_000_000),
        ]

    @pytest.mark.parametrize("content_length", [1, 2, 7, 100, 1023, 1024, 99_991])
    @pytest.mark.parametrize("chunk_count", [1, 2, 3, 16, 64, 1000])
    def test_partitions_range_exactly(self, content_length, chunk_count):
        tasks = plan_slices(content_length, chunk_count)

        assert_partitions(tasks, content_length)
        assert len(tasks) <= chunk_count
        assert all(task.downloaded_bytes == 0 for task in tasks)

    def test_uneven_split_puts_remainder_in_last_slice(self):
        tasks = plan_slices(10, 4)

        assert [(task.start, task.end) for task in tasks] == [
            (0, 3),
            (3, 6),
            (6, 9),
            (9, 10),
        ]

    def test_more_chunks_than_bytes_yields_single_byte_slices(self):
        tasks = plan_slices(3, 16)

        assert [(task.start, task.end) for task in tasks] == [(0, 1), (1, 2), (2, 3)]

    def test_single_chunk_covers_everything(self):
        tasks = plan_slices(4096, 1)

        assert len(tasks) == 1
        assert (tasks[0].start, tasks[0].end) == (0, 4096)

    @pytest.mark.parametrize(
        "content_length, chunk_count", [(0, 4), (-1, 4), (100, 0), (100, -2)]
    )
    def test_rejects_non_positive_arguments(self, content_length, chunk_count):
        with pytest.raises(ValueError, match="must be positive"):
            plan_slices(content_length, chunk_count)
