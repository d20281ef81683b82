"""Download session run states."""

import enum


class RunState(enum.StrEnum):
    """Lifecycle of a DownloadSession job.

    Flow: IDLE -> RUNNING -> (COMPLETED | CANCELLED | FAILED)
    A CANCELLED or FAILED session can be started again and resumes from
    the progress already persisted.
    """

    IDLE = "idle"  # Never started
    RUNNING = "running"  # A job is in flight
    COMPLETED = "completed"  # All slices persisted
    CANCELLED = "cancelled"  # Paused by the caller
    FAILED = "failed"  # A slice failed and aborted the job

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.COMPLETED, RunState.CANCELLED, RunState.FAILED)
