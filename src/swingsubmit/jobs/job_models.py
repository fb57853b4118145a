"""Data structures for analysis jobs."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class JobStatus(StrEnum):
    """Server-side job lifecycle as observed by status reads."""

    PREPARING = "preparing"
    QUEUED = "queued"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"

    @classmethod
    def parse(cls, value: str | None) -> "JobStatus":
        """Map a wire status to a member; unknown values count as running."""
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.RUNNING


@dataclass(slots=True)
class Job:
    """Server-tracked unit of analysis work. The client only observes it."""

    id: str
    status: JobStatus = JobStatus.QUEUED
    result: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    """Cosmetic progress estimate recomputed on every polling tick."""

    percent: int
    message: str
