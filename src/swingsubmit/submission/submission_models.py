"""Phase events emitted to the submitting caller."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from ..jobs.job_models import ProgressSnapshot


class SubmissionPhase(StrEnum):
    """Linear phase sequence of one submission."""

    RESOLVING = "resolving"
    AUTHORIZING = "authorizing"
    TRANSFERRING = "transferring"
    NOTIFYING = "notifying"
    POLLING = "polling"
    DONE = "done"
    ERROR = "error"
    TIMEOUT = "timeout"


@dataclass(frozen=True, slots=True)
class ProgressUpdate:
    phase: SubmissionPhase
    snapshot: ProgressSnapshot


Emit = Callable[[SubmissionPhase, ProgressSnapshot], None]
ProgressListener = Callable[[ProgressUpdate], None]
