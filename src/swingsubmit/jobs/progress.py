"""Synthesized progress for polling.

The curve is cosmetic: a floor when polling starts, a linear climb per
attempt up to a cap below 100, and 100 only once the job is done.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .job_models import ProgressSnapshot

POLLING_FLOOR_PERCENT = 40
POLLING_CAP_PERCENT = 90
PERCENT_PER_ATTEMPT = 2
MESSAGE_BUCKET_SIZE = 10

STARTING_MESSAGE = "AI analyzing your technique..."
DONE_MESSAGE = "Analysis complete!"
PHASE_MESSAGES = (
    "Extracting pose and keyframes...",
    "Comparing with professional technique...",
    "Generating personalized feedback...",
    "Almost done, finalizing analysis...",
)


@dataclass(slots=True)
class ProgressEstimator:
    """Track the last emitted snapshot so the percentage never goes down."""

    floor: int = POLLING_FLOOR_PERCENT
    cap: int = POLLING_CAP_PERCENT
    step: int = PERCENT_PER_ATTEMPT
    _percent: int = field(default=0, init=False)
    _message: str = field(default=STARTING_MESSAGE, init=False)

    def start(self) -> ProgressSnapshot:
        return self._emit(self.floor, STARTING_MESSAGE)

    def after_attempt(self, attempts: int) -> ProgressSnapshot:
        percent = min(self.cap, self.floor + attempts * self.step)
        message = self._message
        if attempts and attempts % MESSAGE_BUCKET_SIZE == 0:
            bucket = attempts // MESSAGE_BUCKET_SIZE
            message = PHASE_MESSAGES[bucket % len(PHASE_MESSAGES)]
        return self._emit(percent, message)

    def done(self) -> ProgressSnapshot:
        return self._emit(100, DONE_MESSAGE)

    def _emit(self, percent: int, message: str) -> ProgressSnapshot:
        self._percent = max(self._percent, min(100, percent))
        self._message = message
        return ProgressSnapshot(percent=self._percent, message=message)
