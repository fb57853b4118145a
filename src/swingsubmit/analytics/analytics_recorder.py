"""Fire-and-forget wrapper around an analytics sink."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field

from ..logging import get_logger
from .analytics_models import AnalysisRecord, FeedbackRecord
from .analytics_sinks import AnalyticsSink

logger = get_logger(__name__)


@dataclass(slots=True)
class AnalyticsRecorder:
    """Schedule sink writes without blocking the caller.

    ``persist`` and ``persist_feedback`` return the scheduled task right away.
    Failures are logged and never propagate.
    """

    sink: AnalyticsSink | None
    log: logging.Logger = field(default_factory=lambda: logger)
    _pending: set[asyncio.Task[None]] = field(default_factory=set, init=False)

    def persist(self, record: AnalysisRecord) -> asyncio.Task[None] | None:
        if self.sink is None:
            return None
        return self._schedule("persist", record.session_id, self.sink.save_analysis(record))

    def persist_feedback(self, record: FeedbackRecord) -> asyncio.Task[None] | None:
        if self.sink is None:
            return None
        return self._schedule("persist_feedback", record.session_id, self.sink.save_feedback(record))

    async def drain(self) -> None:
        """Wait for outstanding writes; used at shutdown and in tests."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _schedule(self, operation: str, session_id: str, write: Awaitable[None]) -> asyncio.Task[None]:
        task = asyncio.create_task(self._guarded(operation, session_id, write))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _guarded(self, operation: str, session_id: str, write: Awaitable[None]) -> None:
        try:
            await write
        except Exception as exc:
            self.log.error(
                f"analytics.{operation}.failed",
                extra={"session_id": session_id, "error": str(exc)},
                exc_info=exc,
            )
            return
        self.log.info(f"analytics.{operation}.done", extra={"session_id": session_id})
