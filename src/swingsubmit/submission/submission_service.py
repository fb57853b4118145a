"""Submission orchestrator."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..analytics.analytics_models import AnalysisRecord, FeedbackRecord
from ..analytics.analytics_recorder import AnalyticsRecorder
from ..endpoints.endpoint_models import Candidate
from ..endpoints.endpoint_resolver import EndpointResolver
from ..exceptions import AnalysisTimeoutError, ConnectivityError, SubmissionError
from ..jobs.job_models import ProgressSnapshot
from ..logging import bind_submission_context, clear_submission_context, get_logger
from ..upload.upload_models import SubmissionMetadata, VideoFile
from ..upload.validation import UploadValidator
from .submission_models import ProgressListener, ProgressUpdate, SubmissionPhase
from .submission_modes import SubmissionMode

logger = get_logger(__name__)


@dataclass(slots=True)
class _PhaseTracker:
    """Forward phase events to the listener, keeping percent non-decreasing."""

    listener: ProgressListener | None
    phase: SubmissionPhase | None = None
    percent: int = 0

    def emit(self, phase: SubmissionPhase, snapshot: ProgressSnapshot) -> None:
        self.percent = max(self.percent, snapshot.percent)
        self.phase = phase
        logger.info(
            "submission.phase",
            extra={"phase": phase.value, "percent": self.percent, "status_message": snapshot.message},
        )
        if self.listener is not None:
            self.listener(ProgressUpdate(phase, ProgressSnapshot(self.percent, snapshot.message)))


@dataclass(slots=True)
class SubmissionService:
    """Validate, resolve an endpoint, run the configured mode, persist.

    Every call re-resolves the endpoint. A phase failure short-circuits the
    rest; nothing already written server-side is rolled back.
    """

    validator: UploadValidator
    resolver: EndpointResolver
    candidates: Callable[[], Sequence[Candidate]]
    mode: SubmissionMode
    recorder: AnalyticsRecorder = field(default_factory=lambda: AnalyticsRecorder(sink=None))
    log: logging.Logger = field(default_factory=lambda: logger)

    async def submit(
        self,
        video: VideoFile,
        metadata: SubmissionMetadata,
        *,
        session_id: str | None = None,
        on_progress: ProgressListener | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> dict[str, Any]:
        session_id = session_id or uuid.uuid4().hex
        tracker = _PhaseTracker(listener=on_progress)
        bind_submission_context(session_id=session_id)
        try:
            return await self._run(video, metadata, session_id, tracker, cancel_event)
        finally:
            clear_submission_context()

    async def _run(
        self,
        video: VideoFile,
        metadata: SubmissionMetadata,
        session_id: str,
        tracker: _PhaseTracker,
        cancel_event: asyncio.Event | None,
    ) -> dict[str, Any]:
        self.log.info(
            "submission.start",
            extra={
                "session_id": session_id,
                "file_name": video.filename,
                "size_bytes": video.size_bytes,
                "stroke_type": metadata.stroke_type,
            },
        )
        try:
            self.validator.validate(video)

            tracker.emit(SubmissionPhase.RESOLVING, ProgressSnapshot(0, "Connecting to backend..."))
            endpoint = await self.resolver.resolve(self.candidates())
            if endpoint is None:
                raise ConnectivityError("No analysis backend is reachable from this network")

            result = await self.mode.run(endpoint, video, metadata, tracker.emit, cancel_event)
        except AnalysisTimeoutError as exc:
            tracker.emit(SubmissionPhase.TIMEOUT, ProgressSnapshot(tracker.percent, str(exc)))
            self._log_failure(session_id, exc)
            raise
        except SubmissionError as exc:
            tracker.emit(SubmissionPhase.ERROR, ProgressSnapshot(tracker.percent, str(exc)))
            self._log_failure(session_id, exc)
            raise

        tracker.emit(SubmissionPhase.DONE, ProgressSnapshot(100, "Analysis complete!"))
        self._persist(session_id, metadata, result)
        self.log.info("submission.completed", extra={"session_id": session_id})
        return result

    def record_feedback(self, feedback: FeedbackRecord) -> asyncio.Task[None] | None:
        """Hand user feedback to the analytics store without waiting."""
        return self.recorder.persist_feedback(feedback)

    def _persist(self, session_id: str, metadata: SubmissionMetadata, result: dict[str, Any]) -> None:
        try:
            record = AnalysisRecord.from_result(
                session_id=session_id, metadata=metadata, result=result
            )
            self.recorder.persist(record)
        except Exception as exc:
            self.log.error(
                "analytics.persist.failed",
                extra={"session_id": session_id, "error": str(exc)},
                exc_info=exc,
            )

    def _log_failure(self, session_id: str, exc: SubmissionError) -> None:
        self.log.warning(
            "submission.failed",
            extra={
                "session_id": session_id,
                "phase": exc.phase,
                "status_code": exc.status_code,
                "error": str(exc),
            },
        )
