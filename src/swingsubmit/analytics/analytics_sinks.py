"""Analytics store adapters.

Both adapters accept duplicate writes for the same session: analysis saves
are skipped when the session row exists, feedback updates it in place.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

import httpx
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import AnalyticsError
from ..logging import get_logger
from .analytics_db import UserAnalysisDataModel
from .analytics_models import AnalysisRecord, FeedbackRecord

logger = get_logger(__name__)


class AnalyticsSink(Protocol):
    """Store that records analysis outcomes and user feedback."""

    async def save_analysis(self, record: AnalysisRecord) -> None: ...

    async def save_feedback(self, record: FeedbackRecord) -> None: ...


@dataclass(slots=True)
class HttpAnalyticsSink:
    """Post records to the processing backend's analytics endpoints."""

    base_url: str
    timeout_seconds: float = 10.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def save_analysis(self, record: AnalysisRecord) -> None:
        await self._post("save-analysis-data", record.to_payload())
        self.log.info("analytics.http.analysis_saved", extra={"session_id": record.session_id})

    async def save_feedback(self, record: FeedbackRecord) -> None:
        await self._post("save-feedback", record.to_payload())
        self.log.info("analytics.http.feedback_saved", extra={"session_id": record.session_id})

    async def _post(self, path: str, payload: dict) -> None:
        url = f"{self.base_url.rstrip('/')}/{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as exc:
            raise AnalyticsError(f"Analytics request to {url} failed: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise AnalyticsError(f"Analytics request to {url} failed with status {response.status_code}")


class SqlAnalyticsSink:
    """Write records into the ``user_analysis_data`` table."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    async def save_analysis(self, record: AnalysisRecord) -> None:
        await asyncio.to_thread(self.save_analysis_sync, record)

    async def save_feedback(self, record: FeedbackRecord) -> None:
        await asyncio.to_thread(self.save_feedback_sync, record)

    def save_analysis_sync(self, record: AnalysisRecord) -> bool:
        """Insert the analysis row; return False when the session already has one."""
        try:
            with self._session_factory() as session:
                if self._find(session, record.session_id, record.email) is not None:
                    logger.info(
                        "analytics.sql.analysis_exists",
                        extra={"session_id": record.session_id},
                    )
                    return False
                session.add(
                    UserAnalysisDataModel(
                        session_id=record.session_id,
                        email=record.email,
                        stroke_type=record.stroke_type,
                        handedness=record.handedness,
                        experience=record.experience,
                        ai_analysis=record.ai_analysis,
                        ai_drills=record.ai_drills,
                        swing_score=record.swing_score,
                        created_at=record.created_at,
                    )
                )
                session.commit()
        except SQLAlchemyError as exc:
            raise AnalyticsError("Failed to save analysis data") from exc
        return True

    def save_feedback_sync(self, record: FeedbackRecord) -> None:
        """Attach feedback to the session row, inserting one when missing."""
        try:
            with self._session_factory() as session:
                model = self._find(session, record.session_id, record.email)
                if model is None:
                    model = UserAnalysisDataModel(
                        session_id=record.session_id,
                        email=record.email,
                        stroke_type=record.stroke_type or "unknown",
                        created_at=record.created_at,
                    )
                    session.add(model)
                model.feedback_rating = record.rating
                model.feedback_helpful = record.helpful
                model.feedback_comments = record.comments
                model.would_recommend = record.recommend
                if record.improvement_areas is not None:
                    model.improvement_areas = record.improvement_areas
                session.commit()
        except SQLAlchemyError as exc:
            raise AnalyticsError("Failed to save feedback") from exc

    @staticmethod
    def _find(session: Session, session_id: str, email: str) -> UserAnalysisDataModel | None:
        stmt = select(UserAnalysisDataModel).where(
            UserAnalysisDataModel.session_id == session_id,
            UserAnalysisDataModel.email == email,
        )
        return session.scalars(stmt).first()
