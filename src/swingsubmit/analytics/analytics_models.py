"""Records handed to the analytics store."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..upload.upload_models import SubmissionMetadata


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class AnalysisRecord:
    """Outcome of one successful submission, keyed by session id."""

    session_id: str
    email: str
    stroke_type: str | None = None
    handedness: str | None = None
    experience: str | None = None
    ai_analysis: str | None = None
    ai_drills: str | None = None
    swing_score: float | None = None
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_result(
        cls,
        *,
        session_id: str,
        metadata: SubmissionMetadata,
        result: dict[str, Any],
    ) -> "AnalysisRecord":
        score = result.get("swing_score", result.get("score"))
        return cls(
            session_id=session_id,
            email=metadata.email,
            stroke_type=metadata.stroke_type,
            handedness=metadata.handedness,
            experience=metadata.experience or None,
            ai_analysis=json.dumps(result.get("feedback") or []),
            ai_drills=json.dumps(result.get("drills") or []),
            swing_score=float(score) if isinstance(score, (int, float)) else None,
        )

    def to_payload(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["created_at"] = self.created_at.isoformat()
        return payload


@dataclass(slots=True)
class FeedbackRecord:
    """User feedback about an analysis, keyed by session id."""

    session_id: str
    email: str
    stroke_type: str | None = None
    rating: int | None = None
    helpful: bool | None = None
    comments: str | None = None
    recommend: bool | None = None
    improvement_areas: str | None = None
    created_at: datetime = field(default_factory=_utcnow)

    def to_payload(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["created_at"] = self.created_at.isoformat()
        return payload
