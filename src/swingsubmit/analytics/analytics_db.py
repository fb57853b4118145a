"""SQLAlchemy models for the analytics store."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base declarative class."""


class UserAnalysisDataModel(Base):
    __tablename__ = "user_analysis_data"
    __table_args__ = (UniqueConstraint("session_id", "email", name="uq_session_email"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    stroke_type: Mapped[str | None] = mapped_column(String(32))
    handedness: Mapped[str | None] = mapped_column(String(16))
    experience: Mapped[str | None] = mapped_column(String(32))
    ai_analysis: Mapped[str | None] = mapped_column(Text)
    ai_drills: Mapped[str | None] = mapped_column(Text)
    swing_score: Mapped[float | None] = mapped_column(Float)
    feedback_rating: Mapped[int | None] = mapped_column(Integer)
    feedback_helpful: Mapped[bool | None] = mapped_column(Boolean)
    feedback_comments: Mapped[str | None] = mapped_column(Text)
    would_recommend: Mapped[bool | None] = mapped_column(Boolean)
    improvement_areas: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


def init_db(engine: Engine) -> None:
    """Create analytics tables if missing."""
    Base.metadata.create_all(engine)
