"""Outcome and feedback persistence collaborator."""

from .analytics_models import AnalysisRecord, FeedbackRecord
from .analytics_recorder import AnalyticsRecorder
from .analytics_sinks import AnalyticsSink, HttpAnalyticsSink, SqlAnalyticsSink

__all__ = [
    "AnalysisRecord",
    "AnalyticsRecorder",
    "AnalyticsSink",
    "FeedbackRecord",
    "HttpAnalyticsSink",
    "SqlAnalyticsSink",
]
