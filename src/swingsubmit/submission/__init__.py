"""Submission orchestration: one call from file to analysis result."""

from .submission_factory import build_submission_service, create_submission_mode
from .submission_models import ProgressUpdate, SubmissionPhase
from .submission_modes import MultiPhaseSubmission, SingleShotSubmission, SubmissionMode
from .submission_service import SubmissionService

__all__ = [
    "MultiPhaseSubmission",
    "ProgressUpdate",
    "SingleShotSubmission",
    "SubmissionMode",
    "SubmissionPhase",
    "SubmissionService",
    "build_submission_service",
    "create_submission_mode",
]
