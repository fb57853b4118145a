"""Two-phase upload protocol and local pre-flight validation."""

from .upload_models import SubmissionMetadata, UploadTicket, VideoFile
from .upload_session import UploadSession
from .validation import UploadValidator

__all__ = [
    "SubmissionMetadata",
    "UploadSession",
    "UploadTicket",
    "UploadValidator",
    "VideoFile",
]
