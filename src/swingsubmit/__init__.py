"""SwingSubmit: video submission and analysis-job orchestration client.

Typical use::

    service = build_submission_service(load_config())
    result = await service.submit(VideoFile.from_path("forehand.mp4"), metadata)
"""

from .config import ClientConfig, load_config
from .submission import (
    ProgressUpdate,
    SubmissionPhase,
    SubmissionService,
    build_submission_service,
)
from .upload import SubmissionMetadata, VideoFile

__all__ = [
    "ClientConfig",
    "ProgressUpdate",
    "SubmissionMetadata",
    "SubmissionPhase",
    "SubmissionService",
    "VideoFile",
    "build_submission_service",
    "load_config",
]
