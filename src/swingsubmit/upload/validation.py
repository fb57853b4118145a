"""Local pre-flight checks for video submissions."""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import PayloadTooLargeError, UnsupportedMediaError
from ..logging import get_logger
from .upload_models import VideoFile

logger = get_logger(__name__)


@dataclass(slots=True)
class UploadValidator:
    """Reject files that are not videos or exceed the size ceiling."""

    max_file_bytes: int

    def validate(self, video: VideoFile) -> VideoFile:
        content_type = (video.content_type or "").lower()
        if not content_type.startswith("video/"):
            logger.warning(
                "upload.validate.unsupported_media",
                extra={"file_name": video.filename, "content_type": video.content_type},
            )
            raise UnsupportedMediaError(
                f"Unsupported media type '{video.content_type}', a video file is required"
            )

        if video.size_bytes > self.max_file_bytes:
            logger.warning(
                "upload.validate.payload_too_large",
                extra={
                    "file_name": video.filename,
                    "size_bytes": video.size_bytes,
                    "limit_bytes": self.max_file_bytes,
                },
            )
            raise PayloadTooLargeError(
                f"File is {video.size_bytes} bytes, limit is {self.max_file_bytes} bytes"
            )

        logger.info(
            "upload.validate.ok",
            extra={
                "file_name": video.filename,
                "size_bytes": video.size_bytes,
                "content_type": video.content_type,
            },
        )
        return video
