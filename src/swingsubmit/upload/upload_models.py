"""Data structures for the upload protocol."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class VideoFile:
    """Local video file as declared by the caller."""

    path: Path
    filename: str
    content_type: str
    size_bytes: int

    @classmethod
    def from_path(cls, path: Path | str, *, content_type: str | None = None) -> "VideoFile":
        """Describe ``path`` using its stat size and a guessed media type."""
        path = Path(path)
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            path=path,
            filename=path.name,
            content_type=content_type or guessed or "application/octet-stream",
            size_bytes=path.stat().st_size,
        )


@dataclass(slots=True)
class SubmissionMetadata:
    """Identity and category fields sent alongside the video."""

    email: str
    stroke_type: str
    handedness: str
    experience: str = ""

    def as_payload(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "stroke_type": self.stroke_type,
            "handedness": self.handedness,
        }


@dataclass(slots=True)
class UploadTicket:
    """Single-use authorization to write one object to storage."""

    fields: dict[str, str]
    target_url: str
    object_key: str
    spent: bool = field(default=False, compare=False)
