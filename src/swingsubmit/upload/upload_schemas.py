"""Wire schemas for the upload endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PresignedPost(BaseModel):
    url: str = Field(min_length=1)
    fields: dict[str, str] = Field(default_factory=dict)


class UploadUrlResponse(BaseModel):
    """Body of ``POST /upload-url``."""

    presigned: PresignedPost
    s3_key: str = Field(min_length=1)


class NotifyRequest(BaseModel):
    s3_key: str
    email: str
    stroke_type: str
    handedness: str
    original_filename: str
    file_size: int


class NotifyResponse(BaseModel):
    """Body of ``POST /notify``."""

    job_id: str = Field(min_length=1)
