"""Submission strategies sharing one interface.

``MultiPhaseSubmission`` runs the presigned upload protocol and polls the
resulting job; ``SingleShotSubmission`` posts the file to ``/upload`` and
receives the analysis synchronously.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..endpoints.endpoint_models import ResolvedEndpoint
from ..exceptions import TransferError
from ..jobs.job_models import ProgressSnapshot
from ..jobs.job_poller import JobPoller
from ..logging import get_logger
from ..upload.upload_models import SubmissionMetadata, VideoFile
from ..upload.upload_session import UploadSession
from .submission_models import Emit, SubmissionPhase

logger = get_logger(__name__)


class SubmissionMode(ABC):
    """Base interface for submission strategies."""

    @abstractmethod
    async def run(
        self,
        endpoint: ResolvedEndpoint,
        video: VideoFile,
        metadata: SubmissionMetadata,
        emit: Emit,
        cancel_event: asyncio.Event | None = None,
    ) -> dict[str, Any]:
        """Submit ``video`` to ``endpoint`` and return the analysis result."""


@dataclass(slots=True)
class MultiPhaseSubmission(SubmissionMode):
    """Authorize, transfer to storage, notify, then poll the job."""

    upload_session: UploadSession = field(default_factory=UploadSession)
    poll_interval_seconds: float = 10.0
    max_poll_attempts: int = 60
    request_timeout_seconds: float = 30.0

    async def run(
        self,
        endpoint: ResolvedEndpoint,
        video: VideoFile,
        metadata: SubmissionMetadata,
        emit: Emit,
        cancel_event: asyncio.Event | None = None,
    ) -> dict[str, Any]:
        emit(SubmissionPhase.AUTHORIZING, ProgressSnapshot(5, "Getting upload authorization..."))
        ticket = await self.upload_session.authorize(endpoint, metadata)

        emit(SubmissionPhase.TRANSFERRING, ProgressSnapshot(10, "Uploading video to cloud..."))
        await self.upload_session.transfer(ticket, video)

        emit(SubmissionPhase.NOTIFYING, ProgressSnapshot(30, "Upload complete, starting analysis..."))
        job = await self.upload_session.notify(endpoint, ticket, metadata, video)

        poller = JobPoller(
            endpoint=endpoint,
            poll_interval_seconds=self.poll_interval_seconds,
            max_attempts=self.max_poll_attempts,
            request_timeout_seconds=self.request_timeout_seconds,
        )
        return await poller.wait(
            job,
            on_progress=lambda snapshot: emit(SubmissionPhase.POLLING, snapshot),
            cancel_event=cancel_event,
        )


@dataclass(slots=True)
class SingleShotSubmission(SubmissionMode):
    """Post the video and metadata to ``/upload`` and wait for the result."""

    timeout_seconds: float = 600.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def run(
        self,
        endpoint: ResolvedEndpoint,
        video: VideoFile,
        metadata: SubmissionMetadata,
        emit: Emit,
        cancel_event: asyncio.Event | None = None,
    ) -> dict[str, Any]:
        emit(SubmissionPhase.TRANSFERRING, ProgressSnapshot(10, "Processing video with AI..."))
        url = endpoint.url_for("upload")
        form = {
            "email": metadata.email,
            "stroke_type": metadata.stroke_type,
            "handedness": metadata.handedness,
            "experience": metadata.experience,
        }
        try:
            with video.path.open("rb") as handle:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.post(
                        url,
                        data=form,
                        files={"video": (video.filename, handle, video.content_type)},
                    )
        except (httpx.HTTPError, OSError) as exc:
            self.log.error("submission.single_shot.transport_error", extra={"url": url, "error": str(exc)})
            raise TransferError("Upload failed", detail=str(exc)) from exc

        if not 200 <= response.status_code < 300:
            self.log.error(
                "submission.single_shot.rejected",
                extra={"url": url, "status_code": response.status_code},
            )
            raise TransferError("Upload failed", status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise TransferError("Analysis response is not JSON", detail=str(exc)) from exc
        if not isinstance(body, dict):
            raise TransferError("Analysis response must be a JSON object")

        self.log.info("submission.single_shot.done", extra={"url": url})
        return body
