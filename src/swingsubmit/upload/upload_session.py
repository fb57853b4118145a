"""Two-phase upload protocol: authorize, transfer, notify."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from ..endpoints.endpoint_models import ResolvedEndpoint
from ..exceptions import AuthorizationError, NotifyError, TransferError
from ..jobs.job_models import Job, JobStatus
from ..logging import get_logger
from .upload_models import SubmissionMetadata, UploadTicket, VideoFile
from .upload_schemas import NotifyRequest, NotifyResponse, UploadUrlResponse

logger = get_logger(__name__)


@dataclass(slots=True)
class UploadSession:
    """Drive one file through the presigned-upload protocol.

    Every step is single-attempt. A ticket is spent as soon as a transfer is
    attempted with it; a retry needs a fresh ``authorize``.
    """

    request_timeout_seconds: float = 30.0
    transfer_timeout_seconds: float = 600.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def authorize(
        self, endpoint: ResolvedEndpoint, metadata: SubmissionMetadata
    ) -> UploadTicket:
        url = endpoint.url_for("upload-url")
        try:
            async with httpx.AsyncClient(timeout=self.request_timeout_seconds) as client:
                response = await client.post(url, json=metadata.as_payload())
        except httpx.HTTPError as exc:
            self.log.error("upload.authorize.transport_error", extra={"url": url, "error": str(exc)})
            raise AuthorizationError("Failed to get upload URL", detail=str(exc)) from exc

        if not 200 <= response.status_code < 300:
            self.log.error(
                "upload.authorize.rejected",
                extra={"url": url, "status_code": response.status_code},
            )
            raise AuthorizationError("Failed to get upload URL", status_code=response.status_code)

        try:
            body = UploadUrlResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            self.log.error("upload.authorize.malformed", extra={"url": url, "error": str(exc)})
            raise AuthorizationError("Upload authorization response is malformed", detail=str(exc)) from exc

        ticket = UploadTicket(
            fields=dict(body.presigned.fields),
            target_url=body.presigned.url,
            object_key=body.s3_key,
        )
        self.log.info(
            "upload.authorize.done",
            extra={"object_key": ticket.object_key, "target_url": ticket.target_url},
        )
        return ticket

    async def transfer(self, ticket: UploadTicket, video: VideoFile) -> None:
        if ticket.spent:
            raise TransferError("Upload ticket was already used; re-authorize to retry")
        ticket.spent = True

        self.log.info(
            "upload.transfer.start",
            extra={
                "object_key": ticket.object_key,
                "file_name": video.filename,
                "size_bytes": video.size_bytes,
            },
        )
        try:
            with video.path.open("rb") as handle:
                async with httpx.AsyncClient(timeout=self.transfer_timeout_seconds) as client:
                    response = await client.post(
                        ticket.target_url,
                        data=ticket.fields,
                        files={"file": (video.filename, handle, video.content_type)},
                    )
        except (httpx.HTTPError, OSError) as exc:
            self.log.error(
                "upload.transfer.transport_error",
                extra={"object_key": ticket.object_key, "error": str(exc)},
            )
            raise TransferError("Upload failed", detail=str(exc)) from exc

        if not 200 <= response.status_code < 300:
            self.log.error(
                "upload.transfer.rejected",
                extra={"object_key": ticket.object_key, "status_code": response.status_code},
            )
            raise TransferError("Upload failed", status_code=response.status_code)

        self.log.info("upload.transfer.done", extra={"object_key": ticket.object_key})

    async def notify(
        self,
        endpoint: ResolvedEndpoint,
        ticket: UploadTicket,
        metadata: SubmissionMetadata,
        video: VideoFile,
    ) -> Job:
        url = endpoint.url_for("notify")
        payload = NotifyRequest(
            s3_key=ticket.object_key,
            original_filename=video.filename,
            file_size=video.size_bytes,
            **metadata.as_payload(),
        ).model_dump()

        try:
            async with httpx.AsyncClient(timeout=self.request_timeout_seconds) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as exc:
            self._log_orphan(ticket, reason=str(exc))
            raise NotifyError("Failed to start analysis", detail=str(exc)) from exc

        if not 200 <= response.status_code < 300:
            self._log_orphan(ticket, reason=f"status {response.status_code}")
            raise NotifyError("Failed to start analysis", status_code=response.status_code)

        try:
            body = NotifyResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            self._log_orphan(ticket, reason="malformed response")
            raise NotifyError("Notify response is missing job_id", detail=str(exc)) from exc

        self.log.info(
            "upload.notify.done",
            extra={"object_key": ticket.object_key, "job_id": body.job_id},
        )
        return Job(id=body.job_id, status=JobStatus.QUEUED)

    def _log_orphan(self, ticket: UploadTicket, *, reason: str) -> None:
        # the stored object is left in place; there is no cleanup sweep
        self.log.warning(
            "upload.notify.failed_orphaned_object",
            extra={"object_key": ticket.object_key, "reason": reason},
        )
