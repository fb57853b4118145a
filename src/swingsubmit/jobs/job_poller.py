"""Status polling for analysis jobs."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import ValidationError

from ..endpoints.endpoint_models import ResolvedEndpoint
from ..exceptions import AnalysisTimeoutError, ServerAnalysisError, SubmissionCancelledError
from ..logging import get_logger
from .job_models import Job, JobStatus, ProgressSnapshot
from .job_schemas import JobStatusResponse
from .progress import ProgressEstimator

logger = get_logger(__name__)

ProgressCallback = Callable[[ProgressSnapshot], None]


class _TransientPollError(Exception):
    """One status query failed; the loop treats it as a non-terminal tick."""


@dataclass(slots=True)
class JobPoller:
    """Poll ``GET {base}/status/{job_id}`` until the job is terminal.

    Transient query failures count against ``max_attempts`` like any other
    non-terminal tick. Exhausting the budget raises
    :class:`AnalysisTimeoutError`, which is distinct from a server-reported
    error.
    """

    endpoint: ResolvedEndpoint
    poll_interval_seconds: float = 10.0
    max_attempts: int = 60
    request_timeout_seconds: float = 30.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def wait(
        self,
        job: Job,
        *,
        on_progress: ProgressCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> dict[str, Any]:
        progress = ProgressEstimator()
        _notify(on_progress, progress.start())
        attempts = 0

        while True:
            _raise_if_cancelled(cancel_event, job)
            body: JobStatusResponse | None = None
            try:
                body = await self._query_status(job.id)
            except _TransientPollError as exc:
                self.log.warning(
                    "jobs.poll.transient_error",
                    extra={"job_id": job.id, "attempt": attempts + 1, "error": str(exc)},
                )
            # a reply that lands after cancellation is discarded
            _raise_if_cancelled(cancel_event, job)

            if body is not None:
                job.status = JobStatus.parse(body.status)
                result = body.result_payload()
                if job.status is JobStatus.DONE and result is not None:
                    job.result = result
                    self.log.info(
                        "jobs.poll.done",
                        extra={"job_id": job.id, "queries": attempts + 1},
                    )
                    _notify(on_progress, progress.done())
                    return result
                if job.status is JobStatus.ERROR:
                    error = body.error_message()
                    self.log.error(
                        "jobs.poll.server_error",
                        extra={"job_id": job.id, "error": error},
                    )
                    raise ServerAnalysisError("Analysis failed on server", detail=error)

            attempts += 1
            if attempts >= self.max_attempts:
                self.log.warning(
                    "jobs.poll.timeout",
                    extra={"job_id": job.id, "attempts": attempts},
                )
                raise AnalysisTimeoutError(
                    "Analysis timeout, the job may still be processing",
                    detail=f"job_id={job.id}",
                )

            _notify(on_progress, progress.after_attempt(attempts))
            _raise_if_cancelled(cancel_event, job)
            await asyncio.sleep(self.poll_interval_seconds)

    async def _query_status(self, job_id: str) -> JobStatusResponse:
        url = self.endpoint.url_for(f"status/{job_id}")
        try:
            async with httpx.AsyncClient(timeout=self.request_timeout_seconds) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            raise _TransientPollError(str(exc) or type(exc).__name__) from exc
        if not 200 <= response.status_code < 300:
            raise _TransientPollError(f"status {response.status_code}")
        try:
            return JobStatusResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise _TransientPollError("malformed status body") from exc


def _notify(callback: ProgressCallback | None, snapshot: ProgressSnapshot) -> None:
    if callback is not None:
        callback(snapshot)


def _raise_if_cancelled(cancel_event: asyncio.Event | None, job: Job) -> None:
    if cancel_event is not None and cancel_event.is_set():
        logger.info("jobs.poll.cancelled", extra={"job_id": job.id})
        raise SubmissionCancelledError("Submission cancelled while polling")
