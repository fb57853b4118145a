from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest
import structlog

from swingsubmit.analytics.analytics_models import AnalysisRecord, FeedbackRecord
from swingsubmit.analytics.analytics_recorder import AnalyticsRecorder
from swingsubmit.config import MIB
from swingsubmit.endpoints.endpoint_models import Candidate
from swingsubmit.endpoints.endpoint_probe import EndpointProbe
from swingsubmit.endpoints.endpoint_resolver import EndpointResolver
from swingsubmit.exceptions import (
    AnalysisTimeoutError,
    ConnectivityError,
    NotifyError,
    PayloadTooLargeError,
    TransferError,
    UnsupportedMediaError,
)
from swingsubmit.submission.submission_models import ProgressUpdate, SubmissionPhase
from swingsubmit.submission.submission_modes import MultiPhaseSubmission, SingleShotSubmission
from swingsubmit.submission.submission_service import SubmissionService
from swingsubmit.upload.upload_models import VideoFile
from swingsubmit.upload.validation import UploadValidator
from tests.mocks.http import BASE_URL, STORAGE_URL, DummyHTTPResponse, HttpRouter


class RecordingSink:
    def __init__(self, *, fail: bool = False) -> None:
        self.analyses: list[AnalysisRecord] = []
        self.feedback: list[FeedbackRecord] = []
        self.fail = fail

    async def save_analysis(self, record: AnalysisRecord) -> None:
        self.analyses.append(record)
        if self.fail:
            raise RuntimeError("store unavailable")

    async def save_feedback(self, record: FeedbackRecord) -> None:
        self.feedback.append(record)
        if self.fail:
            raise RuntimeError("store unavailable")


def build_service(sink: RecordingSink | None = None, *, max_attempts: int = 60) -> SubmissionService:
    return SubmissionService(
        validator=UploadValidator(max_file_bytes=400 * MIB),
        resolver=EndpointResolver(probe=EndpointProbe(timeout_seconds=0.5).probe),
        candidates=lambda: [Candidate(BASE_URL)],
        mode=MultiPhaseSubmission(poll_interval_seconds=0, max_poll_attempts=max_attempts),
        recorder=AnalyticsRecorder(sink=sink),
    )


def route_happy_path(router: HttpRouter) -> None:
    router.add("GET", f"{BASE_URL}/health", DummyHTTPResponse(200, {"status": "ok"}))
    router.add(
        "POST",
        f"{BASE_URL}/upload-url",
        DummyHTTPResponse(200, {"presigned": {"url": STORAGE_URL, "fields": {"k": "v"}}, "s3_key": "abc"}),
    )
    router.add("POST", STORAGE_URL, DummyHTTPResponse(200))
    router.add("POST", f"{BASE_URL}/notify", DummyHTTPResponse(200, {"job_id": "J1"}))
    router.add(
        "GET",
        f"{BASE_URL}/status/J1",
        DummyHTTPResponse(200, {"status": "done", "result": {"score": 8}}),
    )


@pytest.mark.asyncio
async def test_submit_end_to_end_persists_once(http_router: HttpRouter, video_file, metadata) -> None:
    route_happy_path(http_router)
    sink = RecordingSink()
    service = build_service(sink)
    updates: list[ProgressUpdate] = []

    result = await service.submit(
        video_file, metadata, session_id="session-1", on_progress=updates.append
    )
    await service.recorder.drain()

    assert result == {"score": 8}
    assert len(sink.analyses) == 1
    record = sink.analyses[0]
    assert record.session_id == "session-1"
    assert record.email == "player@example.com"
    assert record.stroke_type == "forehand"
    assert record.swing_score == 8.0

    phases = [update.phase for update in updates]
    assert phases[0] is SubmissionPhase.RESOLVING
    ordered = [
        SubmissionPhase.RESOLVING,
        SubmissionPhase.AUTHORIZING,
        SubmissionPhase.TRANSFERRING,
        SubmissionPhase.NOTIFYING,
        SubmissionPhase.POLLING,
        SubmissionPhase.DONE,
    ]
    assert [phase for index, phase in enumerate(phases) if index == 0 or phase != phases[index - 1]] == ordered
    percents = [update.snapshot.percent for update in updates]
    assert percents == sorted(percents)
    assert percents[-1] == 100


@pytest.mark.asyncio
async def test_oversized_file_rejected_without_network(http_router: HttpRouter, metadata) -> None:
    route_happy_path(http_router)
    big = VideoFile(
        path=Path("/nonexistent/big.mp4"),
        filename="big.mp4",
        content_type="video/mp4",
        size_bytes=400 * MIB + 1,
    )
    updates: list[ProgressUpdate] = []

    with pytest.raises(PayloadTooLargeError):
        await build_service().submit(big, metadata, on_progress=updates.append)

    assert http_router.calls == []
    assert [update.phase for update in updates] == [SubmissionPhase.ERROR]


@pytest.mark.asyncio
async def test_non_video_rejected_without_network(http_router: HttpRouter, metadata, tmp_path) -> None:
    path = tmp_path / "photo.png"
    path.write_bytes(b"png")

    with pytest.raises(UnsupportedMediaError):
        await build_service().submit(VideoFile.from_path(path), metadata)

    assert http_router.calls == []


@pytest.mark.asyncio
async def test_no_reachable_endpoint_raises_connectivity_error(http_router: HttpRouter, video_file, metadata) -> None:
    http_router.add("GET", f"{BASE_URL}/health", DummyHTTPResponse(503))

    with pytest.raises(ConnectivityError):
        await build_service().submit(video_file, metadata)

    assert [call.url for call in http_router.calls] == [f"{BASE_URL}/health"]


@pytest.mark.asyncio
async def test_transfer_error_prevents_notify(http_router: HttpRouter, video_file, metadata) -> None:
    route_happy_path(http_router)
    http_router.replace("POST", STORAGE_URL, DummyHTTPResponse(403))
    sink = RecordingSink()

    with pytest.raises(TransferError) as excinfo:
        await build_service(sink).submit(video_file, metadata)

    assert excinfo.value.status_code == 403
    assert http_router.calls_to("POST", f"{BASE_URL}/notify") == []
    assert http_router.calls_to("GET", f"{BASE_URL}/status/J1") == []
    assert sink.analyses == []


@pytest.mark.asyncio
async def test_notify_failure_skips_polling(http_router: HttpRouter, video_file, metadata) -> None:
    route_happy_path(http_router)
    http_router.replace("POST", f"{BASE_URL}/notify", DummyHTTPResponse(500))

    with pytest.raises(NotifyError):
        await build_service().submit(video_file, metadata)

    assert http_router.calls_to("GET", f"{BASE_URL}/status/J1") == []


@pytest.mark.asyncio
async def test_polling_timeout_emits_timeout_phase(http_router: HttpRouter, video_file, metadata) -> None:
    route_happy_path(http_router)
    http_router.replace("GET", f"{BASE_URL}/status/J1", DummyHTTPResponse(200, {"status": "running"}))
    updates: list[ProgressUpdate] = []

    with pytest.raises(AnalysisTimeoutError):
        await build_service(max_attempts=3).submit(video_file, metadata, on_progress=updates.append)

    assert updates[-1].phase is SubmissionPhase.TIMEOUT


@pytest.mark.asyncio
async def test_persist_failure_never_reaches_caller(http_router: HttpRouter, video_file, metadata) -> None:
    route_happy_path(http_router)
    sink = RecordingSink(fail=True)
    service = build_service(sink)

    result = await service.submit(video_file, metadata)
    await service.recorder.drain()

    assert result == {"score": 8}
    assert len(sink.analyses) == 1


@pytest.mark.asyncio
async def test_submit_does_not_wait_for_persist(http_router: HttpRouter, video_file, metadata) -> None:
    route_happy_path(http_router)
    release = asyncio.Event()

    class SlowSink(RecordingSink):
        async def save_analysis(self, record: AnalysisRecord) -> None:
            await release.wait()
            await super().save_analysis(record)

    sink = SlowSink()
    service = build_service(sink)

    result = await asyncio.wait_for(service.submit(video_file, metadata), timeout=2)

    assert result == {"score": 8}
    assert sink.analyses == []
    release.set()
    await service.recorder.drain()
    assert len(sink.analyses) == 1


@pytest.mark.asyncio
async def test_each_submission_resolves_again(http_router: HttpRouter, video_file, metadata) -> None:
    route_happy_path(http_router)
    service = build_service()

    await service.submit(video_file, metadata)
    await service.submit(video_file, metadata)

    assert len(http_router.calls_to("GET", f"{BASE_URL}/health")) == 2


@pytest.mark.asyncio
async def test_record_feedback_forwards_to_sink(http_router: HttpRouter) -> None:
    sink = RecordingSink()
    service = build_service(sink)

    service.record_feedback(FeedbackRecord(session_id="s1", email="player@example.com", rating=5))
    await service.recorder.drain()

    assert [record.rating for record in sink.feedback] == [5]


@pytest.mark.asyncio
async def test_single_shot_submission_through_service(http_router: HttpRouter, video_file, metadata) -> None:
    http_router.add("GET", f"{BASE_URL}/health", DummyHTTPResponse(200, {"status": "ok"}))
    http_router.add("POST", f"{BASE_URL}/upload", DummyHTTPResponse(200, {"swing_score": 6, "feedback": ["bend knees"]}))
    sink = RecordingSink()
    service = SubmissionService(
        validator=UploadValidator(max_file_bytes=400 * MIB),
        resolver=EndpointResolver(probe=EndpointProbe(timeout_seconds=0.5).probe),
        candidates=lambda: [Candidate(BASE_URL)],
        mode=SingleShotSubmission(),
        recorder=AnalyticsRecorder(sink=sink),
    )
    updates: list[ProgressUpdate] = []

    result = await service.submit(video_file, metadata, session_id="single-1", on_progress=updates.append)
    await service.recorder.drain()

    assert result == {"swing_score": 6, "feedback": ["bend knees"]}
    assert [update.phase for update in updates] == [
        SubmissionPhase.RESOLVING,
        SubmissionPhase.TRANSFERRING,
        SubmissionPhase.DONE,
    ]
    assert len(sink.analyses) == 1
    assert sink.analyses[0].session_id == "single-1"
    assert sink.analyses[0].swing_score == 6.0
    assert http_router.calls_to("POST", f"{BASE_URL}/upload-url") == []


@pytest.mark.asyncio
async def test_session_id_reaches_every_submission_log_record(
    http_router: HttpRouter, video_file, metadata, caplog
) -> None:
    route_happy_path(http_router)
    service = build_service(RecordingSink())

    with caplog.at_level(logging.INFO):
        await service.submit(video_file, metadata, session_id="sess-XYZ")
        await service.recorder.drain()

    by_event = {record.getMessage(): record for record in caplog.records}
    for event in (
        "endpoint.resolve.selected",
        "upload.transfer.done",
        "jobs.poll.done",
        "submission.phase",
        "submission.completed",
        "analytics.persist.done",
    ):
        assert getattr(by_event[event], "session_id", None) == "sess-XYZ", event
    assert "session_id" not in structlog.contextvars.get_contextvars()


@pytest.mark.asyncio
async def test_session_context_cleared_after_failure(http_router: HttpRouter, video_file, metadata) -> None:
    http_router.add("GET", f"{BASE_URL}/health", DummyHTTPResponse(503))

    with pytest.raises(ConnectivityError):
        await build_service().submit(video_file, metadata, session_id="sess-failed")

    assert "session_id" not in structlog.contextvars.get_contextvars()
