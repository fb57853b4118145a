"""Factories wiring the submission pipeline from configuration."""

from __future__ import annotations

from functools import partial

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ..analytics.analytics_db import init_db
from ..analytics.analytics_recorder import AnalyticsRecorder
from ..analytics.analytics_sinks import AnalyticsSink, HttpAnalyticsSink, SqlAnalyticsSink
from ..config import ClientConfig
from ..endpoints.candidates import build_candidates
from ..endpoints.endpoint_probe import EndpointProbe
from ..endpoints.endpoint_resolver import EndpointResolver
from ..upload.upload_session import UploadSession
from ..upload.validation import UploadValidator
from .submission_modes import MultiPhaseSubmission, SingleShotSubmission, SubmissionMode
from .submission_service import SubmissionService


def create_submission_mode(name: str, config: ClientConfig | None = None) -> SubmissionMode:
    """Instantiate submission mode by name."""
    config = config or ClientConfig()
    lower = name.lower()
    if lower == "multi_phase":
        return MultiPhaseSubmission(
            upload_session=UploadSession(
                request_timeout_seconds=config.request_timeout_seconds,
                transfer_timeout_seconds=config.transfer_timeout_seconds,
            ),
            poll_interval_seconds=config.poll_interval_seconds,
            max_poll_attempts=config.max_poll_attempts,
            request_timeout_seconds=config.request_timeout_seconds,
        )
    if lower == "single_shot":
        return SingleShotSubmission(timeout_seconds=config.single_shot_timeout_seconds)
    raise ValueError(f"Unsupported submission mode '{name}'")


def create_analytics_sink(config: ClientConfig) -> AnalyticsSink | None:
    """Database sink when a URL is configured, else HTTP sink, else none."""
    if config.analytics_database_url:
        engine = create_engine(config.analytics_database_url, future=True)
        init_db(engine)
        return SqlAnalyticsSink(sessionmaker(bind=engine, expire_on_commit=False))
    if config.analytics_url:
        return HttpAnalyticsSink(base_url=config.analytics_url)
    return None


def build_submission_service(config: ClientConfig | None = None) -> SubmissionService:
    """Assemble a :class:`SubmissionService` from configuration."""
    config = config or ClientConfig()
    probe = EndpointProbe(timeout_seconds=config.probe_timeout_seconds)
    return SubmissionService(
        validator=UploadValidator(max_file_bytes=config.max_file_bytes),
        resolver=EndpointResolver(probe=probe.probe),
        candidates=partial(
            build_candidates,
            configured_url=config.backend_url,
            origin_host=config.origin_host,
            lan_hosts=tuple(config.lan_hosts),
            lan_port=config.lan_port,
            loopback_urls=tuple(config.loopback_urls),
        ),
        mode=create_submission_mode(config.submission_mode, config),
        recorder=AnalyticsRecorder(sink=create_analytics_sink(config)),
    )
