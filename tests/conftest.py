from __future__ import annotations

import os
from pathlib import Path

import pytest

from swingsubmit.upload.upload_models import SubmissionMetadata, VideoFile
from tests.mocks.http import HttpRouter, configure_httpx

for _name in list(os.environ):
    if _name.startswith("SWINGSUBMIT_"):
        os.environ.pop(_name)


@pytest.fixture
def http_router(monkeypatch) -> HttpRouter:
    return configure_httpx(monkeypatch, HttpRouter())


@pytest.fixture
def video_file(tmp_path: Path) -> VideoFile:
    path = tmp_path / "forehand.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42video-bytes")
    return VideoFile.from_path(path)


@pytest.fixture
def metadata() -> SubmissionMetadata:
    return SubmissionMetadata(
        email="player@example.com",
        stroke_type="forehand",
        handedness="right",
        experience="intermediate",
    )
