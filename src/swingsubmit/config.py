"""Client configuration for SwingSubmit.

Values are read from ``SWINGSUBMIT_*`` environment variables. List values
(``lan_hosts``, ``loopback_urls``) are given as JSON arrays, e.g.
``SWINGSUBMIT_LAN_HOSTS='["192.168.1.20", "10.0.0.5"]'``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024

DEFAULT_LAN_HOSTS = (
    "192.168.1.118",
    "192.168.1.1",
    "192.168.0.1",
    "10.0.0.1",
    "172.20.10.2",
    "192.168.43.2",
)
DEFAULT_LOOPBACK_URLS = (
    "http://localhost:5050",
    "http://127.0.0.1:5050",
)


class ClientConfig(BaseSettings):
    """Settings container for the submission client."""

    model_config = SettingsConfigDict(env_prefix="SWINGSUBMIT_")

    backend_url: str | None = Field(
        default=None,
        description="Explicitly configured processing endpoint, probed first.",
    )
    origin_host: str | None = Field(
        default=None,
        description="Host the client is served from; enables LAN guesses when not loopback.",
    )
    lan_hosts: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LAN_HOSTS),
        description="Ordered local-network host guesses.",
    )
    lan_port: int = Field(default=5050, ge=1, le=65535)
    loopback_urls: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LOOPBACK_URLS),
        description="Fixed loopback fallbacks, probed last.",
    )
    probe_timeout_seconds: float = Field(default=5.0, gt=0.0)
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout for authorize/notify/status requests.",
    )
    transfer_timeout_seconds: float = Field(
        default=600.0,
        gt=0.0,
        description="Timeout for the storage write of the whole file.",
    )
    single_shot_timeout_seconds: float = Field(
        default=600.0,
        gt=0.0,
        description="Timeout for the synchronous /upload call.",
    )
    poll_interval_seconds: float = Field(default=10.0, ge=0.0)
    max_poll_attempts: int = Field(default=60, ge=1)
    max_file_bytes: int = Field(default=400 * MIB, ge=1)
    submission_mode: Literal["multi_phase", "single_shot"] = "multi_phase"
    analytics_url: str | None = Field(
        default=None,
        description="Base URL of the HTTP analytics store (save-analysis-data/save-feedback).",
    )
    analytics_database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL for the analytics table; takes precedence over analytics_url.",
    )


def load_config() -> ClientConfig:
    """Load configuration from the environment."""
    return ClientConfig()


__all__ = ["ClientConfig", "load_config", "MIB"]
