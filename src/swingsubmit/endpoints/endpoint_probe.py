"""Liveness probe for a single candidate endpoint."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field

import httpx

from ..logging import get_logger
from .endpoint_models import ProbeResult

logger = get_logger(__name__)


@dataclass(slots=True)
class EndpointProbe:
    """Check ``GET {url}/health`` and measure wall-clock latency.

    ``probe`` never raises: transport errors, timeouts, non-2xx statuses and
    unparsable bodies all yield ``available=False``.
    """

    timeout_seconds: float = 5.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def probe(self, url: str) -> ProbeResult:
        started = time.perf_counter()
        try:
            status_code = await asyncio.wait_for(
                self._check_health(url), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            latency_ms = _elapsed_ms(started)
            self.log.info(
                "endpoint.probe.timeout",
                extra={"url": url, "timeout_seconds": self.timeout_seconds},
            )
            return ProbeResult(url=url, available=False, latency_ms=latency_ms)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            latency_ms = _elapsed_ms(started)
            self.log.info(
                "endpoint.probe.error",
                extra={"url": url, "error": str(exc) or type(exc).__name__},
            )
            return ProbeResult(url=url, available=False, latency_ms=latency_ms)

        latency_ms = _elapsed_ms(started)
        if not 200 <= status_code < 300:
            self.log.info(
                "endpoint.probe.unavailable",
                extra={"url": url, "status_code": status_code},
            )
            return ProbeResult(url=url, available=False, latency_ms=latency_ms)

        self.log.info(
            "endpoint.probe.available",
            extra={"url": url, "latency_ms": round(latency_ms, 1)},
        )
        return ProbeResult(url=url, available=True, latency_ms=latency_ms)

    async def _check_health(self, url: str) -> int:
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            response = await client.get(f"{url}/health")
        if 200 <= response.status_code < 300:
            # body content is ignored, but it has to be JSON
            response.json()
        return response.status_code


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0
