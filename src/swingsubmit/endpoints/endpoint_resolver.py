"""Concurrent endpoint resolution."""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from ..logging import get_logger
from .endpoint_models import Candidate, ProbeResult, ResolvedEndpoint

logger = get_logger(__name__)

ProbeFn = Callable[[str], Awaitable[ProbeResult]]


@dataclass(slots=True)
class EndpointResolver:
    """Probe every candidate concurrently and pick the fastest live one.

    All probes are awaited, not just the first success, so total time is
    bounded by the slowest probe's timeout. Ties on latency go to the
    candidate listed first.
    """

    probe: ProbeFn
    log: logging.Logger = field(default_factory=lambda: logger)

    async def resolve(self, candidates: Sequence[Candidate]) -> ResolvedEndpoint | None:
        if not candidates:
            self.log.warning("endpoint.resolve.no_candidates")
            return None

        self.log.info(
            "endpoint.resolve.start",
            extra={"candidates": [candidate.url for candidate in candidates]},
        )
        results = await asyncio.gather(
            *(self.probe(candidate.url) for candidate in candidates)
        )

        best = select_fastest(results)
        if best is None:
            self.log.warning(
                "endpoint.resolve.not_found",
                extra={"candidates": len(candidates)},
            )
            return None

        self.log.info(
            "endpoint.resolve.selected",
            extra={"url": best.url, "latency_ms": best.latency_ms},
        )
        return ResolvedEndpoint(url=best.url)


def select_fastest(results: Sequence[ProbeResult]) -> ProbeResult | None:
    """Return the available result with minimum latency, first wins on ties."""
    best: ProbeResult | None = None
    for result in results:
        if not result.available:
            continue
        if best is None or _latency(result) < _latency(best):
            best = result
    return best


def _latency(result: ProbeResult) -> float:
    return result.latency_ms if result.latency_ms is not None else math.inf
