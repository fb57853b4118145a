"""Endpoint discovery: candidate building, liveness probing and resolution."""

from .candidates import build_candidates
from .endpoint_models import Candidate, ProbeResult, ResolvedEndpoint
from .endpoint_probe import EndpointProbe
from .endpoint_resolver import EndpointResolver

__all__ = [
    "Candidate",
    "EndpointProbe",
    "EndpointResolver",
    "ProbeResult",
    "ResolvedEndpoint",
    "build_candidates",
]
