"""Value objects for endpoint resolution."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Candidate:
    """Guessed or configured base address for the processing service."""

    url: str


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of one liveness check."""

    url: str
    available: bool
    latency_ms: float | None = None


@dataclass(frozen=True, slots=True)
class ResolvedEndpoint:
    """Base address chosen for the remainder of one submission."""

    url: str

    def url_for(self, path: str) -> str:
        return f"{self.url}/{path.lstrip('/')}"
