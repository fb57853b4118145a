"""Candidate list construction for endpoint resolution."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .endpoint_models import Candidate

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


def build_candidates(
    *,
    configured_url: str | None = None,
    origin_host: str | None = None,
    lan_hosts: Sequence[str] = (),
    lan_port: int = 5050,
    loopback_urls: Sequence[str] = (),
) -> list[Candidate]:
    """Return candidates in priority order without duplicates.

    Order: configured address, LAN guesses (only when the client is served
    from a non-loopback host), loopback fallbacks.
    """
    urls: list[str] = []
    if configured_url:
        urls.append(configured_url)
    if origin_host and origin_host.lower() not in LOOPBACK_HOSTS:
        urls.extend(f"http://{host}:{lan_port}" for host in lan_hosts)
    urls.extend(loopback_urls)
    return [Candidate(url=url) for url in _unique(_normalize(url) for url in urls)]


def _normalize(url: str) -> str:
    return url.strip().rstrip("/")


def _unique(urls: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for url in urls:
        if not url or url in seen:
            continue
        seen.add(url)
        ordered.append(url)
    return ordered
