"""Connectivity check against the source host."""

from __future__ import annotations

import httpx

from depfetch.common import create_logger
from depfetch.github import GitHubClient
from depfetch.jobs import JobSource

logger = create_logger("fetch.probe")

# Establishing a connection through some proxies takes 10-15s on first use.
PROBE_TIMEOUT = httpx.Timeout(5.0, connect=20.0)


class ConnectivityProbe:
    """Makes one unauthenticated round trip to the source's API to warm the network path."""

    def __init__(self, *, transport: httpx.BaseTransport | None = None) -> None:
        self._transport = transport

    def check(self, source: JobSource) -> bool:
        """Return whether the round trip succeeded. Never raises."""
        logger.info("Connectivity check starting")
        try:
            with GitHubClient(source.api_url, timeout=PROBE_TIMEOUT, transport=self._transport) as client:
                client.repository(source.repo)
        except Exception as e:
            logger.error(f"Connectivity check failed: {e}")
            return False

        logger.info("Connectivity check successful")
        return True
