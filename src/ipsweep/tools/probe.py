"""HTTP reachability probe."""

import asyncio
from ipaddress import IPv4Address
from typing import Protocol

import httpx

from ipsweep.config import PROBE_PORT, PROBE_TIMEOUT, WORKER_COUNT
from ipsweep.modules.messages import Outcome


class Prober(Protocol):
    """Anything that can classify one address."""

    async def probe(self, address: IPv4Address) -> Outcome: ...


def probe_url(address: IPv4Address, port: int = PROBE_PORT) -> str:
    return f"http://{address}:{port}/"


class HTTPProber:
    """Issues one plain GET per address, bounded as a whole by ``timeout``.

    Any completed response counts as reachable, whatever its status. Timeouts,
    refusals and every other transport error are ``Outcome.FAILED``; they are
    never raised.
    """

    def __init__(
        self,
        port: int = PROBE_PORT,
        timeout: float = PROBE_TIMEOUT,
        max_connections: int = WORKER_COUNT,
    ):
        self.port = port
        self.timeout = timeout
        self.max_connections = max_connections
        self.client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=False,
            verify=False,
            limits=httpx.Limits(
                max_connections=self.max_connections,
                max_keepalive_connections=0,
            ),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()
            self.client = None

    async def probe(self, address: IPv4Address) -> Outcome:
        """Probe a single address on the configured port."""
        if not self.client:
            raise RuntimeError("Prober not initialized. Use async context manager.")

        try:
            # Headers are enough; the body is never read
            async with asyncio.timeout(self.timeout):
                async with self.client.stream("GET", probe_url(address, self.port)):
                    pass
        except (httpx.HTTPError, TimeoutError, OSError):
            return Outcome.FAILED
        return Outcome.SUCCEEDED
