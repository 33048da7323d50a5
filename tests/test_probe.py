"""Tests for the HTTP reachability probe."""

import asyncio
import time
from ipaddress import IPv4Address

import httpx
import pytest
import respx
from httpx import Response

from ipsweep.modules.messages import Outcome
from ipsweep.tools.probe import HTTPProber, probe_url

ADDRESS = IPv4Address("192.0.2.10")


class TestHTTPProber:
    """Outcome classification."""

    @respx.mock
    async def test_response_is_success(self):
        route = respx.get(host="192.0.2.10").mock(return_value=Response(200, text="hi"))

        async with HTTPProber() as prober:
            outcome = await prober.probe(ADDRESS)

        assert outcome is Outcome.SUCCEEDED
        assert route.call_count == 1
        request = route.calls.last.request
        assert request.method == "GET"
        assert request.url.scheme == "http"
        assert request.url.path == "/"

    @pytest.mark.parametrize("status", [301, 404, 500, 503])
    @respx.mock
    async def test_any_status_is_success(self, status: int):
        respx.get(host="192.0.2.10").mock(return_value=Response(status))

        async with HTTPProber() as prober:
            assert await prober.probe(ADDRESS) is Outcome.SUCCEEDED

    @respx.mock
    async def test_redirect_not_followed(self):
        respx.get(host="192.0.2.10").mock(
            return_value=Response(302, headers={"Location": "http://192.0.2.99/"})
        )
        other = respx.get(host="192.0.2.99").mock(return_value=Response(200))

        async with HTTPProber() as prober:
            assert await prober.probe(ADDRESS) is Outcome.SUCCEEDED

        assert not other.called

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError,
            httpx.ConnectTimeout,
            httpx.ReadTimeout,
            httpx.RemoteProtocolError,
            httpx.ReadError,
        ],
    )
    @respx.mock
    async def test_transport_errors_are_failures(self, error: type[Exception]):
        respx.get(host="192.0.2.10").mock(side_effect=error)

        async with HTTPProber() as prober:
            assert await prober.probe(ADDRESS) is Outcome.FAILED

    @respx.mock
    async def test_os_error_is_failure(self):
        respx.get(host="192.0.2.10").mock(side_effect=ConnectionRefusedError("refused"))

        async with HTTPProber() as prober:
            assert await prober.probe(ADDRESS) is Outcome.FAILED

    async def test_requires_context_manager(self):
        with pytest.raises(RuntimeError, match="not initialized"):
            await HTTPProber().probe(ADDRESS)

    async def test_client_settings(self):
        async with HTTPProber(timeout=0.1) as prober:
            assert prober.client is not None
            assert prober.client.timeout.connect == 0.1
            assert prober.client.follow_redirects is False
        assert prober.client is None

    def test_probe_url(self):
        assert probe_url(ADDRESS) == "http://192.0.2.10:80/"
        assert probe_url(ADDRESS, 8080) == "http://192.0.2.10:8080/"


async def test_refused_probe_counts_once(state, channel):
    """A refused connection is a failure that moves progress by exactly one."""
    from ipsweep.modules.aggregator import Aggregator
    from ipsweep.modules.messages import ProbeCompleted

    state.append_event("Starting")
    with respx.mock:
        respx.get(host="192.0.2.10").mock(side_effect=httpx.ConnectError("refused"))
        async with HTTPProber() as prober:
            outcome = await prober.probe(ADDRESS)

    assert outcome is Outcome.FAILED
    Aggregator(state).apply(ProbeCompleted(ADDRESS, outcome))
    assert state.probed_count == 1
    assert state.event_log == ["Starting"]


class _LocalHTTPServer:
    """Loopback server that answers with headers, then trickles or stalls."""

    def __init__(
        self, send_headers: bool = True, body_length: int = 40, byte_delay: float = 0.05
    ):
        self.send_headers = send_headers
        self.body_length = body_length
        self.byte_delay = byte_delay
        self.handlers: set[asyncio.Task] = set()
        self.server: asyncio.Server | None = None
        self.port = 0

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.handlers.add(asyncio.current_task())
        try:
            await reader.readuntil(b"\r\n\r\n")
            if not self.send_headers:
                await asyncio.sleep(10)
                return
            headers = f"HTTP/1.1 200 OK\r\nContent-Length: {self.body_length}\r\n\r\n"
            writer.write(headers.encode())
            await writer.drain()
            for _ in range(self.body_length):
                await asyncio.sleep(self.byte_delay)
                if writer.is_closing():
                    return
                writer.write(b"x")
                await writer.drain()
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            writer.close()

    async def __aenter__(self):
        self.server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        self.port = self.server.sockets[0].getsockname()[1]
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        for task in self.handlers:
            task.cancel()
        await asyncio.gather(*self.handlers, return_exceptions=True)
        self.server.close()
        await self.server.wait_closed()


class TestProbeDuration:
    """The whole request is bounded by the probe timeout."""

    async def test_trickled_body_not_awaited(self):
        async with _LocalHTTPServer() as server:
            async with HTTPProber(port=server.port, timeout=0.1) as prober:
                started = time.perf_counter()
                outcome = await prober.probe(IPv4Address("127.0.0.1"))
                spent = time.perf_counter() - started

        assert outcome is Outcome.SUCCEEDED
        assert spent < 0.5

    async def test_stalled_headers_time_out(self):
        async with _LocalHTTPServer(send_headers=False) as server:
            async with HTTPProber(port=server.port, timeout=0.1) as prober:
                started = time.perf_counter()
                outcome = await prober.probe(IPv4Address("127.0.0.1"))
                spent = time.perf_counter() - started

        assert outcome is Outcome.FAILED
        assert spent < 0.5

    async def test_large_body_not_downloaded(self):
        async with _LocalHTTPServer(body_length=10_000_000, byte_delay=0) as server:
            async with HTTPProber(port=server.port, timeout=0.1) as prober:
                started = time.perf_counter()
                outcome = await prober.probe(IPv4Address("127.0.0.1"))
                spent = time.perf_counter() - started

        assert outcome is Outcome.SUCCEEDED
        assert spent < 0.5
