"""Test configuration and fixtures for ipsweep."""

import asyncio
from ipaddress import IPv4Address

import pytest

from ipsweep.config import ScanConfig
from ipsweep.modules.channel import MessageChannel
from ipsweep.modules.messages import Outcome
from ipsweep.modules.state import ScanState


class FakeProber:
    """Prober that records calls and answers from a fixed set of live addresses."""

    def __init__(self, live: set[int] | None = None, delay: float = 0.0):
        self.live = live or set()
        self.delay = delay
        self.calls: list[IPv4Address] = []

    async def probe(self, address: IPv4Address) -> Outcome:
        self.calls.append(address)
        if self.delay:
            await asyncio.sleep(self.delay)
        else:
            await asyncio.sleep(0)
        if int(address) in self.live:
            return Outcome.SUCCEEDED
        return Outcome.FAILED


@pytest.fixture
def small_config() -> ScanConfig:
    """Four workers over a sixteen-address space."""
    return ScanConfig(worker_count=4, space_size=16, ui_fps=50)


@pytest.fixture
def fake_prober() -> FakeProber:
    return FakeProber(live={1, 5, 9})


@pytest.fixture
def state(small_config: ScanConfig) -> ScanState:
    return ScanState(small_config.worker_count)


@pytest.fixture
def channel() -> MessageChannel:
    return MessageChannel()


@pytest.fixture
def make_prober() -> type[FakeProber]:
    """Factory for probers with custom live sets or delays."""
    return FakeProber
