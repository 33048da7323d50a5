"""Worker that probes one shard of the address space."""

import asyncio
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from ipaddress import IPv4Address

from ipsweep.modules.address_space import AddressSpace
from ipsweep.modules.channel import ChannelClosedError, MessageChannel
from ipsweep.modules.messages import ProbeCompleted, WorkerFinished
from ipsweep.tools.probe import Prober

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Shard:
    """Half-open index range [start, end) owned by one worker."""

    worker_id: int
    start: int
    end: int

    def __len__(self) -> int:
        return max(self.end - self.start, 0)

    def addresses(self, space: AddressSpace) -> Iterator[IPv4Address]:
        """Addresses of ``space`` that fall inside this shard."""
        return space.skip(self.start - space.start).take(len(self))


class ShardWorker:
    """Probes every address of its shard in order.

    Each outcome goes onto the channel as soon as the probe returns. If the
    channel is closed underneath it the worker gives up on the rest of the
    shard.
    """

    def __init__(
        self,
        shard: Shard,
        prober: Prober,
        channel: MessageChannel,
        cancel: asyncio.Event | None = None,
        space: AddressSpace | None = None,
    ):
        self.shard = shard
        self.prober = prober
        self.channel = channel
        self.cancel = cancel if cancel is not None else asyncio.Event()
        self.space = space if space is not None else AddressSpace()
        self.probed = 0

    @property
    def worker_id(self) -> int:
        return self.shard.worker_id

    async def run(self) -> int:
        """Probe the shard and return how many addresses were probed."""
        logger.debug(
            "Worker %d starting on [%d, %d)", self.worker_id, self.shard.start, self.shard.end
        )
        interrupted = False
        try:
            for address in self.shard.addresses(self.space):
                if self.cancel.is_set():
                    interrupted = True
                    break
                outcome = await self.prober.probe(address)
                self.channel.send(ProbeCompleted(address, outcome))
                self.probed += 1
            self.channel.send(WorkerFinished(self.worker_id, interrupted=interrupted))
        except ChannelClosedError:
            logger.warning(
                "Worker %d lost its channel after %d probes; abandoning shard",
                self.worker_id,
                self.probed,
            )
            return self.probed

        logger.debug("Worker %d done after %d probes", self.worker_id, self.probed)
        return self.probed
