"""Shard planning and the supervised worker pool."""

import asyncio
import logging

from ipsweep.config import ScanConfig
from ipsweep.modules.address_space import AddressSpace
from ipsweep.modules.channel import MessageChannel
from ipsweep.modules.worker import Shard, ShardWorker
from ipsweep.tools.probe import Prober

logger = logging.getLogger(__name__)


def plan_shards(worker_count: int, space_size: int) -> list[Shard]:
    """Split [0, space_size) into ``worker_count`` contiguous shards.

    Every shard gets ``space_size // worker_count`` indices; the last one also
    takes the remainder.
    """
    if worker_count < 1:
        raise ValueError(f"worker_count must be at least 1, got {worker_count}")

    chunk = space_size // worker_count
    shards = []
    for worker_id in range(worker_count):
        start = worker_id * chunk
        end = space_size if worker_id == worker_count - 1 else start + chunk
        shards.append(Shard(worker_id, start, end))
    return shards


class WorkerPool:
    """Runs one ``ShardWorker`` per shard and closes the channel when all are done."""

    def __init__(
        self,
        config: ScanConfig,
        prober: Prober,
        channel: MessageChannel,
        cancel: asyncio.Event | None = None,
    ):
        self.config = config
        self.channel = channel
        self.cancel = cancel if cancel is not None else asyncio.Event()
        self.finished = asyncio.Event()
        space = AddressSpace(size=config.space_size)
        self.workers = [
            ShardWorker(shard, prober, channel, self.cancel, space)
            for shard in plan_shards(config.worker_count, config.space_size)
        ]

    @property
    def shards(self) -> list[Shard]:
        return [worker.shard for worker in self.workers]

    async def run(self) -> int:
        """Run every worker to completion. Returns the total number of probes."""
        logger.info(
            "Starting %d workers over %d addresses", len(self.workers), self.config.space_size
        )
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(worker.run()) for worker in self.workers]
        finally:
            self.channel.close()
            self.finished.set()

        total = sum(task.result() for task in tasks)
        logger.info("All workers finished after %d probes", total)
        return total

    def stop(self) -> None:
        """Ask workers to stop before their next probe."""
        self.cancel.set()
