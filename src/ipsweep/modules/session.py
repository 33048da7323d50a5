"""Wiring for one end-to-end scan."""

import asyncio
import logging

from ipsweep.config import ScanConfig
from ipsweep.modules.aggregator import Aggregator
from ipsweep.modules.channel import MessageChannel
from ipsweep.modules.display import ProgressView
from ipsweep.modules.pool import WorkerPool
from ipsweep.modules.state import ProgressSnapshot, ScanState
from ipsweep.tools.probe import Prober

logger = logging.getLogger(__name__)


async def run_scan(
    config: ScanConfig,
    prober: Prober,
    *,
    state: ScanState | None = None,
    view: ProgressView | None = None,
) -> ProgressSnapshot:
    """Probe the whole configured space and return the final progress.

    With a ``view`` the scan runs until the view returns; quitting the view
    stops workers before their next probe and the remaining messages are
    still drained. Without one it runs until every shard is exhausted.
    """
    if state is None:
        state = view.state if view is not None else ScanState(config.worker_count)
    state.append_event("Starting")

    channel = MessageChannel()
    aggregator = Aggregator(state)
    pool = WorkerPool(config, prober, channel)

    async with asyncio.TaskGroup() as group:
        group.create_task(aggregator.run(channel))
        pool_task = group.create_task(pool.run())

        if view is not None:
            try:
                quit_requested = await view.run(pool.finished)
            finally:
                # Teardown failures still have to release the workers
                pool.stop()
            if quit_requested:
                logger.info("Quit requested; stopping workers")
        await pool_task

    return state.snapshot()
