"""Single consumer that folds worker messages into ``ScanState``."""

import logging

from ipsweep.modules.channel import MessageChannel
from ipsweep.modules.messages import Message, Outcome, ProbeCompleted, WorkerFinished
from ipsweep.modules.state import ScanState

logger = logging.getLogger(__name__)


def worker_exit_entry(message: WorkerFinished) -> str:
    """Event log text for a finished worker."""
    if message.interrupted:
        return f"Worker stopped [{message.worker_id}]"
    return f"Worker exit [{message.worker_id}]"


class Aggregator:
    """Applies messages to shared state one at a time."""

    def __init__(self, state: ScanState):
        self.state = state
        self.applied = 0

    def apply(self, message: Message) -> None:
        match message:
            case ProbeCompleted(outcome=outcome):
                self.state.record_probe(outcome is Outcome.SUCCEEDED)
            case WorkerFinished():
                if not self.state.record_worker_exit():
                    logger.warning(
                        "Worker %d finished with no active workers left", message.worker_id
                    )
                self.state.append_event(worker_exit_entry(message))
            case _:
                raise TypeError(f"Unknown message: {message!r}")
        self.applied += 1

    async def run(self, channel: MessageChannel) -> int:
        """Drain ``channel`` until it is closed. Returns the number of messages applied."""
        async for message in channel:
            self.apply(message)
        logger.debug("Aggregator drained %d messages", self.applied)
        return self.applied
