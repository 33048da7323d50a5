"""Events sent from workers to the aggregator."""

from dataclasses import dataclass
from enum import Enum
from ipaddress import IPv4Address


class Outcome(Enum):
    """Classification of a single probe."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ProbeCompleted:
    """One address was probed."""

    address: IPv4Address
    outcome: Outcome


@dataclass(frozen=True)
class WorkerFinished:
    """A worker is done with its shard and will send nothing more."""

    worker_id: int
    interrupted: bool = False


Message = ProbeCompleted | WorkerFinished
