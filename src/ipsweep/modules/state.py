"""Shared scan progress state."""

import threading
import time
from dataclasses import dataclass


@dataclass(frozen=True)
class ProgressSnapshot:
    """Point-in-time copy of ``ScanState`` for readers."""

    probed_count: int
    succeeded_count: int
    active_workers: int
    events: tuple[str, ...]
    elapsed: float

    @property
    def rate(self) -> float:
        """Probes per second since the scan started."""
        if self.elapsed <= 0:
            return 0.0
        return self.probed_count / self.elapsed


class ScanState:
    """Progress counters and event log for one scan.

    The aggregator is the only writer. The display reads through
    ``snapshot`` from the event loop or from rich's refresh thread, so every
    update and every copy holds ``_lock`` for exactly one operation.
    """

    def __init__(self, worker_count: int):
        self._lock = threading.Lock()
        self._probed = 0
        self._succeeded = 0
        self._active = worker_count
        self._events: list[str] = []
        self.worker_count = worker_count
        self.started = time.perf_counter()

    @property
    def probed_count(self) -> int:
        with self._lock:
            return self._probed

    @property
    def succeeded_count(self) -> int:
        with self._lock:
            return self._succeeded

    @property
    def active_workers(self) -> int:
        with self._lock:
            return self._active

    @property
    def event_log(self) -> list[str]:
        with self._lock:
            return list(self._events)

    def record_probe(self, succeeded: bool) -> None:
        with self._lock:
            self._probed += 1
            if succeeded:
                self._succeeded += 1

    def record_worker_exit(self) -> bool:
        """Decrement the active worker count. Returns False if it was already 0."""
        with self._lock:
            if self._active == 0:
                return False
            self._active -= 1
            return True

    def append_event(self, entry: str) -> None:
        with self._lock:
            self._events.append(entry)

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(
                probed_count=self._probed,
                succeeded_count=self._succeeded,
                active_workers=self._active,
                events=tuple(self._events),
                elapsed=time.perf_counter() - self.started,
            )
