"""
Scan parameters for ipsweep.

Everything here is fixed at build time: there is no configuration file and
no environment variable lookup. ``ScanConfig`` bundles the constants so the
engine can be driven with a smaller address space or pool in tests.
"""

from dataclasses import dataclass

WORKER_COUNT = 100
UI_FPS = 10
ADDRESS_SPACE_SIZE = 2**32  # 256^4

PROBE_PORT = 80
PROBE_TIMEOUT = 0.1

# Number of event log entries shown in the live panel
EVENT_LOG_TAIL = 10


@dataclass(frozen=True)
class ScanConfig:
    """Parameters for a single scan."""

    worker_count: int = WORKER_COUNT
    space_size: int = ADDRESS_SPACE_SIZE
    ui_fps: int = UI_FPS
    probe_port: int = PROBE_PORT
    probe_timeout: float = PROBE_TIMEOUT

    @property
    def frame_interval(self) -> float:
        """Seconds per rendered frame."""
        return 1.0 / self.ui_fps
