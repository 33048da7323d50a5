"""Full-screen live progress panel with a single quit control."""

import asyncio
import time
from collections.abc import Callable, Iterable
from typing import Any

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys
from rich.console import Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ipsweep.config import EVENT_LOG_TAIL, ScanConfig
from ipsweep.modules.state import ProgressSnapshot, ScanState

# Escape is the quit control; raw mode would otherwise swallow Ctrl-C
QUIT_KEYS = frozenset({Keys.Escape, Keys.ControlC})


def _format_elapsed(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:d}:{minutes:02d}:{secs:02d}"


def create_progress_panel(
    snapshot: ProgressSnapshot,
    total: int,
    worker_count: int,
    tail: int = EVENT_LOG_TAIL,
) -> Panel:
    """Build the Rich Panel for one frame."""
    percent = (snapshot.probed_count / total * 100) if total else 100.0

    stats = Table(show_header=False, box=None, padding=(0, 1), collapse_padding=True)
    stats.add_column("Label", style="dim", width=12)
    stats.add_column("Value", style="bold white")
    stats.add_row("Probed", f"{snapshot.probed_count:,} / {total:,} ({percent:.4f}%)")
    stats.add_row("Responsive", f"[green]{snapshot.succeeded_count:,}[/]")
    stats.add_row("Rate", f"{snapshot.rate:,.1f}/s")
    stats.add_row("Elapsed", _format_elapsed(snapshot.elapsed))
    stats.add_row("Workers", f"{snapshot.active_workers} / {worker_count}")

    events = Text()
    for entry in snapshot.events[-tail:]:
        if events:
            events.append("\n")
        events.append(entry, style="cyan")
    if not events:
        events.append("—", style="dim")

    if snapshot.active_workers:
        title = "[bold cyan]IPv4 Sweep[/] [cyan]● scanning[/]"
    else:
        title = "[bold cyan]IPv4 Sweep[/] [green]✓ complete[/]"

    return Panel(
        Group(stats, Text(""), Panel(events, title="[dim]Events[/]", border_style="dim")),
        title=title,
        subtitle="[dim]Esc to quit[/]",
        border_style="cyan",
        padding=(0, 1),
    )


class ProgressView:
    """Renders ``ScanState`` at a fixed frame rate until quit or done.

    The view only reads state. Quitting sets ``quit_event``; it is up to the
    caller to decide what happens to the scan.
    """

    def __init__(
        self,
        state: ScanState,
        config: ScanConfig,
        console: Any,
        input_factory: Callable[[], Input] = create_input,
        screen: bool = True,
    ):
        self.state = state
        self.config = config
        self.console = console
        self.input_factory = input_factory
        self.screen = screen
        self.quit_event = asyncio.Event()
        self.frames = 0

    def render(self) -> Panel:
        return create_progress_panel(
            self.state.snapshot(), self.config.space_size, self.config.worker_count
        )

    def handle_keys(self, key_presses: Iterable[KeyPress]) -> None:
        """Set the quit event on the quit control; ignore everything else."""
        for key_press in key_presses:
            if key_press.key in QUIT_KEYS:
                self.quit_event.set()

    async def run(self, done: asyncio.Event) -> bool:
        """Render frames until the user quits or ``done`` is set.

        Returns True if the user quit.
        """
        terminal_input = self.input_factory()

        def keys_ready() -> None:
            self.handle_keys(terminal_input.read_keys())
            self.handle_keys(terminal_input.flush_keys())

        with terminal_input.raw_mode(), terminal_input.attach(keys_ready):
            with Live(
                self.render(),
                console=self.console,
                screen=self.screen,
                auto_refresh=False,
                transient=True,
            ) as live:
                while not self.quit_event.is_set():
                    started = time.perf_counter()
                    live.update(self.render(), refresh=True)
                    self.frames += 1
                    if done.is_set():
                        break
                    spent = time.perf_counter() - started
                    remaining = max(0.0, self.config.frame_interval - spent)
                    try:
                        await asyncio.wait_for(self.quit_event.wait(), timeout=remaining)
                    except TimeoutError:
                        pass

        return self.quit_event.is_set()
