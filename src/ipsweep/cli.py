"""ipsweep CLI - live sweep of the IPv4 address space."""

import asyncio
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from ipsweep.config import ScanConfig
from ipsweep.modules.display import ProgressView
from ipsweep.modules.session import run_scan
from ipsweep.modules.state import ProgressSnapshot, ScanState
from ipsweep.tools.probe import HTTPProber

app = typer.Typer(
    name="ipsweep",
    help="Probe every IPv4 address over HTTP with a live progress display",
    no_args_is_help=True,
)
console = Console()


def configure_logging(level: int = logging.WARNING) -> None:
    """Route log records through the shared console so they stay above the live panel."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def version() -> None:
    """Show the installed ipsweep version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        current_version = pkg_version("ipsweep")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"ipsweep {current_version}")


def print_summary(snapshot: ProgressSnapshot, config: ScanConfig) -> None:
    """Print the one-line result after the live display closes."""
    status = "[green]✓[/]" if snapshot.probed_count >= config.space_size else "[yellow]○[/]"
    console.print(
        f"{status} Probed [bold]{snapshot.probed_count:,}[/] of {config.space_size:,} addresses, "
        f"[bold green]{snapshot.succeeded_count:,}[/] responded "
        f"[dim]({snapshot.rate:,.1f}/s)[/]"
    )


async def _scan(config: ScanConfig) -> ProgressSnapshot:
    state = ScanState(config.worker_count)
    view = ProgressView(state, config, console)
    async with HTTPProber(
        port=config.probe_port,
        timeout=config.probe_timeout,
        max_connections=config.worker_count,
    ) as prober:
        return await run_scan(config, prober, view=view)


@app.command()
def scan() -> None:
    """Sweep the full IPv4 space. Press Esc to stop."""
    configure_logging()
    config = ScanConfig()
    console.print("[blue]Loading...[/blue]")

    try:
        snapshot = asyncio.run(_scan(config))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        raise typer.Exit(130) from None
    except Exception as exc:
        reason = exc.exceptions[0] if isinstance(exc, ExceptionGroup) else exc
        console.print(f"[red]Scan failed: {reason}[/red]")
        raise typer.Exit(1) from exc

    print_summary(snapshot, config)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
