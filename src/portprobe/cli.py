"""
PORTPROBE command line interface.

Targets are read from stdin (or --input), one per line. Banners are
written to stdout as "host:port - banner"; everything else goes to stderr.

Usage:
    cat hosts.txt | portprobe scan --top-ports
    echo https://example.com/login | portprobe scan --pr 1-1024 -t 3 -r 200
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterator, Optional

import click
import structlog
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .core import ConfigurationError, ResultSink, ScanConfig, build_config
from .core.config import LOG_LEVELS
from .core.orchestrator import Orchestrator, ScanSummary
from .targets import NoTargetsError, ScanTask, enumerate_tasks, read_targets, select_ports


console = Console(stderr=True)


def configure_logging(level: str):
    """Render structlog events to stderr so stdout only carries results"""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=console.is_terminal),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


@click.group()
@click.version_option(version=__version__, prog_name="PORTPROBE")
def cli():
    """
    PORTPROBE - Adaptive TCP Banner Grabber

    Connects to every target/port pair and reports the service banners.
    """
    pass


@cli.command()
@click.option('--pr', '--port-range', 'port_range', default=None, help='Port range, e.g. 80-1000 (default: 1-65535)')
@click.option('--top-ports', is_flag=True, default=False, help='Scan the well-known port list instead of a range')
@click.option('-t', '--timeout', type=float, default=None, help='Connect timeout per attempt in seconds (default: 5)')
@click.option('-r', '--rate-limit', type=int, default=None, help='Max concurrent scans (default: 100)')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path), help='YAML file with scan settings')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None, help='Diagnostic log level (default: warning)')
@click.option('--progress/--no-progress', default=False, help='Show a progress bar on stderr')
@click.option('--input', 'input_file', type=click.File('r', errors='replace'), default='-', help='File with one target per line (default: stdin)')
def scan(
    port_range: Optional[str],
    top_ports: bool,
    timeout: Optional[float],
    rate_limit: Optional[int],
    config_path: Optional[Path],
    log_level: Optional[str],
    progress: bool,
    input_file,
):
    """
    Grab banners from every target read on stdin.

    Exits 2 without scanning when the configuration is invalid or no
    targets were given.

    Example:
        cat hosts.txt | portprobe scan --top-ports
    """
    try:
        config = build_config(
            config_path,
            overrides={
                "port_range": port_range,
                "top_ports": top_ports or None,
                "timeout": timeout,
                "rate_limit": rate_limit,
                "log_level": log_level,
            },
        )
        ports = select_ports(config.port_range, config.top_ports)
    except ConfigurationError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(2)

    configure_logging(config.log_level)

    targets = read_targets(input_file)
    try:
        tasks = enumerate_tasks(targets, ports)
    except NoTargetsError as e:
        console.print(f"[yellow]{e}[/yellow]")
        sys.exit(2)

    try:
        summary = asyncio.run(run_scan(
            config=config,
            tasks=tasks,
            total=len(targets) * len(ports),
            show_progress=progress,
        ))
    except KeyboardInterrupt:
        console.print("\n[yellow]Scan interrupted by user[/yellow]")
        sys.exit(1)

    console.print(
        f"[green]Scan complete:[/green] {summary.results} banner(s) "
        f"from {summary.tasks} port(s) in {summary.elapsed:.1f}s"
    )


async def run_scan(
    config: ScanConfig,
    tasks: Iterator[ScanTask],
    total: int,
    show_progress: bool = False,
) -> ScanSummary:
    """
    Run the scan, printing banners to stdout as they arrive.
    """
    orchestrator = Orchestrator(config=config, sink=ResultSink(writer=click.echo))

    if not show_progress:
        return await orchestrator.run(tasks)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        redirect_stdout=False,
        redirect_stderr=False,
    ) as bar:
        progress_task = bar.add_task("[cyan]Grabbing banners...", total=total)

        def on_event(event, data):
            if event == "task_completed":
                bar.advance(progress_task)

        orchestrator.subscribe(on_event)
        return await orchestrator.run(tasks)


@cli.command()
def version():
    """Show version information and default settings"""
    console.print(f"\n[bold cyan]PORTPROBE v{__version__}[/bold cyan]")
    console.print("[cyan]Adaptive TCP Banner Grabber[/cyan]\n")

    defaults = ScanConfig()
    table = Table(title="Defaults")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("Port range", defaults.port_range)
    table.add_row("Timeout", f"{defaults.timeout:g}s")
    table.add_row("Concurrency", str(defaults.rate_limit))
    table.add_row("Attempts per port", str(defaults.retries))
    table.add_row("Read deadline", f"{defaults.read_deadline:g}s")
    table.add_row("Seeded ports", ", ".join(str(p) for p in sorted(defaults.seeds)))

    console.print(table)
    console.print()
