"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from presentation details.
- Lets `push` and `doctor` share tables, panels and the log handler.
"""

from __future__ import annotations

import logging

from rich.align import Align
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import PushResult, PushTarget


def configure_logging(level: str, console: Console | None = None) -> None:
    """Route stdlib logging through Rich at the requested level."""

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def print_banner(console: Console) -> None:
    title = Text("metric-pusher", style="bold cyan")
    subtitle = Text("Push metrics to Pushgateways • fan-out • fault tolerant", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_result_table(result: PushResult) -> Table:
    """One row per delivery, in endpoint order."""

    title = f"Push job={result.job}"
    if result.instance:
        title = f"{title} instance={result.instance}"
    table = Table(title=title, caption=f"{result.payload_size} bytes • {result.content_type}")
    table.add_column("Endpoint", style="cyan", no_wrap=True)
    table.add_column("URL", style="magenta")
    table.add_column("Status", style="white")
    table.add_column("Time", style="dim", justify="right")
    table.add_column("Error", style="red")

    for outcome in result.outcomes:
        if outcome.ok:
            status = f"[green]{outcome.status_code}[/green]"
        elif outcome.status_code is not None:
            status = f"[red]{outcome.status_code} {outcome.reason}[/red]"
        else:
            status = "[red]FAIL[/red]"
        elapsed = f"{outcome.elapsed_ms:.0f} ms" if outcome.elapsed_ms is not None else "-"
        table.add_row(outcome.endpoint, outcome.url, status, elapsed, outcome.error or "")
    return table


def build_dry_run_table(targets: list[PushTarget], payload_size: int, content_type: str) -> Table:
    table = Table(title="Dry run (nothing sent)", caption=f"{payload_size} bytes • {content_type}")
    table.add_column("Endpoint", style="cyan", no_wrap=True)
    table.add_column("URL", style="magenta")
    for target in targets:
        table.add_row(target.endpoint, target.url)
    return table
