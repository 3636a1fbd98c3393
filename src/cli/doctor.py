"""Doctor commands: environment diagnostics and user configuration."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters import http_client
from cli.ui_components import print_banner
from core.config import DEFAULT_CONTENT_TYPE, PusherSettings, write_user_env_vars
from core.errors import InvalidArgumentError
from core.services import build_push_url

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(client: httpx.AsyncClient, url: str) -> tuple[bool, str]:
    try:
        response = await client.get(url)
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__
    return response.is_success, f"HTTP {response.status_code}"


async def _check_endpoints(settings: PusherSettings, endpoints: list[str]) -> list[tuple[bool, str]]:
    async with http_client.build_async_client(settings) as client:
        return await asyncio.gather(
            *(_check_http(client, f"{endpoint.rstrip('/')}/-/healthy") for endpoint in endpoints)
        )


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = PusherSettings()
    print_banner(_console)

    table = Table(title="metric-pusher doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.job:
        table.add_row("Job", "OK", settings.job)
    else:
        table.add_row("Job", "MISSING", "Pass --job or set METRIC_PUSHER_JOB")
    table.add_row("Instance", "OK" if settings.instance else "OPTIONAL", settings.instance or "-")
    table.add_row("Content-Type", "OK", settings.content_type or DEFAULT_CONTENT_TYPE)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds}s")
    join = settings.join_timeout_seconds
    table.add_row("Join timeout", "OK" if join else "OPTIONAL", f"{join}s" if join else "wait for all")

    if not settings.endpoints:
        table.add_row("Endpoints", "MISSING", "Pass --endpoint or set METRIC_PUSHER_ENDPOINTS")
        _console.print(table)
        return

    # URL shape, then connectivity (best-effort, all endpoints at once)
    reachable: list[str] = []
    for endpoint in settings.endpoints:
        try:
            build_push_url(endpoint, settings.job or "doctor", settings.instance)
        except InvalidArgumentError as exc:
            table.add_row(f"Endpoint {endpoint}", "INVALID", str(exc))
            continue
        reachable.append(endpoint)

    if reachable:
        results = asyncio.run(_check_endpoints(settings, reachable))
        for endpoint, (ok, detail) in zip(reachable, results):
            table.add_row(f"Endpoint {endpoint}", "OK" if ok else "FAIL", detail)

    _console.print(table)


@app.command()
def configure() -> None:
    """Interactive setup (stores config in the user config .env)."""

    endpoints = typer.prompt("Pushgateway endpoints (comma separated)").strip()
    job = typer.prompt("Default job name").strip()
    instance = typer.prompt("Default instance name", default="", show_default=False).strip()

    if not endpoints or not job:
        raise typer.BadParameter("endpoints and job are required")

    for endpoint in (part.strip() for part in endpoints.split(",")):
        try:
            build_push_url(endpoint, job, instance or None)
        except InvalidArgumentError as exc:
            raise typer.BadParameter(str(exc)) from exc

    env_path = write_user_env_vars(
        {
            "METRIC_PUSHER_ENDPOINTS": endpoints,
            "METRIC_PUSHER_JOB": job,
            "METRIC_PUSHER_INSTANCE": instance or None,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
