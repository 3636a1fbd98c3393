"""metric-pusher CLI (Typer).

Commands:
- `push`: push this process's registry (or a textfile) to every endpoint.
- `doctor run` / `doctor configure`: diagnostics and user config.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from adapters.exposition import PrometheusEncoder, RegistrySource, TextfileSource
from adapters.http_client import close_shared_client
from cli.doctor import app as doctor_app
from cli.ui_components import build_dry_run_table, build_result_table, configure_logging
from core.config import PusherSettings
from core.domain.models import PushResult
from core.errors import InvalidArgumentError, PushTimeoutError
from core.interfaces.metrics import MetricsSource
from core.services import build_payload, dispatch, resolve_content_type, resolve_targets

EXIT_DELIVERY_FAILED = 1
EXIT_INVALID_ARGUMENT = 2

app = typer.Typer(
    no_args_is_help=True,
    help="Push a metrics snapshot to one or more Prometheus Pushgateways.",
)
app.add_typer(doctor_app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


async def _dispatch_and_close(**kwargs) -> PushResult:
    try:
        return await dispatch(**kwargs)
    finally:
        await close_shared_client()


@app.command()
def push(
    endpoint: list[str] | None = typer.Option(
        None,
        "--endpoint",
        "-e",
        help="Pushgateway base URL (repeatable). Defaults to METRIC_PUSHER_ENDPOINTS.",
    ),
    job: str | None = typer.Option(None, "--job", "-j", help="Job name."),
    instance: str | None = typer.Option(None, "--instance", "-i", help="Instance name."),
    content_type: str | None = typer.Option(
        None, "--content-type", help="Payload content type (default: text/plain; version=0.0.4)."
    ),
    file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Push a text exposition file instead of this process's registry.",
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", min=0.0, help="Budget in seconds for the whole push."
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show target URLs, send nothing."),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING..."),
) -> None:
    """Push metrics to every endpoint; exit 1 if any of them failed."""

    settings = PusherSettings()
    configure_logging(log_level or settings.log_level, _err_console)

    source: MetricsSource = TextfileSource(file) if file else RegistrySource()
    endpoints = endpoint or None
    join_timeout = timeout or None

    if dry_run:
        try:
            targets = resolve_targets(
                endpoints if endpoints is not None else settings.endpoints,
                job if job is not None else settings.job or "",
                instance if instance is not None else settings.instance,
            )
            resolved_type = resolve_content_type(
                content_type if content_type is not None else settings.content_type
            )
        except InvalidArgumentError as exc:
            _err_console.print(f"[red]Invalid argument:[/red] {exc}")
            raise typer.Exit(code=EXIT_INVALID_ARGUMENT) from exc
        payload = build_payload(source=source, encoder=PrometheusEncoder(), content_type=resolved_type)
        _console.print(build_dry_run_table(targets, len(payload), resolved_type))
        return

    try:
        result = asyncio.run(
            _dispatch_and_close(
                endpoints=endpoints,
                job=job,
                instance=instance,
                content_type=content_type,
                source=source,
                settings=settings,
                join_timeout=join_timeout,
            )
        )
    except InvalidArgumentError as exc:
        _err_console.print(f"[red]Invalid argument:[/red] {exc}")
        raise typer.Exit(code=EXIT_INVALID_ARGUMENT) from exc
    except PushTimeoutError as exc:
        _err_console.print(f"[red]Timeout:[/red] {exc}")
        for url in exc.pending:
            _err_console.print(f"  pending: {url}")
        raise typer.Exit(code=EXIT_DELIVERY_FAILED) from exc

    _console.print(build_result_table(result))

    failure = result.first_failure()
    if failure is not None:
        detail = failure.error or f"HTTP {failure.status_code} {failure.reason}".strip()
        _err_console.print(
            f"[red]Push failed[/red] ({len(result.failures)}/{len(result.outcomes)}): "
            f"{failure.url}: {detail}"
        )
        raise typer.Exit(code=EXIT_DELIVERY_FAILED)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
