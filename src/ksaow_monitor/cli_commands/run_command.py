"""``ksaow-monitor run`` - service mode."""

import logging

import typer

from ksaow_monitor.utils.async_utils import run_until_stopped
from ksaow_monitor.utils.log_setup import configure_service_logging

from .deps import cli_module
from .shared import app, console

logger = logging.getLogger(__name__)


@app.command()
def run(
    interval: float | None = typer.Option(
        None, "--interval", help="Seconds between checks (default from config, 300)"
    ),
) -> None:
    """Probe the database on a fixed interval until stopped (SIGINT/SIGTERM)."""
    cli = cli_module()
    home = cli.get_monitor_home()
    log_path = configure_service_logging(home / "logs", cli.get_log_level(home))
    console.print(f"[dim]Logging to {log_path}[/dim]")

    service = cli.build_service(home, execution_mode="production")
    if interval is not None and interval > 0:
        service.interval = interval

    logger.info("KS-AOW Monitor Service starting...")
    run_until_stopped(service.run)
    logger.info("KS-AOW Monitor Service stopped")
