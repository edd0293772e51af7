"""First-run configuration commands."""

import typer

from ksaow_monitor.errors import MonitorError

from .deps import cli_module
from .shared import app, console


def _print_summary(config, config_path) -> None:
    console.print(f"[green]✓[/green] Configuration saved to: {config_path}")
    console.print(f"[green]✓[/green] Webhook URL: {config.webhook_url}")
    console.print(f"[green]✓[/green] Database: {config.database_type}")


@app.command()
def setup() -> None:
    """Read apman.ini and prompt for the database password and webhook URL."""
    cli = cli_module()
    config_path = cli.get_config_path(cli.get_monitor_home())
    try:
        config = cli.interview(config_path, cli.build_vault())
    except MonitorError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(1) from exc
    _print_summary(config, config_path)


@app.command()
def auto(
    webhook_url: str = typer.Argument(..., help="Webhook URL that receives the results"),
) -> None:
    """Configure automatically for installations using the apw_user account."""
    cli = cli_module()
    config_path = cli.get_config_path(cli.get_monitor_home())
    console.print("[bold]KS-AOW Database Monitor - Auto Configuration[/bold]")
    try:
        config = cli.auto_configure(webhook_url, config_path, cli.build_vault())
    except MonitorError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(1) from exc
    _print_summary(config, config_path)
    console.print("Auto configuration completed successfully!")
