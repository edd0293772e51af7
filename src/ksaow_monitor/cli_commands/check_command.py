"""``ksaow-monitor check`` - one probe cycle from the console."""

import asyncio

import typer
from rich.panel import Panel

from ksaow_monitor.utils.log_setup import configure_console_logging

from .deps import cli_module
from .shared import app, console


@app.command()
def check(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    report: bool = typer.Option(True, "--report/--no-report", help="Send the result to the webhook"),
) -> None:
    """Run a single check and report it with executionMode=test."""
    cli = cli_module()
    home = cli.get_monitor_home()
    configure_console_logging("DEBUG" if verbose else cli.get_log_level(home))

    console.print("[bold]KS-AOW Database Monitor - Test[/bold]")
    service = cli.build_service(home, execution_mode="test")
    if service.initialize() is None:
        console.print("[red]Configuration could not be loaded. Run 'ksaow-monitor setup'.[/red]")
        raise typer.Exit(1)

    if report:
        result = asyncio.run(service.run_cycle())
    else:
        result = asyncio.run(service.probe())

    if result.succeeded:
        strategy = f" (auth: {result.strategy})" if result.strategy else ""
        console.print(
            f"[green]Check passed. Found {len(result.rows)} FIRM records{strategy}.[/green]"
        )
        return

    console.print(f"[red]Check failed: {result.error_message}[/red]")
    if result.remediation:
        console.print(Panel(result.remediation, title="Remediation", border_style="yellow"))
    raise typer.Exit(1)
