"""Configuration CLI commands."""

import typer

from .deps import cli_module
from .shared import app, console, mask_secret


@app.command()
def config(
    action: str = typer.Argument("show", help="Action: show, path"),
) -> None:
    """Show the monitor configuration."""
    cli = cli_module()
    home = cli.get_monitor_home()
    config_path = cli.get_config_path(home)

    if action == "path":
        console.print(str(config_path))
        return

    if action == "show":
        values = cli.load_env_file(config_path)
        if not values:
            console.print("[dim]No configuration found. Run 'ksaow-monitor setup'.[/dim]")
            return
        console.print(f"[bold]Configuration ({config_path}):[/bold]")
        for key, value in values.items():
            if "PASSWORD" in key:
                console.print(f"  {key}={mask_secret(value)}")
            else:
                console.print(f"  {key}={value}")

        tunables = cli.load_tunables(home)
        if tunables:
            console.print(f"[bold]Tunables ({home / 'config.yml'}):[/bold]")
            for key, value in tunables.items():
                console.print(f"  {key}={value}")
        return

    console.print(f"[red]Unknown action: {action}. Use 'show' or 'path'.[/red]")
    raise typer.Exit(1)


@app.command()
def protect() -> None:
    """Prompt for a secret and print its protected form for config.ini."""
    secret = typer.prompt("Secret", hide_input=True, confirmation_prompt=True)
    cli = cli_module()
    console.print(cli.build_vault().protect(secret), soft_wrap=True)
