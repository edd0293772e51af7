"""KS-AOW Monitor CLI - periodic database reachability probe."""

from ksaow_monitor.cli_commands.shared import app, build_service, build_vault, console
from ksaow_monitor.config import (
    auto_configure,
    get_config_path,
    get_log_level,
    get_monitor_home,
    interview,
    load_env_file,
    load_tunables,
)

# Importing the command modules registers them on ``app``.
from ksaow_monitor.cli_commands import (  # noqa: E402,F401
    check_command,
    config_command,
    run_command,
    setup_command,
)

__all__ = [
    "app",
    "auto_configure",
    "build_service",
    "build_vault",
    "console",
    "get_config_path",
    "get_log_level",
    "get_monitor_home",
    "interview",
    "load_env_file",
    "load_tunables",
    "main",
]


@app.command()
def version() -> None:
    """Show the installed version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        current_version = pkg_version("ksaow-monitor")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"KS-AOW Monitor {current_version}")


def main():
    """Entry point for the CLI."""
    app()
