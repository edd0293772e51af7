"""Shared CLI app objects and service wiring."""

import sys
from pathlib import Path

import typer
from rich.console import Console

from ksaow_monitor.config import (
    get_config_path,
    get_interval_seconds,
    get_program_name,
    get_webhook_method,
    get_webhook_timeout,
    interview,
)
from ksaow_monitor.modules.auth import AuthNegotiator
from ksaow_monitor.modules.probe import ProbeRunner
from ksaow_monitor.modules.report import WebhookSender
from ksaow_monitor.modules.service import MonitorService
from ksaow_monitor.modules.vault import SecretVault, is_protected

app = typer.Typer(
    name="ksaow-monitor",
    help="KS-AOW database reachability monitor",
    no_args_is_help=True,
)
console = Console()


def build_vault() -> SecretVault:
    return SecretVault()


def build_service(
    home: Path,
    execution_mode: str = "production",
    interactive: bool | None = None,
) -> MonitorService:
    """Wire a MonitorService from the configuration in ``home``."""
    if interactive is None:
        interactive = sys.stdin.isatty()

    vault = build_vault()
    config_path = get_config_path(home)
    bootstrap = (lambda: interview(config_path, vault)) if interactive else None

    negotiator = AuthNegotiator(application_name=get_program_name(home))
    sender = WebhookSender(timeout=get_webhook_timeout(home), method=get_webhook_method(home))
    return MonitorService(
        config_path=config_path,
        vault=vault,
        runner=ProbeRunner(negotiator),
        sender=sender,
        interval=get_interval_seconds(home),
        execution_mode=execution_mode,
        bootstrap=bootstrap,
    )


def mask_secret(value: str) -> str:
    """Show only the ends of a protected value; hide plaintext entirely."""
    if not value:
        return "(empty)"
    if is_protected(value) and len(value) > 12:
        return value[:8] + "..." + value[-4:]
    return "***"
