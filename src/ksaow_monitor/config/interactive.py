"""First-run configuration: interview the operator or derive it automatically."""

import getpass
import sys
from collections.abc import Callable
from pathlib import Path

from ksaow_monitor.errors import ConfigurationError
from ksaow_monitor.modules.bootstrap import (
    descriptor_from_apman,
    find_apman_ini,
    parse_apman_ini,
    read_license_client_id,
)
from ksaow_monitor.modules.vault import SecretVault

from .settings import MonitorConfig, save_monitor_config

AUTO_CONFIG_USER = "apw_user"


def _sanitize_value(value: str) -> str:
    return value.replace("\n", "").replace("\r", "").strip()


def _load_apman(apman_path: Path | None):
    apman_path = apman_path or find_apman_ini()
    if apman_path is None:
        raise ConfigurationError("Could not find apman.ini")
    return parse_apman_ini(apman_path)


def interview(
    config_path: Path,
    vault: SecretVault,
    apman_path: Path | None = None,
    *,
    read_secret: Callable[[str], str] = getpass.getpass,
    read_line: Callable[[str], str] = input,
) -> MonitorConfig:
    """Read apman.ini, ask for the password and webhook URL, save config.ini."""
    settings = _load_apman(apman_path)
    descriptor = descriptor_from_apman(settings)

    print(f"  Database: {settings.db_type} {settings.db_server} ({settings.db_user})", file=sys.stderr)
    password = read_secret("Database password: ")
    webhook_url = _sanitize_value(read_line("Webhook URL: "))
    if not webhook_url:
        raise ConfigurationError("Webhook URL is required")

    config = MonitorConfig(
        descriptor=descriptor,
        webhook_url=webhook_url,
        encrypted_password=vault.protect(password),
        database_type=settings.db_type,
    )
    save_monitor_config(config_path, config)
    return config


def auto_configure(
    webhook_url: str,
    config_path: Path,
    vault: SecretVault,
    apman_path: Path | None = None,
    license_path: Path | None = None,
) -> MonitorConfig:
    """Configure without prompts for installations using the ``apw_user`` account.

    The password is ``apw_user`` followed by the client id from the licence file.
    """
    settings = _load_apman(apman_path)
    if settings.db_user.lower() != AUTO_CONFIG_USER:
        raise ConfigurationError(
            f"DB_USER ({settings.db_user}) is not '{AUTO_CONFIG_USER}'; "
            "auto configuration requires it"
        )

    client_id = read_license_client_id(license_path)
    if not client_id:
        raise ConfigurationError("Could not read the client id from licencja_aow.xml")

    config = MonitorConfig(
        descriptor=descriptor_from_apman(settings),
        webhook_url=_sanitize_value(webhook_url),
        encrypted_password=vault.protect(f"{AUTO_CONFIG_USER}{client_id}"),
        database_type=settings.db_type,
    )
    save_monitor_config(config_path, config)
    return config
