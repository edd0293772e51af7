"""The persisted monitor configuration (config.ini)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import parse_qsl, urlencode

from ksaow_monitor.errors import ConfigurationError
from ksaow_monitor.modules.connection import ConnectionDescriptor, descriptor_from_url
from ksaow_monitor.modules.vault import SecretVault, is_protected

from .env_loader import load_env_file

logger = logging.getLogger(__name__)

CONFIG_KEYS = (
    "DATABASE_TYPE",
    "DB_SERVER",
    "DB_PORT",
    "DB_USER",
    "DB_PATH",
    "DB_PARAMS",
    "WEBHOOK_URL",
    "ENCRYPTED_PASSWORD",
)
PASSWORD_KEY = "ENCRYPTED_PASSWORD"
LEGACY_CONNECTION_KEY = "CONNECTION_STRING"


@dataclass(frozen=True)
class MonitorConfig:
    """Everything a probe cycle needs; rebuilt rather than mutated."""

    descriptor: ConnectionDescriptor
    webhook_url: str
    encrypted_password: str
    database_type: str = ""

    def __post_init__(self) -> None:
        if not self.database_type:
            object.__setattr__(self, "database_type", self.descriptor.backend.value)

    def to_values(self) -> dict[str, str]:
        descriptor = self.descriptor
        return {
            "DATABASE_TYPE": self.database_type,
            "DB_SERVER": descriptor.server,
            "DB_PORT": "" if descriptor.port is None else str(descriptor.port),
            "DB_USER": descriptor.user,
            "DB_PATH": descriptor.database_path,
            "DB_PARAMS": urlencode(dict(descriptor.extra_params)),
            "WEBHOOK_URL": self.webhook_url,
            "ENCRYPTED_PASSWORD": self.encrypted_password,
        }


def _descriptor_from_values(values: dict[str, str]) -> ConnectionDescriptor:
    if values.get("DB_SERVER"):
        return ConnectionDescriptor(
            backend=values.get("DATABASE_TYPE", ""),
            server=values["DB_SERVER"],
            port=values.get("DB_PORT") or None,
            user=values.get("DB_USER", ""),
            database_path=values.get("DB_PATH", ""),
            extra_params=dict(parse_qsl(values.get("DB_PARAMS", ""))),
        )
    if values.get(LEGACY_CONNECTION_KEY):
        return descriptor_from_url(values[LEGACY_CONNECTION_KEY])
    raise ConfigurationError("Configuration has neither DB_SERVER nor CONNECTION_STRING")


def _line_key(line: str) -> str:
    return line.split("=", 1)[0].strip().upper() if "=" in line else ""


def read_raw_value(config_path: Path, key: str) -> str | None:
    """Return the text after ``KEY=`` exactly as stored (no stripping of quotes or spaces)."""
    wanted = key.upper()
    value = None
    for line in config_path.read_text(encoding="utf-8").splitlines():
        if not line.lstrip().startswith("#") and _line_key(line) == wanted:
            value = line.split("=", 1)[1]
    return value


def rewrite_value(config_path: Path, key: str, value: str) -> None:
    """Replace one KEY=VALUE line in place, leaving the others untouched."""
    lines = config_path.read_text(encoding="utf-8").splitlines()
    wanted = key.upper()
    replaced = False
    for i, line in enumerate(lines):
        if _line_key(line) == wanted:
            lines[i] = f"{key}={value}"
            replaced = True
    if not replaced:
        lines.append(f"{key}={value}")
    config_path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def load_monitor_config(config_path: Path, vault: SecretVault | None = None) -> MonitorConfig:
    """Load config.ini, protecting a legacy plaintext password on the way.

    When a vault is given and the stored password is untagged, it is
    encrypted and the ENCRYPTED_PASSWORD line is rewritten before returning.
    """
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    values = load_env_file(config_path)
    descriptor = _descriptor_from_values(values)

    # Plaintext is taken verbatim; load_env_file strips quotes and spaces.
    encrypted = read_raw_value(config_path, PASSWORD_KEY) or ""
    if is_protected(encrypted.strip()):
        encrypted = encrypted.strip()
    if vault is not None and encrypted:
        encrypted, changed = vault.upgrade(encrypted)
        if changed:
            rewrite_value(config_path, PASSWORD_KEY, encrypted)
            logger.info("Stored password upgraded to protected form in %s", config_path)

    return MonitorConfig(
        descriptor=descriptor,
        webhook_url=values.get("WEBHOOK_URL", ""),
        encrypted_password=encrypted,
        database_type=values.get("DATABASE_TYPE", ""),
    )


def save_monitor_config(config_path: Path, config: MonitorConfig) -> Path:
    """Write config.ini with every known key."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    values = config.to_values()
    lines = [f"{key}={values.get(key, '')}" for key in CONFIG_KEYS]
    config_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return config_path
