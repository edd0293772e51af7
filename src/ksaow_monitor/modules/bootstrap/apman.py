"""Reader for the KS-APW ``apman.ini`` database settings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from ksaow_monitor.errors import ConfigurationError
from ksaow_monitor.modules.connection import BackendKind, ConnectionDescriptor

from .locations import find_installation_file

APMAN_ENCODING = "cp1250"
PARAMS_SECTION = "PARAMETRY"
ALIAS_KEY = "ALIAS_BAZY"

_ORACLE_SERVER = re.compile(r"^(?P<host>[^:/]+)(?::(?P<port>\d+))?(?P<service>/.*)?$")


@dataclass(frozen=True)
class ApmanSettings:
    """Database section of apman.ini selected by ``[PARAMETRY] ALIAS_BAZY``."""

    alias: str
    db_type: str
    db_server: str
    db_user: str
    db_path: str


def find_apman_ini(install_path: Path | None = None, drive_roots=None) -> Path | None:
    return find_installation_file(
        ("KS", "APW", "apman.ini"),
        ("KS", "APW", "apman.ini"),
        install_path=install_path,
        drive_roots=drive_roots,
    )


def read_sections(text: str) -> dict[str, dict[str, str]]:
    """Parse INI text leniently: later duplicates win, stray lines are ignored."""
    sections: dict[str, dict[str, str]] = {}
    current = ""
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("[") and stripped.endswith("]"):
            current = stripped[1:-1]
            sections[current] = {}
        elif "=" in stripped and current:
            key, value = stripped.split("=", 1)
            sections[current][key.strip()] = value.strip()
    return sections


def parse_apman_ini(path: Path) -> ApmanSettings:
    text = path.read_text(encoding=APMAN_ENCODING, errors="replace")
    sections = read_sections(text)

    params = sections.get(PARAMS_SECTION, {})
    alias = params.get(ALIAS_KEY)
    if not alias:
        raise ConfigurationError(f"Missing [{PARAMS_SECTION}] section or {ALIAS_KEY} parameter")
    if alias not in sections:
        raise ConfigurationError(f"Missing database section [{alias}]")

    section = sections[alias]
    return ApmanSettings(
        alias=alias,
        db_type=section.get("DB_TYPE", ""),
        db_server=section.get("DB_SERVER", ""),
        db_user=section.get("DB_USER", ""),
        db_path=section.get("DB_PATH", ""),
    )


def descriptor_from_apman(settings: ApmanSettings) -> ConnectionDescriptor:
    """Translate apman settings into a descriptor.

    Oracle installations carry ``host[:port]/service`` in DB_SERVER; DB_PATH
    is only used when DB_SERVER has no service part.
    """
    backend = BackendKind.parse(settings.db_type)
    if backend is BackendKind.ORACLE:
        match = _ORACLE_SERVER.match(settings.db_server.strip())
        if not match:
            raise ConfigurationError(f"Unrecognised Oracle DB_SERVER: {settings.db_server!r}")
        return ConnectionDescriptor(
            backend=backend,
            server=match.group("host"),
            port=match.group("port"),
            user=settings.db_user,
            database_path=match.group("service") or settings.db_path,
        )
    return ConnectionDescriptor(
        backend=backend,
        server=settings.db_server,
        user=settings.db_user,
        database_path=settings.db_path,
    )
