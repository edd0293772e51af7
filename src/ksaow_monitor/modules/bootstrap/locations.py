"""Locating files of the KS-APW installation on this host."""

from __future__ import annotations

import logging
import os
import string
import sys
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

REGISTRY_KEY = r"SOFTWARE\WOW6432Node\KAMSOFT\KS-APW"
REGISTRY_VALUE = "sciezka"
PREFERRED_DRIVES = ("C", "D", "E", "F")


def read_install_path() -> Path | None:
    """Installation directory recorded in the Windows registry, if any."""
    if sys.platform != "win32":
        return None
    import winreg

    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, REGISTRY_KEY) as key:
            value, _kind = winreg.QueryValueEx(key, REGISTRY_VALUE)
    except OSError:
        logger.debug("Registry key %s not available", REGISTRY_KEY)
        return None
    return Path(value) if value else None


def fixed_drive_roots() -> list[Path]:
    """Existing drive roots, C: onwards (Windows only)."""
    if sys.platform != "win32":
        return []
    roots = []
    for letter in string.ascii_uppercase[2:]:
        root = f"{letter}:\\"
        if os.path.exists(root):
            roots.append(Path(root))
    return roots


def default_drive_roots() -> list[Path]:
    """The usual install drives first, then any other fixed drive."""
    if sys.platform != "win32":
        return []
    return [Path(f"{letter}:\\") for letter in PREFERRED_DRIVES] + fixed_drive_roots()


def find_installation_file(
    install_relative: Iterable[str],
    drive_relative: Iterable[str],
    install_path: Path | None = None,
    drive_roots: Iterable[Path] | None = None,
) -> Path | None:
    """Search the registry path, the usual drives, then every fixed drive."""
    install_relative = tuple(install_relative)
    drive_relative = tuple(drive_relative)

    install_path = install_path if install_path is not None else read_install_path()
    if install_path is not None:
        candidate = install_path.joinpath(*install_relative)
        if candidate.is_file():
            return candidate

    roots = list(drive_roots) if drive_roots is not None else default_drive_roots()
    seen: set[Path] = set()
    for root in roots:
        if root in seen:
            continue
        seen.add(root)
        candidate = root.joinpath(*drive_relative)
        try:
            if candidate.is_file():
                return candidate
        except OSError:
            logger.debug("Cannot access %s", root, exc_info=True)
    return None
