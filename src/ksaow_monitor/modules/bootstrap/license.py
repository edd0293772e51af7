"""Client id lookup in the KS-AOW licence file."""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path

from .locations import find_installation_file

logger = logging.getLogger(__name__)

KS_NAMESPACE = "http://www.kamsoft.pl/ks"
CLIENT_ID_TAG = f"{{{KS_NAMESPACE}}}id-knt-ks"

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def find_license_file(install_path: Path | None = None, drive_roots=None) -> Path | None:
    return find_installation_file(
        ("APW", "AP", "licencja_aow.xml"),
        ("KS", "APW", "AP", "licencja_aow.xml"),
        install_path=install_path,
        drive_roots=drive_roots,
    )


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("cp1250", errors="replace")


def read_license_client_id(path: Path | None = None) -> str | None:
    """Return the ``id-knt-ks`` value, or None if the file is missing or unreadable."""
    path = path or find_license_file()
    if path is None or not path.is_file():
        return None

    try:
        text = _XML_DECLARATION.sub("", _decode(path.read_bytes()), count=1)
        root = ET.fromstring(text)
    except (OSError, ET.ParseError) as exc:
        logger.warning("Cannot read licence file %s: %s", path, exc)
        return None

    for element in root.iter(CLIENT_ID_TAG):
        value = (element.text or "").strip()
        if value:
            return value
    return None
