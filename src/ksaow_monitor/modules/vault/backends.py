"""Host-bound encryption primitives used by the secret vault."""

from __future__ import annotations

import base64
import sys
from pathlib import Path
from typing import Protocol

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ksaow_monitor.errors import DecryptionError

MACHINE_ID_PATHS = (
    Path("/etc/machine-id"),
    Path("/var/lib/dbus/machine-id"),
)

_HKDF_SALT = b"ksaow-monitor/secret-vault"
_HKDF_INFO = b"machine-scope credential key v1"


class ProtectionBackend(Protocol):
    """Encrypts bytes with a key that never leaves the host."""

    name: str

    def encrypt(self, data: bytes) -> bytes: ...

    def decrypt(self, data: bytes) -> bytes: ...


class DpapiBackend:
    """Windows DPAPI with machine scope (any account on this host can decrypt)."""

    name = "dpapi"

    def encrypt(self, data: bytes) -> bytes:
        import win32crypt
        import win32cryptcon

        return win32crypt.CryptProtectData(
            data, None, None, None, None, win32cryptcon.CRYPTPROTECT_LOCAL_MACHINE
        )

    def decrypt(self, data: bytes) -> bytes:
        import pywintypes
        import win32crypt
        import win32cryptcon

        try:
            _description, plaintext = win32crypt.CryptUnprotectData(
                data, None, None, None, win32cryptcon.CRYPTPROTECT_LOCAL_MACHINE
            )
        except pywintypes.error as exc:
            raise DecryptionError(f"DPAPI could not decrypt the credential: {exc}") from exc
        return plaintext


class MachineKeyBackend:
    """Fernet encryption keyed by the host's machine id.

    The key is derived on demand with HKDF and is never written anywhere, so
    a protected value copied to another host cannot be revealed there.
    """

    name = "machine-key"

    def __init__(self, machine_id: str | None = None, id_paths: tuple[Path, ...] = MACHINE_ID_PATHS):
        self._machine_id = machine_id
        self._id_paths = id_paths
        self._fernet: Fernet | None = None

    def _read_machine_id(self) -> str:
        if self._machine_id:
            return self._machine_id
        for path in self._id_paths:
            try:
                value = path.read_text(encoding="ascii").strip()
            except (FileNotFoundError, PermissionError, UnicodeDecodeError):
                continue
            if value:
                return value
        raise DecryptionError("No machine id available to derive the credential key")

    def _cipher(self) -> Fernet:
        if self._fernet is None:
            hkdf = HKDF(algorithm=hashes.SHA256(), length=32, salt=_HKDF_SALT, info=_HKDF_INFO)
            key = hkdf.derive(self._read_machine_id().encode("utf-8"))
            self._fernet = Fernet(base64.urlsafe_b64encode(key))
        return self._fernet

    def encrypt(self, data: bytes) -> bytes:
        return self._cipher().encrypt(data)

    def decrypt(self, data: bytes) -> bytes:
        try:
            return self._cipher().decrypt(data)
        except InvalidToken as exc:
            raise DecryptionError(
                "Credential was protected on another host or is corrupted"
            ) from exc


def default_backend() -> ProtectionBackend:
    """Pick the platform primitive: DPAPI on Windows, machine key elsewhere."""
    if sys.platform == "win32":
        return DpapiBackend()
    return MachineKeyBackend()
