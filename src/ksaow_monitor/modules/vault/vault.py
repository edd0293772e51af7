"""Protect and reveal the database credential."""

from __future__ import annotations

import base64
import binascii
import logging

from ksaow_monitor.errors import DecryptionError

from .backends import ProtectionBackend, default_backend

PROTECTED_PREFIX = "$AQ"


def is_protected(value: str) -> bool:
    """Return True if the value carries the ciphertext tag."""
    return bool(value) and value.startswith(PROTECTED_PREFIX)


class SecretVault:
    """Keeps a credential encrypted at rest; plaintext only exists transiently.

    Values without the ``$AQ`` tag are treated as legacy plaintext: ``reveal``
    returns them unchanged and ``upgrade`` protects them so the caller can
    rewrite the persisted form.
    """

    def __init__(
        self,
        backend: ProtectionBackend | None = None,
        logger: logging.Logger | None = None,
    ):
        self.backend = backend or default_backend()
        self.logger = logger or logging.getLogger(__name__)

    def protect(self, plaintext: str) -> str:
        """Encrypt plaintext and return the tagged, base64-encoded form."""
        ciphertext = self.backend.encrypt(plaintext.encode("utf-8"))
        return PROTECTED_PREFIX + base64.b64encode(ciphertext).decode("ascii")

    def reveal(self, value: str) -> str:
        """Return the plaintext for a protected value (or the value itself if untagged)."""
        if not is_protected(value):
            return value

        encoded = value[len(PROTECTED_PREFIX) :]
        try:
            ciphertext = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecryptionError("Protected credential is not valid base64") from exc

        plaintext = self.backend.decrypt(ciphertext)
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("Revealed credential is not valid UTF-8") from exc

    def upgrade(self, value: str) -> tuple[str, bool]:
        """Protect a legacy plaintext value.

        Returns ``(persisted_form, changed)``; already-tagged values are
        returned untouched with ``changed`` False.
        """
        if is_protected(value):
            return value, False
        self.logger.info("Protecting legacy plaintext credential (%s)", self.backend.name)
        return self.protect(value), True
