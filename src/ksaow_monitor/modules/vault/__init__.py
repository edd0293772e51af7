"""Credential protection at rest."""

from .backends import DpapiBackend, MachineKeyBackend, ProtectionBackend, default_backend
from .vault import PROTECTED_PREFIX, SecretVault, is_protected

__all__ = [
    "DpapiBackend",
    "MachineKeyBackend",
    "PROTECTED_PREFIX",
    "ProtectionBackend",
    "SecretVault",
    "default_backend",
    "is_protected",
]
