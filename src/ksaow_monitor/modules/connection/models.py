"""Vendor-neutral connection descriptor."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from ksaow_monitor.errors import ConfigurationError, UnsupportedBackendError

FIREBIRD_DEFAULT_PORT = 3050


class BackendKind(Enum):
    """Supported database engines, valued by their configuration token."""

    ORACLE = "ORACLE"
    FIREBIRD = "FB"

    @classmethod
    def parse(cls, token: str | BackendKind) -> BackendKind:
        """Resolve a case-insensitive configuration token."""
        if isinstance(token, BackendKind):
            return token
        normalized = (token or "").strip().upper()
        if normalized == "FIREBIRD":
            return cls.FIREBIRD
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise UnsupportedBackendError(f"Unsupported database type: {token!r}")


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Where and as whom to connect, independent of vendor syntax.

    The password is never part of the descriptor; it is supplied separately
    when the connection string is rendered.
    """

    backend: BackendKind
    server: str
    user: str
    database_path: str
    port: int | None = None
    extra_params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        backend = BackendKind.parse(self.backend)
        object.__setattr__(self, "backend", backend)

        server = (self.server or "").strip()
        database_path = (self.database_path or "").strip()
        if not server:
            raise ConfigurationError("Database server is required")
        if not database_path:
            raise ConfigurationError("Database path or alias is required")
        object.__setattr__(self, "server", server)
        object.__setattr__(self, "database_path", database_path)
        object.__setattr__(self, "user", (self.user or "").strip())

        port = self.port
        if port is not None:
            try:
                port = int(port)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"Invalid database port: {self.port!r}") from exc
        elif backend is BackendKind.FIREBIRD:
            port = FIREBIRD_DEFAULT_PORT
        object.__setattr__(self, "port", port)

        object.__setattr__(self, "extra_params", MappingProxyType(dict(self.extra_params or {})))

    def replace(self, **changes) -> ConnectionDescriptor:
        """Return a rebuilt descriptor with the given fields changed."""
        if "extra_params" not in changes:
            changes["extra_params"] = dict(self.extra_params)
        return dataclasses.replace(self, **changes)

    def extra(self, name: str) -> str | None:
        """Look up an extra parameter case-insensitively."""
        wanted = name.lower()
        for key, value in self.extra_params.items():
            if key.lower() == wanted:
                return value
        return None
