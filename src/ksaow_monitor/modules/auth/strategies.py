"""Authentication strategies tried when opening a connection."""

from __future__ import annotations

from dataclasses import dataclass

from ksaow_monitor.modules.connection import AUTH_PLUGIN_PARAM, BackendKind


@dataclass(frozen=True)
class AuthStrategy:
    """A named login mechanism; ``plugin_name`` None means the server default."""

    name: str
    plugin_name: str | None = None

    def apply(self, connection_string: str) -> str:
        """Return the connection string with this strategy's parameter appended."""
        if not self.plugin_name:
            return connection_string
        separator = "" if connection_string.endswith(";") else ";"
        return f"{connection_string}{separator}{AUTH_PLUGIN_PARAM}={self.plugin_name};"


DEFAULT_STRATEGY = AuthStrategy("default")

FIREBIRD_STRATEGIES: tuple[AuthStrategy, ...] = (
    AuthStrategy("Srp256", "Srp256"),
    AuthStrategy("Srp", "Srp"),
    AuthStrategy("Legacy", "Legacy_Auth"),
    DEFAULT_STRATEGY,
)

# Oracle negotiates natively in the driver; a single implicit attempt.
ORACLE_STRATEGIES: tuple[AuthStrategy, ...] = (DEFAULT_STRATEGY,)

STRATEGIES: dict[BackendKind, tuple[AuthStrategy, ...]] = {
    BackendKind.FIREBIRD: FIREBIRD_STRATEGIES,
    BackendKind.ORACLE: ORACLE_STRATEGIES,
}

AUTH_FAILURE_MARKERS = ("not supported plugin", "authentication")


def is_auth_negotiation_error(exc: BaseException) -> bool:
    """Return True if the error message points at plugin/authentication negotiation."""
    message = str(exc).lower()
    return any(marker in message for marker in AUTH_FAILURE_MARKERS)
