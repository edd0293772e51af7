"""DB-API drivers that open connections from rendered connection strings."""

from __future__ import annotations

from typing import Any, Protocol

from ksaow_monitor.errors import ConfigurationError
from ksaow_monitor.modules.connection import (
    AUTH_PLUGIN_PARAM,
    FIREBIRD_DEFAULT_PORT,
    BackendKind,
    parse_connection_string,
)

from .trust import DEFAULT_APPLICATION_NAME


class DatabaseDriver(Protocol):
    """Opens a DB-API 2.0 connection for one backend."""

    kind: BackendKind
    liveness_query: str

    def connect(self, connection_string: str) -> Any: ...


def _require(params: dict[str, str], key: str) -> str:
    value = params.get(key.lower())
    if not value:
        raise ConfigurationError(f"Connection string is missing {key!r}")
    return value


class OracleDriver:
    """python-oracledb in thin mode."""

    kind = BackendKind.ORACLE
    liveness_query = "SELECT 1 FROM DUAL"

    def __init__(self, program: str = DEFAULT_APPLICATION_NAME):
        self.program = program

    def connect_kwargs(self, connection_string: str) -> dict[str, Any]:
        params = parse_connection_string(connection_string)
        return {
            "user": params.get("user id", ""),
            "password": params.get("password", ""),
            "dsn": _require(params, "Data Source"),
            "program": self.program,
        }

    def connect(self, connection_string: str) -> Any:
        import oracledb

        return oracledb.connect(**self.connect_kwargs(connection_string))


class FirebirdDriver:
    """firebird-driver using the ``host/port:path`` database syntax."""

    kind = BackendKind.FIREBIRD
    liveness_query = "SELECT 1 FROM RDB$DATABASE"

    def connect_kwargs(self, connection_string: str) -> dict[str, Any]:
        params = parse_connection_string(connection_string)
        database = _require(params, "Database")
        port = params.get("port") or str(FIREBIRD_DEFAULT_PORT)

        host, sep, path = database.partition(":")
        # A bare drive letter ("D:\\DB.FDB") means a local database, no host.
        if sep and len(host) > 1:
            database = f"{host}/{port}:{path}"

        kwargs: dict[str, Any] = {
            "database": database,
            "user": params.get("user", ""),
            "password": params.get("password", ""),
            "charset": params.get("charset") or "UTF8",
        }
        plugin = params.get(AUTH_PLUGIN_PARAM)
        if plugin:
            kwargs["auth_plugin_list"] = plugin
        return kwargs

    def connect(self, connection_string: str) -> Any:
        from firebird.driver import connect

        kwargs = self.connect_kwargs(connection_string)
        return connect(kwargs.pop("database"), **kwargs)


def default_drivers(program: str = DEFAULT_APPLICATION_NAME) -> dict[BackendKind, DatabaseDriver]:
    return {
        BackendKind.ORACLE: OracleDriver(program=program),
        BackendKind.FIREBIRD: FirebirdDriver(),
    }
