"""Test configuration and fixtures for the monitor."""

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from ksaow_monitor.modules.auth import AuthNegotiator
from ksaow_monitor.modules.connection import BackendKind, ConnectionDescriptor, parse_connection_string
from ksaow_monitor.modules.probe import ProbeRunner
from ksaow_monitor.modules.vault import MachineKeyBackend, SecretVault


class FakeCursor:
    def __init__(self, connection: "FakeConnection"):
        self.connection = connection

    def execute(self, sql: str) -> None:
        self.connection.executed.append(sql)
        if self.connection.query_error is not None and "FIRM" in sql:
            raise self.connection.query_error

    def fetchone(self):
        return (1,)

    def fetchall(self):
        return [(row,) for row in self.connection.rows]

    def close(self) -> None:
        pass


class FakeConnection:
    def __init__(self, rows=(), query_error: Exception | None = None):
        self.rows = list(rows)
        self.query_error = query_error
        self.executed: list[str] = []
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.closed = True


class FakeDriver:
    """Driver double; ``accept(plugin)`` decides whether a login succeeds."""

    liveness_query = "SELECT 1 FROM RDB$DATABASE"

    def __init__(
        self,
        kind: BackendKind = BackendKind.FIREBIRD,
        accept: Callable[[str | None], bool] | None = None,
        error: Callable[[str | None], Exception] | None = None,
        rows=(),
        query_error: Exception | None = None,
    ):
        self.kind = kind
        self.accept = accept
        self.error = error or (lambda plugin: Exception(f"Not supported plugin {plugin}"))
        self.rows = rows
        self.query_error = query_error
        self.attempts: list[str] = []
        self.plugins: list[str | None] = []
        self.connections: list[FakeConnection] = []

    def connect(self, connection_string: str) -> FakeConnection:
        self.attempts.append(connection_string)
        plugin = parse_connection_string(connection_string).get("auth_plugin_name")
        self.plugins.append(plugin)
        if self.accept is not None and not self.accept(plugin):
            raise self.error(plugin)
        connection = FakeConnection(self.rows, self.query_error)
        self.connections.append(connection)
        return connection


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def monitor_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point KSAOW_MONITOR_HOME at a temp dir and clear tunable overrides."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("KSAOW_MONITOR_HOME", str(home))
    for key in (
        "KSAOW_INTERVAL_SECONDS",
        "KSAOW_WEBHOOK_TIMEOUT",
        "KSAOW_WEBHOOK_METHOD",
        "KSAOW_LOG_LEVEL",
        "KSAOW_PROGRAM_NAME",
    ):
        monkeypatch.delenv(key, raising=False)
    return home


@pytest.fixture
def vault() -> SecretVault:
    return SecretVault(MachineKeyBackend(machine_id="test-machine-0001"))


@pytest.fixture
def firebird_descriptor() -> ConnectionDescriptor:
    return ConnectionDescriptor(
        backend=BackendKind.FIREBIRD,
        server="192.168.1.5:3051",
        user="apw_user",
        database_path="D:/KSBAZA/WAPTEKA.FDB",
    )


@pytest.fixture
def oracle_descriptor() -> ConnectionDescriptor:
    return ConnectionDescriptor(
        backend=BackendKind.ORACLE,
        server="dbhost",
        port=1521,
        user="apw_user",
        database_path="/ORCL",
    )


@pytest.fixture
def make_runner() -> Callable[..., tuple[ProbeRunner, FakeDriver]]:
    """Build a ProbeRunner wired to a FakeDriver for the given backend."""

    def _make(kind: BackendKind = BackendKind.FIREBIRD, **driver_kwargs):
        driver = FakeDriver(kind, **driver_kwargs)
        negotiator = AuthNegotiator(drivers={kind: driver})
        return ProbeRunner(negotiator), driver

    return _make
