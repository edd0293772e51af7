"""Tests for authentication negotiation."""

import asyncio
import threading

import pytest

from conftest import FakeConnection, FakeDriver
from ksaow_monitor.errors import (
    AllAuthMethodsExhaustedError,
    ApplicationTrustBlockedError,
    DatabaseConnectionError,
    UnsupportedBackendError,
)
from ksaow_monitor.modules.auth import (
    FIREBIRD_STRATEGIES,
    AuthNegotiator,
    AuthStrategy,
    is_auth_negotiation_error,
    remediation_steps,
)
from ksaow_monitor.modules.connection import BackendKind

FB_STRING = "User=apw_user;Password=pw;Database=h:C:\\DB.FDB;Port=3050;Dialect=3;Charset=UTF8;"
ORA_STRING = "Data Source=dbhost:1521/ORCL;User Id=apw_user;Password=pw;"
TRUST_MESSAGE = (
    "ORA-04088: error during execution of trigger 'APW_USER.TSPY_CONN_APW_USER'\n"
    "ORA-20001: application not trusted"
)


class BlockingDriver(FakeDriver):
    """Blocks inside connect until released."""

    def __init__(self):
        super().__init__(BackendKind.FIREBIRD)
        self.started = threading.Event()
        self.gate = threading.Event()

    def connect(self, connection_string):
        self.attempts.append(connection_string)
        self.started.set()
        self.gate.wait(5)
        connection = FakeConnection()
        self.connections.append(connection)
        return connection


class TestAuthStrategy:
    def test_apply_appends_plugin(self):
        strategy = AuthStrategy("Srp", "Srp")
        assert strategy.apply("User=u;") == "User=u;auth_plugin_name=Srp;"
        assert strategy.apply("User=u") == "User=u;auth_plugin_name=Srp;"

    def test_default_leaves_string(self):
        assert AuthStrategy("default").apply("User=u;") == "User=u;"

    def test_fixed_firebird_order(self):
        assert [s.name for s in FIREBIRD_STRATEGIES] == ["Srp256", "Srp", "Legacy", "default"]

    def test_auth_error_markers(self):
        assert is_auth_negotiation_error(Exception("Error: not supported plugin"))
        assert is_auth_negotiation_error(Exception("Your user name and password are not defined. Authentication failed"))
        assert not is_auth_negotiation_error(Exception("Unable to complete network request"))


class TestAuthNegotiator:
    @pytest.mark.asyncio
    async def test_third_strategy_succeeds_after_two_failures(self):
        driver = FakeDriver(accept=lambda plugin: plugin == "Legacy_Auth")
        negotiator = AuthNegotiator(drivers={BackendKind.FIREBIRD: driver})

        negotiated = await negotiator.connect(FB_STRING, BackendKind.FIREBIRD)

        assert negotiated.strategy.name == "Legacy"
        assert driver.plugins == ["Srp256", "Srp", "Legacy_Auth"]
        assert [a.succeeded for a in negotiated.attempts] == [False, False, True]
        assert negotiated.connection is driver.connections[0]
        assert driver.connections[0].executed == [driver.liveness_query]

    @pytest.mark.asyncio
    async def test_first_strategy_success_stops(self):
        driver = FakeDriver()
        negotiator = AuthNegotiator(drivers={BackendKind.FIREBIRD: driver})

        negotiated = await negotiator.connect(FB_STRING, BackendKind.FIREBIRD)

        assert negotiated.strategy.name == "Srp256"
        assert len(driver.attempts) == 1

    @pytest.mark.asyncio
    async def test_all_strategies_exhausted(self):
        driver = FakeDriver(accept=lambda plugin: False)
        negotiator = AuthNegotiator(drivers={BackendKind.FIREBIRD: driver})

        with pytest.raises(AllAuthMethodsExhaustedError) as excinfo:
            await negotiator.connect(FB_STRING, BackendKind.FIREBIRD)

        assert driver.plugins == ["Srp256", "Srp", "Legacy_Auth", None]
        assert [a.strategy for a in excinfo.value.attempts] == ["Srp256", "Srp", "Legacy", "default"]
        assert "Srp256, Srp, Legacy, default" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_non_auth_errors_still_fall_through(self):
        outcomes = iter([False, True])

        def accept(plugin):
            return next(outcomes)

        driver = FakeDriver(accept=accept, error=lambda plugin: Exception("network unreachable"))
        negotiator = AuthNegotiator(drivers={BackendKind.FIREBIRD: driver})

        negotiated = await negotiator.connect(FB_STRING, BackendKind.FIREBIRD)
        assert negotiated.strategy.name == "Srp"

    @pytest.mark.asyncio
    async def test_liveness_failure_closes_connection(self):
        driver = FakeDriver(query_error=Exception("table unavailable"))
        driver.liveness_query = "SELECT ID FROM FIRM"
        negotiator = AuthNegotiator(drivers={BackendKind.FIREBIRD: driver})

        with pytest.raises(AllAuthMethodsExhaustedError):
            await negotiator.connect(FB_STRING, BackendKind.FIREBIRD)
        assert len(driver.connections) == 4
        assert all(connection.closed for connection in driver.connections)

    @pytest.mark.asyncio
    async def test_oracle_single_attempt(self):
        driver = FakeDriver(
            BackendKind.ORACLE,
            accept=lambda plugin: False,
            error=lambda plugin: Exception("ORA-01017: invalid username/password"),
        )
        negotiator = AuthNegotiator(drivers={BackendKind.ORACLE: driver})

        with pytest.raises(DatabaseConnectionError) as excinfo:
            await negotiator.connect(ORA_STRING, BackendKind.ORACLE)

        assert not isinstance(excinfo.value, AllAuthMethodsExhaustedError)
        assert driver.attempts == [ORA_STRING]

    @pytest.mark.asyncio
    async def test_oracle_trust_block(self):
        driver = FakeDriver(
            BackendKind.ORACLE,
            accept=lambda plugin: False,
            error=lambda plugin: Exception(TRUST_MESSAGE),
        )
        negotiator = AuthNegotiator(drivers={BackendKind.ORACLE: driver})

        with pytest.raises(ApplicationTrustBlockedError) as excinfo:
            await negotiator.connect(ORA_STRING, BackendKind.ORACLE)

        assert "UPDATE apw_user.aapp SET trust=1" in excinfo.value.remediation
        assert "%KSAOWMONITOR.EXE%" in excinfo.value.remediation
        assert "TSPY_CONN_APW_USER" in excinfo.value.detail

    @pytest.mark.asyncio
    async def test_unregistered_backend(self):
        negotiator = AuthNegotiator(drivers={BackendKind.FIREBIRD: FakeDriver()})
        with pytest.raises(UnsupportedBackendError):
            await negotiator.connect(ORA_STRING, BackendKind.ORACLE)

    @pytest.mark.asyncio
    async def test_connection_opened_after_cancel_is_closed(self):
        driver = BlockingDriver()
        negotiator = AuthNegotiator(drivers={BackendKind.FIREBIRD: driver})

        task = asyncio.create_task(negotiator.connect(FB_STRING, BackendKind.FIREBIRD))
        assert await asyncio.to_thread(driver.started.wait, 5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        driver.gate.set()
        for _ in range(200):
            if driver.connections and driver.connections[0].closed:
                break
            await asyncio.sleep(0.01)

        assert driver.connections[0].closed
        assert len(driver.attempts) == 1


def test_remediation_uses_application_name():
    steps = remediation_steps("Other.exe")
    assert "LIKE '%OTHER.EXE%'" in steps
    assert "COMMIT" in steps
