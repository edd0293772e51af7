"""Open a validated connection by trying authentication strategies in order."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ksaow_monitor.errors import (
    AllAuthMethodsExhaustedError,
    DatabaseConnectionError,
    UnsupportedBackendError,
)
from ksaow_monitor.modules.connection import BackendKind, redact_connection_string

from .drivers import DatabaseDriver, default_drivers
from .strategies import STRATEGIES, AuthStrategy, is_auth_negotiation_error
from .trust import DEFAULT_APPLICATION_NAME, classify_trust_block


@dataclass
class AuthAttempt:
    """Outcome of one strategy attempt."""

    strategy: str
    succeeded: bool
    error: str | None = None


@dataclass
class NegotiatedConnection:
    """A live connection plus the strategy that opened it."""

    connection: Any
    strategy: AuthStrategy
    attempts: list[AuthAttempt] = field(default_factory=list)

    def close(self) -> None:
        self.connection.close()


def close_quietly(connection: Any, logger: logging.Logger) -> None:
    """Close a connection, logging instead of raising on failure."""
    try:
        connection.close()
    except Exception:
        logger.debug("Error while closing connection", exc_info=True)


def _open_and_check(driver: DatabaseDriver, connection_string: str, logger: logging.Logger) -> Any:
    connection = driver.connect(connection_string)
    try:
        cursor = connection.cursor()
        try:
            cursor.execute(driver.liveness_query)
            cursor.fetchone()
        finally:
            cursor.close()
    except BaseException:
        close_quietly(connection, logger)
        raise
    return connection


class AuthNegotiator:
    """Tries each strategy for a backend until one yields a working connection.

    Strategies are attempted in their fixed order every time. Any failure
    moves on to the next strategy, except the Oracle trust-trigger rejection
    which is raised immediately as ApplicationTrustBlockedError.
    """

    def __init__(
        self,
        drivers: Mapping[BackendKind, DatabaseDriver] | None = None,
        strategies: Mapping[BackendKind, Sequence[AuthStrategy]] | None = None,
        application_name: str = DEFAULT_APPLICATION_NAME,
        logger: logging.Logger | None = None,
    ):
        self.drivers = dict(drivers) if drivers is not None else default_drivers(application_name)
        self.strategies = dict(strategies) if strategies is not None else dict(STRATEGIES)
        self.application_name = application_name
        self.logger = logger or logging.getLogger(__name__)

    async def connect(self, connection_string: str, backend: BackendKind) -> NegotiatedConnection:
        """Return a validated connection or raise a DatabaseConnectionError."""
        driver = self.drivers.get(backend)
        strategies = self.strategies.get(backend)
        if driver is None or not strategies:
            raise UnsupportedBackendError(f"No driver registered for {backend!r}")

        self.logger.debug(
            "Connecting to %s: %s", backend.name, redact_connection_string(connection_string)
        )

        attempts: list[AuthAttempt] = []
        last_error: BaseException | None = None
        for strategy in strategies:
            if len(strategies) > 1:
                self.logger.info("Trying to connect with auth method: %s", strategy.name)
            try:
                connection = await self._attempt(driver, strategy.apply(connection_string))
            except Exception as exc:
                attempts.append(AuthAttempt(strategy.name, False, str(exc)))
                blocked = classify_trust_block(exc, self.application_name)
                if blocked is not None:
                    self.logger.error("%s", blocked)
                    self.logger.error("Remediation:\n%s", blocked.remediation)
                    raise blocked from exc
                if is_auth_negotiation_error(exc):
                    self.logger.debug("Auth method %s failed: %s", strategy.name, exc)
                else:
                    self.logger.warning(
                        "Connection attempt with %s failed: %s", strategy.name, exc
                    )
                last_error = exc
                continue

            attempts.append(AuthAttempt(strategy.name, True))
            self.logger.info("Connected to %s using auth method: %s", backend.name, strategy.name)
            return NegotiatedConnection(connection, strategy, attempts)

        if len(strategies) > 1:
            tried = ", ".join(attempt.strategy for attempt in attempts)
            raise AllAuthMethodsExhaustedError(
                f"All authentication methods failed for {backend.name} connection (tried: {tried})",
                attempts=attempts,
            ) from last_error
        raise DatabaseConnectionError(
            f"{backend.name} connection failed: {last_error}"
        ) from last_error

    async def _attempt(self, driver: DatabaseDriver, connection_string: str) -> Any:
        # The driver call blocks, so it runs in a worker thread. Cancelling the
        # caller does not interrupt the thread; a connection it opens late is
        # closed as soon as it arrives.
        task = asyncio.ensure_future(
            asyncio.to_thread(_open_and_check, driver, connection_string, self.logger)
        )
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            task.add_done_callback(self._close_orphan)
            raise

    def _close_orphan(self, task: asyncio.Future) -> None:
        if task.cancelled() or task.exception() is not None:
            return
        self.logger.debug("Closing connection opened after cancellation")
        close_quietly(task.result(), self.logger)
