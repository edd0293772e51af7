"""Run the read-only existence query against the monitored database."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ksaow_monitor.errors import MonitorError, QueryExecutionError
from ksaow_monitor.modules.auth import AuthNegotiator, NegotiatedConnection, classify_trust_block
from ksaow_monitor.modules.connection import (
    BackendKind,
    ConnectionDescriptor,
    render_connection_string,
)

from .models import ProbeResult, utc_now

PROBE_QUERY = "SELECT ID FROM FIRM"


class ProbeRunner:
    """Opens one connection, runs the probe query once and always closes it."""

    def __init__(
        self,
        negotiator: AuthNegotiator | None = None,
        query: str = PROBE_QUERY,
        logger: logging.Logger | None = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.negotiator = negotiator or AuthNegotiator(logger=self.logger)
        self.query = query

    async def run(self, connection_string: str, backend: BackendKind) -> ProbeResult:
        """Probe the database; every failure becomes a FAILURE result."""
        started = utc_now()
        try:
            negotiated = await self.negotiator.connect(connection_string, backend)
        except MonitorError as exc:
            self.logger.error("Connection failed: %s", exc)
            return ProbeResult.failure(
                str(exc),
                backend=backend,
                remediation=getattr(exc, "remediation", None),
                timestamp=started,
            )

        query = asyncio.ensure_future(asyncio.to_thread(self._fetch_ids, negotiated, backend))
        try:
            rows = await asyncio.shield(query)
        except asyncio.CancelledError:
            # The query keeps running in its thread; release once it returns.
            query.add_done_callback(lambda task: self._release_after(task, negotiated))
            raise
        except MonitorError as exc:
            self._release(negotiated)
            self.logger.error("Probe query failed: %s", exc)
            return ProbeResult.failure(
                str(exc),
                backend=backend,
                remediation=getattr(exc, "remediation", None),
                timestamp=started,
            )
        self._release(negotiated)

        self.logger.info("Probe succeeded: %d FIRM records", len(rows))
        return ProbeResult.success(
            rows, backend=backend, strategy=negotiated.strategy.name, timestamp=started
        )

    async def probe(self, descriptor: ConnectionDescriptor, password: str) -> ProbeResult:
        """Render the descriptor with the revealed password and run the probe."""
        try:
            connection_string = render_connection_string(descriptor, password)
        except MonitorError as exc:
            return ProbeResult.failure(str(exc), backend=descriptor.backend)
        return await self.run(connection_string, descriptor.backend)

    def _fetch_ids(self, negotiated: NegotiatedConnection, backend: BackendKind) -> list[Any]:
        try:
            cursor = negotiated.connection.cursor()
            try:
                cursor.execute(self.query)
                return [row[0] for row in cursor.fetchall()]
            finally:
                cursor.close()
        except Exception as exc:
            if backend is BackendKind.ORACLE:
                blocked = classify_trust_block(
                    exc, self.negotiator.application_name, stage="FIRM query"
                )
                if blocked is not None:
                    self.logger.error("Remediation:\n%s", blocked.remediation)
                    raise blocked from exc
            raise QueryExecutionError(f"Probe query failed: {exc}") from exc

    def _release_after(self, task: asyncio.Future, negotiated: NegotiatedConnection) -> None:
        if not task.cancelled() and task.exception() is not None:
            self.logger.debug("Probe query failed after cancellation: %s", task.exception())
        self._release(negotiated)

    def _release(self, negotiated: NegotiatedConnection) -> None:
        try:
            negotiated.close()
        except Exception:
            self.logger.warning("Failed to close probe connection", exc_info=True)
