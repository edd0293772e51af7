"""The long-running probe loop."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from pathlib import Path

from ksaow_monitor.config import MonitorConfig, load_monitor_config
from ksaow_monitor.errors import MonitorError
from ksaow_monitor.modules.probe import ProbeResult, ProbeRunner
from ksaow_monitor.modules.report import WebhookSender, build_payload
from ksaow_monitor.modules.vault import SecretVault

DEFAULT_INTERVAL = 300.0


class MonitorService:
    """Initializes configuration once, then probes and reports on a fixed interval.

    Cycles never overlap. Every domain failure becomes a FAILURE report;
    nothing raised by a cycle stops the loop.
    """

    def __init__(
        self,
        config_path: Path,
        vault: SecretVault,
        runner: ProbeRunner,
        sender: WebhookSender,
        interval: float = DEFAULT_INTERVAL,
        execution_mode: str = "production",
        bootstrap: Callable[[], MonitorConfig] | None = None,
        logger: logging.Logger | None = None,
    ):
        self.config_path = config_path
        self.vault = vault
        self.runner = runner
        self.sender = sender
        self.interval = interval
        self.execution_mode = execution_mode
        self.bootstrap = bootstrap
        self.logger = logger or logging.getLogger(__name__)
        self.config: MonitorConfig | None = None

    def initialize(self) -> MonitorConfig | None:
        """Load config.ini, or run the bootstrap flow when it does not exist yet."""
        try:
            if self.config_path.exists() or self.bootstrap is None:
                self.config = load_monitor_config(self.config_path, self.vault)
            else:
                self.config = self.bootstrap()
        except MonitorError as exc:
            self.logger.error(
                "Failed to initialize configuration - service will continue with limited "
                "functionality: %s",
                exc,
            )
            self.config = None
            return None
        except Exception:
            self.logger.error(
                "Unexpected error initializing configuration - service will continue with "
                "limited functionality",
                exc_info=True,
            )
            self.config = None
            return None
        self.logger.info("Configuration initialized from %s", self.config_path)
        return self.config

    async def probe(self) -> ProbeResult:
        """Reveal the credential and run one probe; failures become FAILURE results."""
        config = self.config
        if config is None:
            return ProbeResult.failure("Configuration not initialized")

        try:
            password = self.vault.reveal(config.encrypted_password)
        except MonitorError as exc:
            self.logger.error("Cannot reveal the database password: %s", exc)
            return ProbeResult.failure(str(exc), backend=config.descriptor.backend)

        try:
            return await self.runner.probe(config.descriptor, password)
        except Exception as exc:
            self.logger.exception("Unexpected error during database probe")
            return ProbeResult.failure(
                f"Unexpected error: {exc}", backend=config.descriptor.backend
            )

    async def report(self, result: ProbeResult) -> bool:
        """Send the result; failures are logged and swallowed."""
        config = self.config
        if config is None:
            self.logger.error("No webhook configured; result not reported")
            return False

        payload = build_payload(result, config.database_type, self.execution_mode)
        try:
            await self.sender.send(config.webhook_url, payload)
        except Exception:
            self.logger.exception("Failed to send %s webhook", payload["status"])
            return False
        return True

    async def run_cycle(self) -> ProbeResult:
        result = await self.probe()
        if result.succeeded:
            self.logger.info(
                "Monitoring check completed successfully. Found %d FIRM records", len(result.rows)
            )
        else:
            self.logger.error("Database monitoring check failed: %s", result.error_message)
        await self.report(result)
        return result

    async def run(self, stop_event: asyncio.Event) -> None:
        """Loop until ``stop_event`` is set."""
        self.logger.info("Monitor loop started")
        self.initialize()

        while not stop_event.is_set():
            await self._cycle_until_stopped(stop_event)
            if stop_event.is_set():
                break
            self.logger.info("Next check in %.0f seconds...", self.interval)
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)

        self.logger.info("Monitor loop ended")

    async def _cycle_until_stopped(self, stop_event: asyncio.Event) -> None:
        cycle = asyncio.create_task(self.run_cycle())
        stopper = asyncio.create_task(stop_event.wait())
        done, _pending = await asyncio.wait({cycle, stopper}, return_when=asyncio.FIRST_COMPLETED)

        if cycle not in done:
            self.logger.info("Stop requested; cancelling probe in flight")
            cycle.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await cycle
        else:
            stopper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await stopper
            if not cycle.cancelled() and cycle.exception() is not None:
                self.logger.error("Unexpected error in probe cycle", exc_info=cycle.exception())
