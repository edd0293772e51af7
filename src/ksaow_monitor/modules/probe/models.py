"""Probe result model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from ksaow_monitor.modules.connection import BackendKind


class ProbeOutcome(Enum):
    SUCCESS = "success"
    FAILURE = "error"


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class ProbeResult:
    """Result of one monitoring cycle; consumed by the reporter, never stored."""

    outcome: ProbeOutcome
    rows: tuple[Any, ...] = ()
    error_message: str | None = None
    backend: BackendKind | None = None
    strategy: str | None = None
    remediation: str | None = None
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def succeeded(self) -> bool:
        return self.outcome is ProbeOutcome.SUCCESS

    @classmethod
    def success(
        cls,
        rows: list[Any] | tuple[Any, ...],
        *,
        backend: BackendKind | None = None,
        strategy: str | None = None,
        timestamp: datetime | None = None,
    ) -> ProbeResult:
        return cls(
            outcome=ProbeOutcome.SUCCESS,
            rows=tuple(rows),
            backend=backend,
            strategy=strategy,
            timestamp=timestamp or utc_now(),
        )

    @classmethod
    def failure(
        cls,
        message: str,
        *,
        backend: BackendKind | None = None,
        remediation: str | None = None,
        timestamp: datetime | None = None,
    ) -> ProbeResult:
        """A failed probe never carries rows."""
        return cls(
            outcome=ProbeOutcome.FAILURE,
            rows=(),
            error_message=message,
            backend=backend,
            remediation=remediation,
            timestamp=timestamp or utc_now(),
        )
