"""Webhook payload for a probe result."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from ksaow_monitor.modules.probe import ProbeResult

SUCCESS_MESSAGE = "Database access successful"


def format_timestamp(value: datetime) -> str:
    """Render as ``yyyy-MM-ddTHH:mm:ss.fffZ`` in UTC."""
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, bytes):
        return value.hex()
    return str(value)


def build_payload(
    result: ProbeResult,
    database_type: str,
    execution_mode: str = "production",
) -> dict[str, Any]:
    """Build the JSON document sent to the webhook."""
    return {
        "timestamp": format_timestamp(result.timestamp),
        "status": result.outcome.value,
        "firm_ids": [_jsonable(row) for row in result.rows],
        "database_type": database_type,
        "message": SUCCESS_MESSAGE if result.succeeded else (result.error_message or "error"),
        "executionMode": execution_mode,
    }
