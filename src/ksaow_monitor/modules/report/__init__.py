"""Reporting of probe results."""

from .payload import build_payload, format_timestamp
from .webhook import DEFAULT_METHOD, DEFAULT_TIMEOUT, WebhookSender

__all__ = [
    "DEFAULT_METHOD",
    "DEFAULT_TIMEOUT",
    "WebhookSender",
    "build_payload",
    "format_timestamp",
]
