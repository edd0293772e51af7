"""Deliver probe results to the remote webhook."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ksaow_monitor.errors import WebhookError

DEFAULT_TIMEOUT = 30.0
DEFAULT_METHOD = "PUT"


class WebhookSender:
    """Sends JSON payloads with a hard upper bound on the whole call."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        method: str = DEFAULT_METHOD,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ):
        self.timeout = timeout
        self.method = method.upper()
        self._transport = transport
        self.logger = logger or logging.getLogger(__name__)

    async def send(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        """Send the payload; raise WebhookError on transport failure or timeout.

        A non-2xx response is logged as a warning but not raised.
        """
        if not url:
            raise WebhookError("Webhook URL is not configured")

        self.logger.info("Sending webhook to %s", url)
        try:
            response = await asyncio.wait_for(self._request(url, payload), self.timeout)
        except (TimeoutError, httpx.TimeoutException) as exc:
            self.logger.error("Timeout sending webhook to %s", url)
            raise WebhookError(f"Webhook timed out after {self.timeout:.0f}s") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self.logger.error("HTTP error sending webhook to %s: %s", url, exc)
            raise WebhookError(f"Webhook request failed: {exc}") from exc

        if response.is_success:
            self.logger.info("Webhook sent successfully. Response: %s", response.text[:500])
        else:
            self.logger.warning(
                "Webhook failed with status %d: %s", response.status_code, response.reason_phrase
            )
        return response

    async def _request(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.request(self.method, url, json=payload)
