"""Resilient Push Client - posts push notifications to the gateway with retry and backoff.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - Transient errors (5xx, connection, timeout): max N retries with exponential backoff
    - Client errors (4xx except 429): immediate give-up, no retry
    - send() never raises: push is fire-and-forget, failures are logged
    - Empty gateway URL or missing FCM token: message is logged and dropped

Design Decisions:
    - +/-25% jitter on backoff: prevents thundering herd on shared rate limits
    - BackgroundPushDispatcher adapts the client to core.notification.PushDispatcher
      by scheduling send() after the HTTP response is written
"""

import asyncio
import logging
import random

import httpx
from fastapi import BackgroundTasks

from plub.config import Settings
from plub.core.notification import PushMessage

logger = logging.getLogger(__name__)

_RATE_LIMITED = 429


class PushClient:
    """Wraps httpx with retry logic for the push gateway."""

    def __init__(
        self,
        gateway_url: str,
        server_key: str,
        max_retries: int = 3,
        base_delay_ms: int = 500,
        max_delay_ms: int = 8_000,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.gateway_url = gateway_url
        self.server_key = server_key
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "PushClient":
        return cls(
            gateway_url=settings.push_gateway_url,
            server_key=settings.push_server_key,
            max_retries=settings.push_max_retries,
            base_delay_ms=settings.push_base_delay_ms,
            max_delay_ms=settings.push_max_delay_ms,
        )

    async def send(self, message: PushMessage) -> bool:
        """Deliver one message. Returns True on success, False otherwise."""
        if not self.gateway_url or not message.fcm_token:
            logger.info(
                f"Push skipped (no gateway or token): {message.title}",
                extra={"account_id": message.account_id},
            )
            return False

        payload = {
            "to": message.fcm_token,
            "notification": {"title": message.title, "body": message.body},
        }
        headers = {"Authorization": f"key={self.server_key}"}

        async with httpx.AsyncClient(
            timeout=self.timeout_seconds, transport=self._transport,
        ) as client:
            for attempt in range(self.max_retries + 1):
                try:
                    response = await client.post(
                        self.gateway_url, json=payload, headers=headers,
                    )
                except httpx.TransportError as e:
                    if not await self._retry_or_give_up(attempt, f"transport error: {e}"):
                        return False
                    continue

                if response.status_code < 400:
                    logger.info(
                        "Push delivered",
                        extra={"account_id": message.account_id, "attempt": attempt + 1},
                    )
                    return True
                if response.status_code == _RATE_LIMITED or response.status_code >= 500:
                    delay = self._extract_retry_after(response)
                    if not await self._retry_or_give_up(
                        attempt, f"status {response.status_code}", delay,
                    ):
                        return False
                    continue

                logger.error(
                    f"Push rejected with status {response.status_code}",
                    extra={"account_id": message.account_id},
                )
                return False
        return False

    async def _retry_or_give_up(
        self, attempt: int, reason: str, delay_ms: int | None = None,
    ) -> bool:
        if attempt >= self.max_retries:
            logger.error(f"Push failed after {self.max_retries} retries: {reason}")
            return False
        delay = delay_ms or self._backoff(attempt)
        logger.warning(
            f"Push {reason}, retry after {delay}ms",
            extra={"attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)
        return True

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with +/-25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _extract_retry_after(self, response: httpx.Response) -> int | None:
        """Retry-After header in milliseconds, if present and numeric."""
        val = response.headers.get("retry-after")
        if val and val.isdigit():
            return int(val) * 1000
        return None


class BackgroundPushDispatcher:
    """PushDispatcher that delivers after the response via BackgroundTasks."""

    def __init__(self, background_tasks: BackgroundTasks, client: PushClient):
        self._background_tasks = background_tasks
        self._client = client

    def dispatch(self, message: PushMessage) -> None:
        self._background_tasks.add_task(self._client.send, message)
