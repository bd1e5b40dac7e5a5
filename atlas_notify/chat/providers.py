"""Chat notifier implementations used by the application."""
from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from ..config import AppConfig

logger = logging.getLogger(__name__)


class NotificationDeliveryError(Exception):
    """Raised when the chat destination did not accept a message."""


class Notifier:
    """Base notifier for outbound chat messages."""

    name = "base"

    async def send(self, content: str) -> None:
        raise NotImplementedError

    def describe(self) -> Dict[str, str]:
        return {"notifier": self.name}


class DisabledNotifier(Notifier):
    """Notifier used when no chat destination is configured."""

    name = "disabled"

    async def send(self, content: str) -> None:
        logger.debug("Chat notifications disabled; dropping message", extra={"content_length": len(content)})


class DiscordWebhookNotifier(Notifier):
    """Posts messages to a Discord incoming webhook."""

    name = "discord"

    def __init__(self, *, webhook_url: str, client: httpx.AsyncClient) -> None:
        self.webhook_url = webhook_url
        self._client = client

    async def send(self, content: str) -> None:
        try:
            response = await self._client.post(self.webhook_url, json={"content": content})
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NotificationDeliveryError(
                f"Discord webhook responded with {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise NotificationDeliveryError(f"Discord webhook request failed: {exc}") from exc


def create_notifier(config: AppConfig, *, client: Optional[httpx.AsyncClient] = None) -> Notifier:
    if not config.notifications_enabled:
        return DisabledNotifier()
    if client is None:
        raise ValueError("An HTTP client is required for the Discord notifier")
    return DiscordWebhookNotifier(webhook_url=config.discord_webhook_url, client=client)


__all__ = [
    "DisabledNotifier",
    "DiscordWebhookNotifier",
    "NotificationDeliveryError",
    "Notifier",
    "create_notifier",
]
