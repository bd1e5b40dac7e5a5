"""Outbound chat notification package."""

from .providers import (
    DisabledNotifier,
    DiscordWebhookNotifier,
    NotificationDeliveryError,
    Notifier,
    create_notifier,
)

__all__ = [
    "DisabledNotifier",
    "DiscordWebhookNotifier",
    "NotificationDeliveryError",
    "Notifier",
    "create_notifier",
]
