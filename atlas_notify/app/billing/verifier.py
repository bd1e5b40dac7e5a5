"""Authentication of inbound billing provider webhooks."""
from __future__ import annotations

import json
import logging
from typing import Optional

import stripe

from .models import BillingEvent

logger = logging.getLogger("billing.webhooks")


class WebhookVerificationError(Exception):
    """Raised when an inbound webhook cannot be authenticated or parsed."""


class StripeEventVerifier:
    """Verifies the ``Stripe-Signature`` header against the raw request body."""

    def __init__(self, *, signing_secret: str, tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE) -> None:
        if not signing_secret:
            raise ValueError("signing_secret must be provided")
        self._signing_secret = signing_secret
        self.tolerance = tolerance

    def verify(self, payload: bytes, signature: Optional[str]) -> BillingEvent:
        """Return the parsed event for ``payload`` if ``signature`` is valid.

        ``payload`` must be the body exactly as received; the signature covers
        those bytes, so it is never re-serialized before the check.
        """

        if not signature:
            raise WebhookVerificationError("Missing Stripe-Signature header")

        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise WebhookVerificationError("Payload is not valid UTF-8") from exc

        try:
            stripe.WebhookSignature.verify_header(body, signature, self._signing_secret, self.tolerance)
        except stripe.SignatureVerificationError as exc:
            raise WebhookVerificationError(str(exc) or "Invalid signature") from exc

        try:
            envelope = json.loads(body)
        except ValueError as exc:
            raise WebhookVerificationError("Invalid JSON payload") from exc

        return _event_from_envelope(envelope)


def _event_from_envelope(envelope: object) -> BillingEvent:
    if not isinstance(envelope, dict):
        raise WebhookVerificationError("Event payload must be a JSON object")

    event_id = envelope.get("id")
    event_type = envelope.get("type")
    data = envelope.get("data")
    if not event_id or not event_type:
        raise WebhookVerificationError("Event payload is missing id or type")
    if not isinstance(data, dict) or not isinstance(data.get("object"), dict):
        raise WebhookVerificationError("Event payload is missing data.object")

    event = BillingEvent(
        event_id=str(event_id),
        event_type=str(event_type),
        data_object=data["object"],
        livemode=bool(envelope.get("livemode", False)),
    )
    logger.debug("Verified webhook event %s type=%s", event.event_id, event.event_type)
    return event


__all__ = ["StripeEventVerifier", "WebhookVerificationError"]
