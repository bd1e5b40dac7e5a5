"""Application wiring for the billing services."""
from __future__ import annotations

import logging
from typing import Dict, Optional

import asyncpg
import stripe

from ...chat import Notifier
from ...config import AppConfig
from ..billing import (
    CheckoutError,
    CheckoutService,
    MembershipService,
    PaymentProvider,
    StripeEventVerifier,
)
from ..billing.repository import PostgresMembershipRepository


logger = logging.getLogger("billing")


class StripePaymentProvider(PaymentProvider):
    """Creates checkout sessions through the Stripe API."""

    def __init__(self, *, api_key: str, api_version: Optional[str] = None) -> None:
        self._api_key = api_key
        self.api_version = api_version

    def create_checkout_session(
        self,
        *,
        price_id: str,
        customer_email: Optional[str],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
    ) -> Dict[str, object]:
        request_options: Dict[str, str] = {"api_key": self._api_key}
        if self.api_version:
            request_options["stripe_version"] = self.api_version
        try:
            session = stripe.checkout.Session.create(
                **request_options,
                mode="payment",
                payment_method_types=["card"],
                line_items=[{"price": price_id, "quantity": 1}],
                customer_email=customer_email,
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
            )
        except stripe.StripeError as exc:
            message = getattr(exc, "user_message", None) or str(exc)
            raise CheckoutError(message) from exc
        return {"id": session.id, "url": session.url}


def build_membership_service(pool: asyncpg.Pool, notifier: Notifier, config: AppConfig) -> MembershipService:
    return MembershipService(
        repository=PostgresMembershipRepository(pool),
        notifier=notifier,
        default_plan=config.default_plan,
    )


def build_checkout_service(config: AppConfig, provider: Optional[PaymentProvider] = None) -> CheckoutService:
    if provider is None:
        provider = StripePaymentProvider(
            api_key=config.stripe_secret_key,
            api_version=config.stripe_api_version,
        )
    return CheckoutService(
        provider=provider,
        plan=config.default_plan,
        default_success_url=config.checkout_success_url,
        default_cancel_url=config.checkout_cancel_url,
    )


def build_event_verifier(config: AppConfig) -> StripeEventVerifier:
    return StripeEventVerifier(signing_secret=config.stripe_webhook_secret)


__all__ = [
    "StripePaymentProvider",
    "build_checkout_service",
    "build_event_verifier",
    "build_membership_service",
]
