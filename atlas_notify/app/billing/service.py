"""Core service coordinating billing flows with external providers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from ...chat import Notifier
from ...config import DEFAULT_CANCEL_URL, DEFAULT_PLAN, DEFAULT_SUCCESS_URL
from .models import (
    BillingEvent,
    CheckoutCompletion,
    CheckoutSession,
    MembershipCommit,
    WebhookOutcome,
)

logger = logging.getLogger("billing")


class CheckoutError(Exception):
    """Raised when the payment provider refuses to create a checkout session."""


class PaymentProvider(Protocol):
    """External payment processor integration."""

    def create_checkout_session(
        self,
        *,
        price_id: str,
        customer_email: Optional[str],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
    ) -> Dict[str, object]:
        """Create a provider checkout session."""


class MembershipRepository(Protocol):
    """Persistence operations required by the membership service."""

    async def record_checkout(self, completion: CheckoutCompletion) -> MembershipCommit:
        ...


def format_new_member_message(completion: CheckoutCompletion) -> str:
    return (
        f"💸 NEW MEMBER: {completion.email} purchased the {completion.plan} plan. "
        f"Session: {completion.session_id}"
    )


@dataclass(slots=True)
class MembershipService:
    """Turns verified checkout events into users, memberships and announcements."""

    repository: MembershipRepository
    notifier: Notifier
    default_plan: str = DEFAULT_PLAN

    async def handle_event(self, event: BillingEvent) -> WebhookOutcome:
        if not event.is_checkout_completed:
            logger.debug("Ignoring webhook event %s type=%s", event.event_id, event.event_type)
            return WebhookOutcome.IGNORED

        completion = CheckoutCompletion.from_session(event.data_object, default_plan=self.default_plan)
        return await self.complete_checkout(completion)

    async def complete_checkout(self, completion: CheckoutCompletion) -> WebhookOutcome:
        if not completion.email:
            logger.warning("Skipping session, no email found: %s", completion.session_id)
            return WebhookOutcome.SKIPPED
        if not completion.session_id:
            logger.warning("Skipping checkout for %s, session has no id", completion.email)
            return WebhookOutcome.SKIPPED

        # Errors propagate so the provider redelivers the event.
        commit = await self.repository.record_checkout(completion)
        if not commit.created:
            return WebhookOutcome.DUPLICATE

        logger.info(
            "Recorded membership %s for %s",
            commit.membership_id,
            completion.email,
            extra={
                "user_id": commit.user_id,
                "plan": completion.plan,
                "stripe_session_id": completion.session_id,
            },
        )
        await self._announce(completion)
        return WebhookOutcome.PROCESSED

    async def _announce(self, completion: CheckoutCompletion) -> None:
        try:
            await self.notifier.send(format_new_member_message(completion))
        except Exception:
            logger.exception(
                "Failed to announce new member for session %s",
                completion.session_id,
                extra=self.notifier.describe(),
            )


@dataclass(slots=True)
class CheckoutService:
    """Creates provider hosted checkout sessions tagged with the membership plan."""

    provider: PaymentProvider
    plan: str = DEFAULT_PLAN
    default_success_url: str = DEFAULT_SUCCESS_URL
    default_cancel_url: str = DEFAULT_CANCEL_URL

    def create_checkout_session(
        self,
        *,
        price_id: Optional[str],
        email: Optional[str] = None,
        success_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
    ) -> CheckoutSession:
        if not price_id:
            raise CheckoutError("A priceId is required to start checkout")
        session = self.provider.create_checkout_session(
            price_id=price_id,
            customer_email=email or None,
            success_url=success_url or self.default_success_url,
            cancel_url=cancel_url or self.default_cancel_url,
            metadata={"plan": self.plan},
        )
        url = session.get("url")
        if not url:
            raise CheckoutError("Payment provider did not return a checkout URL")
        session_id = session.get("id")
        return CheckoutSession(session_id=str(session_id) if session_id else None, url=str(url))


__all__ = [
    "CheckoutError",
    "CheckoutService",
    "MembershipRepository",
    "MembershipService",
    "PaymentProvider",
    "format_new_member_message",
]
