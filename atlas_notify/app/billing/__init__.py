"""Billing domain package turning paid checkouts into memberships."""

from .models import (
    BillingEvent,
    BillingEventType,
    CheckoutCompletion,
    CheckoutSession,
    MembershipCommit,
    WebhookOutcome,
)
from .service import (
    CheckoutError,
    CheckoutService,
    MembershipRepository,
    MembershipService,
    PaymentProvider,
    format_new_member_message,
)
from .verifier import StripeEventVerifier, WebhookVerificationError

__all__ = [
    "BillingEvent",
    "BillingEventType",
    "CheckoutCompletion",
    "CheckoutError",
    "CheckoutService",
    "CheckoutSession",
    "MembershipCommit",
    "MembershipRepository",
    "MembershipService",
    "PaymentProvider",
    "StripeEventVerifier",
    "WebhookOutcome",
    "WebhookVerificationError",
    "format_new_member_message",
]
