"""Domain models for the billing system."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...config import DEFAULT_PLAN


class BillingEventType(str, Enum):
    """Webhook event types that the application reacts to."""

    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


class WebhookOutcome(str, Enum):
    """How a verified webhook delivery was handled."""

    PROCESSED = "processed"
    DUPLICATE = "duplicate"
    SKIPPED = "skipped"
    IGNORED = "ignored"


class BillingEvent(BaseModel):
    """Verified webhook envelope delivered by the billing provider."""

    event_id: str
    event_type: str
    data_object: Dict[str, Any] = Field(default_factory=dict)
    livemode: bool = False

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def is_checkout_completed(self) -> bool:
        return self.event_type == BillingEventType.CHECKOUT_SESSION_COMPLETED.value


class CheckoutCompletion(BaseModel):
    """Fields of a completed checkout session needed to record a membership."""

    session_id: Optional[str] = None
    email: Optional[str] = None
    plan: str = DEFAULT_PLAN
    customer_id: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def from_session(cls, session: Mapping[str, Any], *, default_plan: str = DEFAULT_PLAN) -> "CheckoutCompletion":
        """Build a completion from a provider checkout session object.

        The buyer email comes from ``customer_details.email`` and falls back to
        ``metadata.email``; the first non-blank value wins. The plan comes from
        ``metadata.plan`` and falls back to ``default_plan``.
        """

        customer_details = session.get("customer_details") or {}
        metadata = session.get("metadata") or {}

        email = _first_non_blank(
            customer_details.get("email") if isinstance(customer_details, Mapping) else None,
            metadata.get("email") if isinstance(metadata, Mapping) else None,
        )
        plan = _first_non_blank(metadata.get("plan") if isinstance(metadata, Mapping) else None) or default_plan
        customer = session.get("customer")
        if isinstance(customer, Mapping):
            # expanded customer object
            customer = customer.get("id")

        return cls(
            session_id=_first_non_blank(session.get("id")),
            email=email,
            plan=plan,
            customer_id=str(customer) if customer else None,
        )


class MembershipCommit(BaseModel):
    """Result of the user upsert and membership insert transaction."""

    user_id: int
    membership_id: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def created(self) -> bool:
        """``False`` when the checkout session had already been recorded."""
        return self.membership_id is not None


class CheckoutSession(BaseModel):
    """Return value of a checkout session creation request."""

    session_id: Optional[str] = None
    url: str

    model_config = ConfigDict(populate_by_name=True, frozen=True)


def _first_non_blank(*values: Any) -> Optional[str]:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
