"""API schemas for billing endpoints."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..billing import CheckoutSession, WebhookOutcome


class CheckoutSessionRequest(BaseModel):
    price_id: Optional[str] = Field(alias="priceId", default=None)
    email: Optional[str] = None
    success_url: Optional[str] = Field(alias="successUrl", default=None)
    cancel_url: Optional[str] = Field(alias="cancelUrl", default=None)

    model_config = ConfigDict(populate_by_name=True)


class CheckoutSessionResponse(BaseModel):
    url: str
    session_id: Optional[str] = Field(alias="sessionId", default=None)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_checkout(cls, session: CheckoutSession) -> "CheckoutSessionResponse":
        return cls(url=session.url, session_id=session.session_id)


class CheckoutErrorResponse(BaseModel):
    error: str


class WebhookAcknowledgement(BaseModel):
    ok: bool = True
    outcome: WebhookOutcome
