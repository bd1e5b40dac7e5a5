"""API routes exposing billing functionality."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from ...app_context import get_checkout_service, get_event_verifier, get_membership_service
from ..billing import (
    CheckoutError,
    CheckoutService,
    MembershipService,
    StripeEventVerifier,
    WebhookVerificationError,
)
from ..schemas.billing import (
    CheckoutErrorResponse,
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    WebhookAcknowledgement,
)

logger = logging.getLogger("billing.routes")

router = APIRouter(tags=["billing"])


@router.post("/stripe/webhook", response_model=WebhookAcknowledgement)
async def receive_stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    *,
    verifier: StripeEventVerifier = Depends(get_event_verifier),
    service: MembershipService = Depends(get_membership_service),
) -> WebhookAcknowledgement:
    payload = await request.body()
    try:
        event = verifier.verify(payload, stripe_signature)
    except WebhookVerificationError as exc:
        logger.warning("Webhook signature verification failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Webhook Error: {exc}") from exc

    try:
        outcome = await service.handle_event(event)
    except Exception as exc:
        logger.exception(
            "Failed to process webhook event %s",
            event.event_id,
            extra={"event_type": event.event_type},
        )
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="internal error") from exc

    return WebhookAcknowledgement(outcome=outcome)


@router.post(
    "/create-checkout-session",
    response_model=CheckoutSessionResponse,
    responses={500: {"model": CheckoutErrorResponse}},
)
def create_checkout_session(
    payload: CheckoutSessionRequest,
    *,
    service: CheckoutService = Depends(get_checkout_service),
):
    try:
        session = service.create_checkout_session(
            price_id=payload.price_id,
            email=payload.email,
            success_url=payload.success_url,
            cancel_url=payload.cancel_url,
        )
    except CheckoutError as exc:
        logger.error("Checkout error: %s", exc, extra={"price_id": payload.price_id})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=CheckoutErrorResponse(error=str(exc)).model_dump(),
        )
    return CheckoutSessionResponse.from_checkout(session)
