"""Shared application context for reusable dependencies."""
from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request

from .app.billing import CheckoutService, MembershipService, StripeEventVerifier
from .chat import Notifier
from .config import AppConfig


def configure(
    app: FastAPI,
    *,
    config: AppConfig,
    notifier: Notifier,
    membership_service: MembershipService,
    checkout_service: CheckoutService,
    event_verifier: StripeEventVerifier,
    db_pool: Optional[Any] = None,
    http_client: Optional[Any] = None,
) -> None:
    """Register application-wide dependencies required by the routers."""

    app.state.config = config
    app.state.notifier = notifier
    app.state.membership_service = membership_service
    app.state.checkout_service = checkout_service
    app.state.event_verifier = event_verifier
    app.state.db_pool = db_pool
    app.state.http_client = http_client


def _require(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"Application context has not been configured yet: {name}")
    return value


def get_config(request: Request) -> AppConfig:
    return _require(request, "config")


def get_notifier(request: Request) -> Notifier:
    return _require(request, "notifier")


def get_membership_service(request: Request) -> MembershipService:
    return _require(request, "membership_service")


def get_checkout_service(request: Request) -> CheckoutService:
    return _require(request, "checkout_service")


def get_event_verifier(request: Request) -> StripeEventVerifier:
    return _require(request, "event_verifier")
