"""Bearer-token protected relay into the chat notifier."""
from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status

from ...app_context import get_config, get_notifier
from ...chat import NotificationDeliveryError, Notifier
from ...config import AppConfig
from ..schemas.notify import NotifyRequest, NotifyResponse

logger = logging.getLogger("notify.routes")

router = APIRouter(tags=["notify"])


def require_notify_token(
    authorization: Optional[str] = Header(None),
    *,
    config: AppConfig = Depends(get_config),
) -> None:
    expected = config.notify_token
    provided = authorization or ""
    if not expected or not secrets.compare_digest(provided.encode("utf-8"), f"Bearer {expected}".encode("utf-8")):
        logger.warning("Rejected notify request with invalid bearer token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")


@router.post(
    "/notify",
    response_model=NotifyResponse,
    dependencies=[Depends(require_notify_token)],
)
async def relay_notification(
    payload: NotifyRequest,
    *,
    notifier: Notifier = Depends(get_notifier),
) -> NotifyResponse:
    try:
        await notifier.send(payload.content or "")
    except NotificationDeliveryError as exc:
        logger.error("Notify relay failed: %s", exc, extra=notifier.describe())
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return NotifyResponse()
