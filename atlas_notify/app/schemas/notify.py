"""API schemas for the notification relay."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class NotifyRequest(BaseModel):
    content: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class NotifyResponse(BaseModel):
    ok: bool = True
