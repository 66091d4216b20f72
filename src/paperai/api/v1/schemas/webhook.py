from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class WebhookEvent(BaseModel):
    """Verified Stripe event envelope. Only what routing needs is typed."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    type: str
    data: dict[str, Any]
    created: Optional[int] = None
    livemode: Optional[bool] = None

    @property
    def payload(self) -> dict[str, Any]:
        obj = self.data.get("object")
        return obj if isinstance(obj, dict) else {}


class WebhookReceivedOut(BaseModel):
    received: bool = True
