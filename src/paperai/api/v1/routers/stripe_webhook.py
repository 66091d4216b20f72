import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from paperai.api.deps import get_billing_store, get_mailer, get_payment_gateway, get_settings
from paperai.api.v1.schemas.webhook import WebhookReceivedOut
from paperai.core.config import Settings
from paperai.core.errors import WebhookError
from paperai.integrations.resend.mailer import Mailer
from paperai.integrations.stripe.gateway import PaymentGateway
from paperai.integrations.stripe.webhook import construct_event
from paperai.services.billing_store import BillingStore
from paperai.services.webhook_router import handle_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stripe", tags=["stripe"])


@router.post("/webhook", response_model=WebhookReceivedOut)
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
    app_settings: Settings = Depends(get_settings),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    store: BillingStore = Depends(get_billing_store),
    mailer: Mailer = Depends(get_mailer),
):
    payload = await request.body()

    try:
        # 1) Verify + parse
        event = construct_event(
            payload,
            stripe_signature,
            secret=app_settings.webhook_secret,
            gateway=gateway,
        )

        # 2) Route (irrelevant types are a no-op)
        handle_event(event, store=store, mailer=mailer, email_from=app_settings.email_from)
    except WebhookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e

    return WebhookReceivedOut(received=True)
