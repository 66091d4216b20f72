import logging

from fastapi import FastAPI

from paperai.api.v1.routers.health import router as health_router
from paperai.api.v1.routers.stripe_webhook import router as stripe_router
from paperai.core.config import settings
from paperai.core.logging_config import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="PaperAI Billing", version="0.1.0")
app.include_router(health_router, prefix="/api/v1")
app.include_router(stripe_router, prefix="/api/v1")


@app.on_event("startup")
def validate_settings() -> None:
    if settings.webhook_secret:
        return
    if settings.env == "local":
        logger.warning("STRIPE_WEBHOOK_SECRET is missing; webhooks will be rejected with 400.")
        return
    raise RuntimeError("STRIPE_WEBHOOK_SECRET is missing. Check your environment.")
