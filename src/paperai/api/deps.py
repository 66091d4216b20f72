from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from paperai.core.config import Settings, settings
from paperai.db.session import get_db
from paperai.integrations.resend.mailer import Mailer, default_mailer
from paperai.integrations.stripe.gateway import PaymentGateway, default_gateway
from paperai.services.billing_store import BillingStore, SqlBillingStore


def db_session() -> Generator[Session, None, None]:
    """FastAPI dependency: DB session"""
    yield from get_db()


def get_settings() -> Settings:
    return settings


def get_payment_gateway() -> PaymentGateway:
    return default_gateway()


def get_mailer() -> Mailer:
    return default_mailer()


def get_billing_store(
    db: Session = Depends(db_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> BillingStore:
    return SqlBillingStore(db, gateway)
