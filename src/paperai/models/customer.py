from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from paperai.db.base import Base, JsonType


class Customer(Base):
    __tablename__ = "customers"

    # Stripe customer id (cus_...)
    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True, index=True)

    # copied from the default payment method on first checkout
    billing_details: Mapped[Optional[dict]] = mapped_column(JsonType, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
