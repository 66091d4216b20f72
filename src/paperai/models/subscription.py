from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from paperai.db.base import Base, JsonType


class Subscription(Base):
    __tablename__ = "subscriptions"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    customer_id: Mapped[str] = mapped_column(String(100), index=True)

    # trialing / active / past_due / canceled ... (deleted subscriptions land here as "canceled")
    status: Mapped[Optional[str]] = mapped_column(String(30), nullable=True, index=True)
    price_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    cancel_at_period_end: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    current_period_end: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    raw: Mapped[dict] = mapped_column(JsonType)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
