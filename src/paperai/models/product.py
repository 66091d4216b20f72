from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from paperai.db.base import Base, JsonType


class Product(Base):
    __tablename__ = "products"

    # Stripe product id (prod_...)
    id: Mapped[str] = mapped_column(String(100), primary_key=True)

    active: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # payload as delivered by Stripe
    raw: Mapped[dict] = mapped_column(JsonType)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
