from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from paperai.db.base import Base, JsonType


class Price(Base):
    __tablename__ = "prices"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    product_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)

    active: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, index=True)
    currency: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)
    # minor units (cents)
    unit_amount: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)  # one_time / recurring
    interval: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    raw: Mapped[dict] = mapped_column(JsonType)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
