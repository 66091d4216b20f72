from __future__ import annotations

from paperai.db.session import engine
from paperai.db.base import Base

# register billing tables on Base.metadata
from paperai.models import customer, price, product, subscription  # noqa: F401


def create_all() -> None:
    Base.metadata.create_all(bind=engine)
