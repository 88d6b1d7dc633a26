"""SQLAlchemy models.

Define all ORM models here. They must inherit from Base so that
Alembic's autogenerate can detect them.

A product row is the whole catalog document: the group → subgroup → label
tree lives in a single JSON column and is rewritten on every mutation.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.db.session import Base  # noqa: F401 — re-exported for convenience

DocumentJSON = JSON().with_variant(JSONB(), "postgresql")


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True)
    productid: Mapped[int] = mapped_column(unique=True)
    productname: Mapped[str] = mapped_column(String(100), unique=True)
    groups: Mapped[list[dict[str, Any]]] = mapped_column(DocumentJSON, default=list)
    # Highest groupid ever issued for this product; ids are never reused.
    last_groupid: Mapped[int] = mapped_column(default=0)
    version: Mapped[int] = mapped_column(default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Every UPDATE carries "WHERE version = <seen>" and bumps the counter.
    __mapper_args__ = {"version_id_col": version}


# Lookups lower() the name, so uniqueness is case-insensitive too.
Index("uq_products_productname_lower", func.lower(Product.productname), unique=True)
