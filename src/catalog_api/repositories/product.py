"""Product data-access layer.

Pure query functions — no business logic, no HTTP concerns.
Each function takes a session and returns models or scalars.
"""

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from catalog_api.exceptions import AlreadyInitializedError, ConflictRetryError
from catalog_api.models import Product


async def list_products(db: AsyncSession) -> list[Product]:
    """Return every product in seed order."""
    result = await db.execute(select(Product).order_by(Product.productid))
    return list(result.scalars().all())


async def count_products(db: AsyncSession) -> int:
    """Return total number of products."""
    result = await db.execute(select(func.count(Product.id)))
    return result.scalar_one()


async def get_product_by_name(db: AsyncSession, productname: str) -> Product | None:
    """Return the product whose name matches case-insensitively, or None."""
    stmt = select(Product).where(func.lower(Product.productname) == productname.lower())
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def insert_products(db: AsyncSession, products: list[Product]) -> None:
    """Insert products in one flush.

    A unique-constraint violation means another seed got there first.
    """
    db.add_all(products)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise AlreadyInitializedError() from exc


async def save_product(db: AsyncSession, product: Product) -> None:
    """Write the whole product document back, version-checked.

    The UPDATE only matches the row version this session read; if another
    request saved in between, nothing is written and ConflictRetryError is raised.
    """
    productname = product.productname
    try:
        await db.flush()
    except StaleDataError as exc:
        raise ConflictRetryError(productname) from exc
