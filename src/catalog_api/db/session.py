from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from catalog_api.config import Settings

# Naming conventions for database constraints.
# Without these, Alembic can't autogenerate consistent constraint names across migrations.
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",  # Index
    "uq": "uq_%(table_name)s_%(column_0_name)s",  # Unique constraint
    "ck": "ck_%(table_name)s_%(constraint_name)s",  # Check constraint
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",  # Foreign key
    "pk": "pk_%(table_name)s",  # Primary key
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    All models inherit from this class. SQLAlchemy uses Base.metadata to track
    all registered models and their table schemas.

    The naming_convention ensures all constraints have predictable names,
    which is critical for Alembic migrations to work correctly.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def create_engine(settings: Settings) -> AsyncEngine:
    """Build the async engine with connection pooling from settings.

    The engine manages a pool of database connections that are reused across requests.
    Called once from the application lifespan; nothing connects until first use.
    """
    return create_async_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,  # Persistent connections
        max_overflow=settings.db_max_overflow,  # Extra connections under load
        pool_timeout=settings.db_pool_timeout,  # Wait time for available connection
        pool_recycle=settings.db_pool_recycle,  # Max connection age (prevents stale connections)
        pool_pre_ping=settings.db_pool_pre_ping,  # Test connection before checkout
        echo=settings.db_echo,  # SQL logging
        # asyncpg driver options — passed directly to asyncpg.connect()
        connect_args={"command_timeout": settings.db_statement_timeout},  # Kill slow queries
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory — creates AsyncSession instances.

    expire_on_commit=False keeps objects usable after commit without re-querying.
    This is important for async because accessing expired attributes would trigger sync I/O.
    """
    return async_sessionmaker(engine, expire_on_commit=False)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides a database session per request.

    The session factory is opened by the lifespan and stored on ``app.state``.
    Commits on success, rolls back on exception. This is the single place where
    transaction boundaries are managed. Services and repositories flush but
    never call commit() or rollback() directly.
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def shutdown(engine: AsyncEngine) -> None:
    """Graceful shutdown — close all pooled database connections.

    Call this in FastAPI's lifespan context manager on shutdown.
    Ensures connections are properly closed before the process exits.
    """
    await engine.dispose()
