"""
Database connection management.

Provides the async SQLAlchemy engine and session factory for the metadata
store. API processes keep a pooled engine; worker processes use NullPool
because every job runs inside its own short-lived event loop and pooled
asyncpg connections cannot cross loops.

Dependencies: sqlalchemy, pdf_rag.configs
System role: Database connection lifecycle management
"""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from pdf_rag.boundary.db.base import Base
from pdf_rag.configs.database import DatabaseSettings


def get_async_engine(db_config: DatabaseSettings, use_null_pool: bool = False) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Args:
        db_config: Database settings
        use_null_pool: Open a fresh connection per session (worker processes)

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Raises:
        ArgumentError: If database URL is invalid or engine creation fails
    """
    url = db_config.async_database_url

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=db_config.echo_sql)

    if use_null_pool:
        return create_async_engine(url, echo=db_config.echo_sql, poolclass=NullPool)

    return create_async_engine(
        url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create async session factory for database operations.

    Args:
        engine: Engine the sessions bind to

    Returns:
        async_sessionmaker: Factory configured for manual transaction control

    Usage:
        SessionFactory = get_async_session_factory(engine)
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all registered tables if they do not exist.

    Args:
        engine: Target engine
    """
    # Register models on Base.metadata
    from pdf_rag.boundary.db.models import document_model  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
