"""
SQLAlchemy base model and async session management

Declarative base shared by every table plus the lazily created engine used by
the SQLAlchemy-backed store.
"""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import MetaData, DateTime
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from customer_addresses.config import get_settings


# Naming convention so Alembic generates stable constraint names
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    Base class for all database models
    """

    metadata = metadata


class TimestampMixin:
    """
    created_at / updated_at columns

    Timestamps are assigned with microsecond precision so "most recent first"
    ordering is stable even on SQLite.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="creation time",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        comment="last modification time",
    )


_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_engine() -> AsyncEngine:
    """
    Create the async engine on first use

    SQLite URLs skip the pool sizing options, which only apply to QueuePool.
    """
    global _engine, _session_factory
    if _engine is None:
        settings = get_settings()
        options = {"echo": settings.SQL_ECHO, "pool_pre_ping": True}
        if not settings.DATABASE_URL.startswith("sqlite"):
            options.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_recycle=settings.DB_POOL_RECYCLE,
            )
        _engine = create_async_engine(settings.DATABASE_URL, **options)
        _session_factory = async_sessionmaker(
            _engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _engine


def open_session() -> AsyncSession:
    """New session bound to the shared engine"""
    get_engine()
    return _session_factory()


async def init_db() -> None:
    """
    Create all tables

    Development and tests only; production schema is owned by migrations.
    """
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """
    Dispose of the engine on shutdown
    """
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
