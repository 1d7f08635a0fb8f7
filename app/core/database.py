"""
Database Configuration

Async SQLAlchemy 2.0 setup. PostgreSQL (asyncpg) in production,
SQLite (aiosqlite) for local development and tests.
"""

from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    All models should inherit from this class.
    """
    pass


def utcnow() -> datetime:
    """Timezone-aware current time, used as the client-side column default."""
    return datetime.now(timezone.utc)


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores ON DELETE rules unless every connection opts in."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Module-level engine instance (lazily initialized)
_engine: Optional[AsyncEngine] = None
_async_session_maker: Optional[async_sessionmaker[AsyncSession]] = None


def get_engine() -> AsyncEngine:
    """
    Get or create the async engine.

    Lazy initialization to avoid import-time database connection issues.
    Pool sizing and SSL only apply to server databases.
    """
    global _engine
    if _engine is None:
        from app.core.config import settings

        db_url = settings.DATABASE_URL

        if settings.is_sqlite:
            _engine = create_async_engine(
                db_url,
                echo=settings.is_development,
                connect_args={"check_same_thread": False},
            )
            enable_sqlite_foreign_keys(_engine)
        else:
            connect_args = {}
            if settings.DATABASE_SSL:
                import ssl

                # asyncpg doesn't accept sslmode/channel_binding params in URL
                if "?" in db_url:
                    db_url = db_url.split("?")[0]
                ssl_context = ssl.create_default_context()
                ssl_context.check_hostname = False
                ssl_context.verify_mode = ssl.CERT_NONE
                connect_args["ssl"] = ssl_context

            _engine = create_async_engine(
                db_url,
                echo=settings.is_development,
                pool_pre_ping=True,
                pool_size=5,
                max_overflow=10,
                connect_args=connect_args,
            )
    return _engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get or create the session maker."""
    global _async_session_maker
    if _async_session_maker is None:
        _async_session_maker = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )
    return _async_session_maker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Usage in FastAPI:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...

    Yields:
        AsyncSession: An async database session.
    """
    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def check_db(db: AsyncSession) -> bool:
    """Run a trivial query to probe connectivity."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        return False
    return True


async def init_db() -> None:
    """
    Initialize database tables.

    Note: In production, use Alembic migrations instead.
    This is useful for testing or initial development.
    """
    import app.models  # noqa: F401  (registers every table on Base.metadata)

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    global _engine, _async_session_maker
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_maker = None
