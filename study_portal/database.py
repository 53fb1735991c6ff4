"""Database Connection and Session Management"""

import re
import ssl
from typing import AsyncGenerator, Tuple

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from study_portal.config import settings

_SSLMODE = re.compile(r"[?&]sslmode=([^&]+)", re.I)


def _async_url(url: str) -> Tuple[str, dict]:
    """
    Normalize DATABASE_URL for the async drivers.

    postgresql:// becomes postgresql+asyncpg://. asyncpg takes an SSLContext
    instead of libpq's sslmode, so sslmode is stripped and turned into one.
    """
    url = url.replace("postgresql://", "postgresql+asyncpg://")
    connect_args = {}
    match = _SSLMODE.search(url)
    if match:
        if match.group(1).lower() in ("require", "required", "verify-full"):
            ctx = ssl.create_default_context()
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
            connect_args["ssl"] = ctx
        url = _SSLMODE.sub("", url)
        url = url.replace("?&", "?").rstrip("?")
        if "?" not in url and "&" in url:
            url = url.replace("&", "?", 1)
    return url, connect_args


database_url, connect_args = _async_url(settings.DATABASE_URL)

# SQLite (local dev, tests) does not take queue pool sizing
engine_options = {}
if not database_url.startswith("sqlite"):
    engine_options = {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }

engine = create_async_engine(
    database_url,
    connect_args=connect_args,
    echo=settings.DEBUG,
    future=True,
    **engine_options,
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for declarative models
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function to get database session.

    Yields:
        AsyncSession: Database session

    Example:
        ```python
        @app.get("/documents")
        async def list_documents(db: AsyncSession = Depends(get_db)):
            # Use db session here
            pass
        ```
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_session_factory() -> async_sessionmaker:
    """
    Dependency returning the session factory.

    Aggregate endpoints open one session per concurrent query, since a
    single AsyncSession cannot run statements in parallel.
    """
    return AsyncSessionLocal


async def init_db() -> None:
    """Initialize database tables (for development only)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections"""
    await engine.dispose()
