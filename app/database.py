import os
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from .config import get_settings

settings = get_settings()

_db_url = os.environ.get("DATABASE_URL", settings.database_url)

# Analyses fall back to in-memory storage when no engine can be built
try:
    async_engine = create_async_engine(
        _db_url,
        echo=settings.debug,
        pool_pre_ping=True,
    )

    AsyncSessionLocal = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
except Exception:
    async_engine = None
    AsyncSessionLocal = None

Base = declarative_base()


async def init_db():
    """Create the timing analysis tables."""
    if async_engine is None:
        return
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
