"""
Database Connection Module
Handles the PostgreSQL connection used by the SQL document store,
via the SQLAlchemy async engine.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from foodiehub.core.config import get_settings

settings = get_settings()

# Create async engine (no connection is opened until first use)
engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_pre_ping=True,
)

# Session factory - creates new database sessions
async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False  # Objects remain accessible after commit
)


# Base class for all our models
class Base(DeclarativeBase):
    pass


async def init_db(bind=None):
    """
    Create all tables in database.
    Called once at startup when the SQL store is active.
    """
    # Register the tables on Base.metadata
    import foodiehub.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
