"""Database configuration and session management"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

database_url = settings.DATABASE_URL
if database_url.startswith("sqlite:///"):
    database_url = database_url.replace("sqlite:///", "sqlite+aiosqlite:///")

engine = create_async_engine(
    database_url,
    echo=False,
    future=True,
    connect_args={"check_same_thread": False} if "sqlite" in database_url else {},
)

AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def init_db(bind=None):
    """
    Initialize database (create tables)
    Safe to call multiple times - only creates tables that don't exist
    """
    # Import all models to ensure they're registered with Base.metadata
    from .models import SearchMetric  # noqa: F401

    async with (bind or engine).begin() as conn:

        def create_tables(connection):
            # checkfirst=True makes create_all skip existing tables
            Base.metadata.create_all(connection, checkfirst=True)

        await conn.run_sync(create_tables)
