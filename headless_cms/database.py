from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from headless_cms.config import settings
import logging

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url


def create_engine_for_url(url: str):
    """Create an async engine with pool settings suited to the backend."""
    if url.startswith("sqlite"):
        kwargs = {"echo": settings.debug, "connect_args": {"check_same_thread": False}}
        # In-memory databases only live as long as their single connection
        if ":memory:" in url or url == "sqlite+aiosqlite://":
            kwargs["poolclass"] = StaticPool
        return create_async_engine(url, **kwargs)
    if settings.environment == "production":
        return create_async_engine(
            url,
            pool_size=20,
            max_overflow=50,
            pool_timeout=60,
            pool_recycle=1800,
        )
    return create_async_engine(
        url,
        echo=settings.debug,
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
    )


engine = create_engine_for_url(DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db():
    async with AsyncSessionLocal() as db:
        try:
            yield db
        except Exception as e:
            logger.error("Database session error: %s", e)
            raise
        finally:
            try:
                await db.close()
            except Exception as close_error:
                logger.warning("Error closing database session: %s", close_error)
