from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
import logging

from wechat_digest.core.config import settings
import wechat_digest.models  # noqa: F401  registers tables on SQLModel.metadata

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    echo=settings.ENVIRONMENT == "local" and settings.DEBUG_SQL,
)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session():
    """FastAPI dependency yielding one session per request"""
    async with async_session() as session:
        yield session


async def init_db():
    """Create the account, article, summary and task log tables if missing"""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables ready")


async def close_db():
    logger.info("Closing database connections")
    await engine.dispose()
