# app/core/database.py
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

# ORM model base class
Base = declarative_base()


class Database:
    """
    Process-wide handle to the persistence layer.

    Opened once at startup and disposed at shutdown (see the lifespan in
    app/main.py). Sessions are handed to requests through get_db.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    def connect(self) -> None:
        if self.engine is not None:
            return
        self.engine = create_async_engine(
            self.url,
            pool_pre_ping=True,  # ping before handing out a pooled connection
            echo=self.echo,
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Database engine created")

    async def dispose(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self.session_factory = None
        logger.info("Database engine disposed")

    def session(self) -> AsyncSession:
        if self.session_factory is None:
            self.connect()
        return self.session_factory()


db_handle = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one async session per request"""
    async with db_handle.session() as session:
        try:
            yield session
        finally:
            await session.close()
