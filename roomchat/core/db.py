import threading
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from roomchat.core.config import settings
from roomchat.core.logger import get_logger

logger = get_logger(__name__)


Base = declarative_base()


_engine: Optional[AsyncEngine] = None
_session_factory: Optional[sessionmaker] = None
_lock = threading.Lock()


def get_engine() -> AsyncEngine:
    """
    Return the process-wide async engine, creating it on first use.
    """
    global _engine, _session_factory
    if _engine is None:
        with _lock:
            if _engine is None:
                engine = create_async_engine(
                    settings.DATABASE_URL,
                    echo=settings.DB_ECHO,
                    future=True,
                )
                _session_factory = sessionmaker(
                    engine,
                    class_=AsyncSession,
                    expire_on_commit=False,
                )
                _engine = engine
                logger.info("Async SQLAlchemy engine created (echo=%s)", settings.DB_ECHO)
    return _engine


def get_session_factory() -> sessionmaker:
    get_engine()
    return _session_factory


async def init_models() -> None:
    """
    Create the chat tables if they do not exist yet.
    """
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    global _engine, _session_factory
    with _lock:
        engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
        logger.info("Async SQLAlchemy engine disposed")


async def get_db():
    """
    Provide an async SQLAlchemy session for each request.
    """
    logger.debug("Opening async DB session")
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            logger.debug("Async DB session closed")
