import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import settings

logger = logging.getLogger(__name__)


def make_engine(url: str, debug: bool = False):
    """Async engine for the catalogue and content tables."""
    if url.startswith("sqlite"):
        new_engine = create_async_engine(url, echo=debug)
        # SQLite ignores foreign keys unless asked per connection
        event.listen(new_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return new_engine
    return create_async_engine(url, echo=debug, pool_size=10, max_overflow=20, pool_recycle=1800)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = make_engine(settings.database_url, debug=settings.debug)

AsyncSessionLocal = sessionmaker(bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)

Base = declarative_base()


async def get_db():
    async with AsyncSessionLocal() as db:
        try:
            yield db
        except Exception:
            logger.warning("Rolling back database session after error")
            await db.rollback()
            raise
