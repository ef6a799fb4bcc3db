"""Database engine, session factory and the FastAPI session dependency"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from barberbook.config.settings import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    """
    Pool settings for PostgreSQL. SQLite (local development) gets the
    thread check disabled instead, since FastAPI runs sync routes in a
    thread pool.
    """
    if make_url(url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,
    }


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """One session per request, closed when the response is sent"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create missing tables without Alembic (local development only)"""
    from barberbook.models import Base

    Base.metadata.create_all(bind=engine)
    logger.info(f"Created tables: {sorted(Base.metadata.tables)}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_tables()
