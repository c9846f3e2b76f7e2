from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings
from logging_config import get_logger
from .models import Base

logger = get_logger(__name__)


def create_db_engine(database_url: Optional[str] = None) -> Engine:
    """Create an engine for the configured database.

    In-memory SQLite gets a single shared connection so every session sees
    the same database.
    """
    url = database_url or settings.database_url
    kwargs = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool

    try:
        engine = create_engine(url, **kwargs)
    except Exception as e:
        logger.error(f"Failed to create database engine: {e}", exc_info=True)
        raise
    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def create_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    """Thread-safe session factory; each store operation opens its own session."""
    return sessionmaker(bind=engine or create_db_engine(), autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
