from typing import Optional

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from knowledge_base.core.config import Settings, settings as default_settings
from knowledge_base.core.errors import ConfigurationError

Base = declarative_base()

# Process-wide engine, created on first use by get_engine()
_engine: Optional[Engine] = None


def normalize_database_url(url: str) -> str:
    # Hosted Postgres providers hand out postgres:// which SQLAlchemy no longer accepts,
    # and a bare postgresql:// picks whichever driver SQLAlchemy defaults to
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            return "postgresql+psycopg2://" + url[len(scheme):]
    return url


def build_engine(url: str, settings: Settings = None) -> Engine:
    """
    Create a new engine for the given connection string

    Args:
        url: Database connection string
        settings: Pool and transport settings (defaults to the process settings)

    Returns:
        SQLAlchemy Engine (not cached)
    """
    settings = settings or default_settings
    url = normalize_database_url(url)

    if url.startswith("sqlite"):
        kwargs = {
            "connect_args": {"check_same_thread": False},
            "echo": settings.debug,
        }
        # In-memory databases live inside one connection, so every session must share it
        if make_url(url).database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    # PostgreSQL with required SSL and connection pooling
    return create_engine(
        url,
        echo=settings.debug,
        poolclass=QueuePool,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=settings.database_pool_recycle,
        connect_args={
            "sslmode": settings.database_sslmode,
            "connect_timeout": settings.database_connect_timeout,
            "application_name": "knowledge_base",
        },
    )


def get_engine(settings: Settings = None) -> Engine:
    """Return the process-wide engine, creating it from POSTGRES_URL on first call"""
    global _engine

    if _engine is None:
        settings = settings or default_settings
        if not settings.postgres_url:
            raise ConfigurationError("POSTGRES_URL environment variable is not set")
        _engine = build_engine(settings.postgres_url, settings)
        logger.info(f"Database engine created for {_engine.url.render_as_string(hide_password=True)}")

    return _engine


def dispose_engine() -> None:
    """Close pooled connections and forget the process-wide engine"""
    global _engine

    if _engine is not None:
        _engine.dispose()
        logger.info("Database engine disposed")
        _engine = None


def create_tables(engine: Engine) -> None:
    # Import models so their tables are registered on Base.metadata
    from knowledge_base import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
