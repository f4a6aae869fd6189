import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from lending.core.config import get_database_url

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

# Internal lazy globals
_engine = None
_SessionLocal = None
_database_url = None


def get_engine():
    """Return a cached SQLAlchemy engine, creating it from DATABASE_URL on
    first call. This allows tests to set DATABASE_URL before the engine is
    constructed."""
    global _engine
    global _SessionLocal
    global _database_url
    database_url = get_database_url()
    # If engine not created yet or DATABASE_URL changed, (re)create engine
    if _engine is None or _database_url != database_url:
        if _engine is not None:
            _engine.dispose()
            _SessionLocal = None

        if database_url.startswith("sqlite") and ":memory:" in database_url:
            # Use a single shared in-memory database across the process
            # so DDL persists across connections.
            _engine = create_engine(
                database_url,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif database_url.startswith("sqlite"):
            _engine = create_engine(
                database_url, echo=False, connect_args={"check_same_thread": False}
            )
        else:
            _engine = create_engine(database_url, echo=False, pool_pre_ping=True)

        logger.debug(
            "SQLAlchemy engine created",
            extra={"context": {"dialect": _engine.dialect.name}},
        )
        _database_url = database_url
    return _engine


def get_sessionmaker():
    """Return a cached sessionmaker bound to the lazy engine."""
    global _SessionLocal
    engine = get_engine()
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )
    return _SessionLocal


def SessionLocal():
    """Calling SessionLocal() returns a new Session instance."""
    return get_sessionmaker()()


def get_db():
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create all tables in database using the lazy engine."""
    # Ensure models are imported so Base.metadata is populated
    from lending.db import base  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def drop_tables():
    from lending.db import base  # noqa: F401

    Base.metadata.drop_all(bind=get_engine())
