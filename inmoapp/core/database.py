"""
Database configuration and connection management.

This module provides:
- SQLAlchemy engine and session management
- Connection pooling with sane defaults
- Test database support (in-memory SQLite)
- Table definitions for users, properties, images and videos
"""
from typing import Optional
from contextlib import contextmanager
from sqlalchemy import create_engine, MetaData, Table, Column, Integer, String, DateTime, Boolean, Numeric, Text, Index, ForeignKey
from sqlalchemy.engine import make_url
from sqlalchemy.pool import QueuePool, StaticPool
from sqlalchemy.orm import sessionmaker
from sqlalchemy.sql import func
import logging
import os

from inmoapp.core.config import settings

logger = logging.getLogger("inmoapp")

# SQLAlchemy metadata for table definitions
metadata = MetaData()

# Connection pooling configuration
POOL_SIZE = 10
MAX_OVERFLOW = 20
POOL_TIMEOUT = 30
POOL_RECYCLE = 3600  # Recycle connections after 1 hour

# Global engine and session factory
_engine = None
_SessionLocal = None

def get_database_url() -> Optional[str]:
    """
    Get the database URL from settings or environment.

    For testing, use TEST_DATABASE_URL if available.
    """
    test_url = os.getenv("TEST_DATABASE_URL")
    if test_url:
        return test_url

    return settings.DATABASE_URL

def _is_sqlite_memory(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")

def init_engine(database_url: Optional[str] = None):
    """
    Initialize the SQLAlchemy engine.

    Args:
        database_url: Optional override for DATABASE_URL
    """
    global _engine, _SessionLocal

    url = database_url or get_database_url()

    if not url:
        raise ValueError(
            "DATABASE_URL is not configured. "
            "Set DATABASE_URL in environment or .env file."
        )

    if _is_sqlite_memory(url):
        # One shared connection, otherwise every session sees an empty database
        _engine = create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=False,
        )
    else:
        _engine = create_engine(
            url,
            poolclass=QueuePool,
            pool_size=POOL_SIZE,
            max_overflow=MAX_OVERFLOW,
            pool_timeout=POOL_TIMEOUT,
            pool_recycle=POOL_RECYCLE,
            echo=False,  # Set to True for SQL query logging
        )

    # Create session factory
    _SessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=_engine
    )

    return _engine

def dispose_engine() -> None:
    """Drop the current engine so the next call re-initializes it."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None

def get_engine():
    """Get the current SQLAlchemy engine."""
    global _engine
    if _engine is None:
        init_engine()
    return _engine

def get_session_factory():
    """Get the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        init_engine()
    return _SessionLocal

@contextmanager
def get_db_session():
    """
    Context manager for database sessions.

    Usage:
        with get_db_session() as session:
            session.execute(...)
    """
    SessionLocal = get_session_factory()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

def create_all_tables():
    """
    Create all tables defined in metadata.

    This is idempotent - tables that already exist will not be recreated.
    """
    engine = get_engine()
    metadata.create_all(bind=engine)

def drop_all_tables():
    """
    Drop all tables defined in metadata.

    WARNING: This is destructive! Only use in tests or development.
    """
    engine = get_engine()
    metadata.drop_all(bind=engine)

def reset_database():
    """
    Reset the database by dropping and recreating all tables.

    WARNING: This is destructive! Only use in tests.
    """
    drop_all_tables()
    create_all_tables()

def check_connection() -> bool:
    """
    Check if database connection is available.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        engine = get_engine()
        with engine.connect() as conn:
            conn.exec_driver_sql("SELECT 1")
        return True
    except Exception as e:
        logger.warning("Database connection check failed", extra={"error": str(e)})
        return False

# Users (accounts). subscription_tier is the single source of truth for limits.
users = Table(
    'users',
    metadata,
    Column('id', String(64), primary_key=True),
    Column('email', String(255), nullable=False, unique=True),
    Column('name', Text, nullable=True),
    Column('role', String(20), nullable=False, server_default='CLIENT'),
    Column('subscription_tier', String(20), nullable=False, server_default='FREE'),
    Column('created_at', DateTime(timezone=True), server_default=func.now(), nullable=False),
    Column('updated_at', DateTime(timezone=True), server_default=func.now(), nullable=False),
    Index('idx_users_subscription_tier', 'subscription_tier'),
)

# Property listings
properties = Table(
    'properties',
    metadata,
    Column('id', String(64), primary_key=True),
    Column('agent_id', String(64), ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
    Column('title', Text, nullable=False),
    Column('price', Numeric(14, 2), nullable=True),
    Column('city', String(120), nullable=True),
    Column('is_featured', Boolean, nullable=False, server_default='0'),
    Column('created_at', DateTime(timezone=True), server_default=func.now(), nullable=False),
    Index('idx_properties_agent_id', 'agent_id'),
    Index('idx_properties_agent_featured', 'agent_id', 'is_featured'),
)

property_images = Table(
    'property_images',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('property_id', String(64), ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
    Column('url', Text, nullable=False),
    Column('alt', Text, nullable=True),
    Column('order', Integer, nullable=False, server_default='0'),
    Index('idx_property_images_property_id', 'property_id'),
)

property_videos = Table(
    'property_videos',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('property_id', String(64), ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
    Column('url', Text, nullable=False),
    Column('platform', String(30), nullable=False),
    Column('title', Text, nullable=True),
    Column('order', Integer, nullable=False, server_default='0'),
    Index('idx_property_videos_property_id', 'property_id'),
)
