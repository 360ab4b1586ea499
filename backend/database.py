"""
Database configuration and session management.
Uses SQLite for development, PostgreSQL (Neon) for production.

The engine and its connection pool are created once at import time and
shared by every request.
"""
from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker

from config import get_settings


def normalize_database_url(url: str) -> str:
    """Handle PostgreSQL URL format from some providers (postgres:// vs postgresql://)."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def build_engine(url: str, ssl_mode: str = "require"):
    """Create the pooled engine for the given database URL."""
    url = normalize_database_url(url)

    # SQLite needs special connect_args for async compatibility
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    connect_args = {}
    if "sslmode=" not in url and ssl_mode:
        connect_args["sslmode"] = ssl_mode

    return create_engine(
        url,
        connect_args=connect_args,
        pool_pre_ping=True,  # detect dead connections before using them
        pool_recycle=300,
    )


_settings = get_settings()
DATABASE_URL = normalize_database_url(_settings.database_url)

engine = build_engine(DATABASE_URL, _settings.database_ssl_mode)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency for FastAPI to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database tables."""
    from db_models import Base
    Base.metadata.create_all(bind=engine)
