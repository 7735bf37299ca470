"""Database models and connection management."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    create_engine,
    func,
)
from sqlalchemy.orm import DeclarativeBase, sessionmaker

DEFAULT_DATABASE_URL = "sqlite:///./garba.db"

# Lazy engine / session, created on first use so imports don't fail
# when the database is unreachable (e.g. during testing or CI).
_database_url = DEFAULT_DATABASE_URL
_engine = None
_SessionLocal = None


def configure(database_url: str) -> None:
    """Point the lazy engine at *database_url*, dropping any existing engine."""
    global _database_url, _engine, _SessionLocal
    if database_url == _database_url and _engine is not None:
        return
    if _engine is not None:
        _engine.dispose()
    _database_url = database_url
    _engine = None
    _SessionLocal = None


def get_engine():
    global _engine
    if _engine is None:
        connect_args = {"check_same_thread": False} if _database_url.startswith("sqlite") else {}
        _engine = create_engine(_database_url, pool_pre_ping=True, connect_args=connect_args)
    return _engine


def get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)
    return _SessionLocal


class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class Event(Base):
    """A ticketed event night."""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)
    venue = Column(String(200), nullable=False)
    ticket_price = Column(Float, nullable=False)
    group_price = Column(Float, nullable=False)  # per ticket, groups of 6+
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def init_db() -> None:
    """Create all tables if they don't exist."""
    Base.metadata.create_all(bind=get_engine())


def get_db():
    """FastAPI dependency that yields a DB session."""
    session_factory = get_session_factory()
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
