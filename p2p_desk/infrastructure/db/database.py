"""
Database Configuration
SQLAlchemy setup (SQLite by default)
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from p2p_desk.config import settings


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


def build_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """Create the engine for the configured database URL"""
    url = database_url or settings.DATABASE_URL
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # in-memory database lives on a single shared connection
        kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=echo, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def init_db(engine: Engine) -> None:
    """Create tables (idempotent)"""
    # Import models so metadata is populated
    from p2p_desk.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
