from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from blog.config import DATABASE_URL, SQL_ECHO


def build_engine(url: str = DATABASE_URL):
    """Create an engine for the given URL; in-memory SQLite shares one connection across threads."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=SQL_ECHO, future=True, **kwargs)
    return create_engine(url, echo=SQL_ECHO, future=True, pool_pre_ping=True)


# creating the SQLAlchemy engine
engine = build_engine()

# Base class for ORM models
Base = declarative_base()
