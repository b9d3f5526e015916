"""
Database session and engine.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from cheapeats.config import settings
from cheapeats.db.base import Base


def make_engine(database_url: str):
    """SQLite (default, embedded) gets a thread-shareable connection; Postgres gets a pool."""
    if database_url.startswith("sqlite"):
        # Thumbnail workers open their own sessions from other threads
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_size=8,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_timeout=30,
    )


engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """Create missing tables. Alembic is the source of truth; this is for SQLite dev setups."""
    import cheapeats.models  # noqa: F401  (registers models on Base)

    Base.metadata.create_all(bind=bind or engine)
