from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from aidee.core.config import settings
from aidee.db.base import Base


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        # One connection is shared across FastAPI's threadpool workers.
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_recycle=1800,  # recycle connections every 30 min (avoid stale)
        connect_args={"connect_timeout": 5},
    )


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db(bind: Engine | None = None) -> None:
    """Create missing tables."""
    import aidee.models.record  # noqa: F401  registers the table on Base

    Base.metadata.create_all(bind=bind or engine)
