"""Database engine and session factory."""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from trustypcs.config import app_settings


def make_engine(database_url: str):
    """Create an engine for the given URL."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are used from FastAPI's worker threads
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


engine = make_engine(app_settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None) -> None:
    """Create all tables."""
    # Register models on Base.metadata
    import trustypcs.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
