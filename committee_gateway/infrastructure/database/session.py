"""Database session management with connection pooling"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


def create_session_factory(database_url: str) -> sessionmaker:
    """Engine + session factory for the SQL mirror"""
    engine_kwargs = {"pool_pre_ping": True}  # Verify connections before using
    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        # Recycle after 1 hour; MySQL drops idle connections
        engine_kwargs.update(pool_size=10, max_overflow=10, pool_recycle=3600)

    engine = create_engine(database_url, **engine_kwargs)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
