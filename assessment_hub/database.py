from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """Support both PostgreSQL and SQLite URLs."""
    if database_url.startswith("postgresql"):
        return create_engine(database_url, **kwargs)
    # SQLite configuration for local development/testing
    return create_engine(
        database_url, connect_args={"check_same_thread": False}, **kwargs
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine):
    """
    Registers all domain models and initializes the database schema.
    This should be called once, when the SQL storage backend is built.
    """
    # Import all models to ensure they are registered with Base.metadata before create_all
    from assessment_hub.models import (  # noqa: F401
        user, department, assessment, response, analysis_result
    )
    Base.metadata.create_all(bind=engine)
