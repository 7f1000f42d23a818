"""
Flotify - Database Configuration

SQLModel database setup with connection pooling.
Supports PostgreSQL (production) and SQLite (development and tests).

Usage:
    from flotify.database import get_engine, init_db
    
    engine = get_engine(settings.DATABASE_URL)
    init_db(engine)  # Creates tables
"""

from typing import Callable, Generator

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine


def get_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create SQLAlchemy engine with appropriate configuration.
    
    Args:
        database_url: SQLAlchemy connection URL
        echo: Log SQL statements
        
    Returns:
        SQLAlchemy Engine
    """
    if database_url.startswith("sqlite"):
        # A single shared connection keeps in-memory databases alive
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    
    # PostgreSQL configuration with connection pooling
    return create_engine(
        database_url,
        echo=echo,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )


def init_db(engine: Engine) -> None:
    """
    Initialize database tables.
    
    Creates all tables defined in SQLModel models.
    Safe to call multiple times (uses CREATE IF NOT EXISTS).
    """
    # Import models to register them with SQLModel
    from flotify import models  # noqa: F401
    
    SQLModel.metadata.create_all(engine)


def get_session_factory(engine: Engine) -> Callable[[], Session]:
    """
    Create a session factory bound to engine.
    
    Returns:
        Callable that creates new database sessions
    """
    def session_factory() -> Session:
        return Session(engine)
    
    return session_factory


def session_scope(session_factory: Callable[[], Session]) -> Generator[Session, None, None]:
    """
    Yield a session from the factory and close it afterwards.
    
    Used as the body of the per-request FastAPI dependency.
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
