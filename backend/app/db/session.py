"""
Database engine management.
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from app.core.config import Settings


def create_db_engine(settings: Settings) -> Engine:
    """Create the pooled engine used for every stored procedure call."""
    return create_engine(
        settings.DATABASE_URL,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        pool_pre_ping=True,
        pool_recycle=settings.DB_POOL_RECYCLE,
        connect_args={"init_command": f"SET time_zone = '{settings.DB_TIMEZONE}'"},
    )
