"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
"""

from functools import lru_cache
from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from app.core.config import get_settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class RoutineWindowORM(Base):
    """Per-weekday operating window."""

    __tablename__ = "routine_windows"
    __table_args__ = (UniqueConstraint("user_id", "weekday", name="uniq_windows_user_day"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    weekday = Column(SmallInteger, nullable=False)  # 0=Sun .. 6=Sat
    open_min = Column(Integer, nullable=False)
    close_min = Column(Integer, nullable=False)


class RoutineItemORM(Base):
    """Standing routine row (one sprint of a weekday template)."""

    __tablename__ = "routine_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    weekday = Column(SmallInteger, nullable=False, index=True)
    start_min = Column(Integer, nullable=False)
    end_min = Column(Integer, nullable=False)
    depth_level = Column(SmallInteger, nullable=False)
    goal_id = Column(String(36), nullable=True)
    label = Column(String(300), nullable=True)
    order_index = Column(Integer, nullable=False, default=0)


class DayORM(Base):
    """Concrete calendar day."""

    __tablename__ = "days"
    __table_args__ = (UniqueConstraint("user_id", "date_iso", name="uniq_days_user_date"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    date_iso = Column(String(10), nullable=False)  # YYYY-MM-DD
    opened_at = Column(DateTime(timezone=True), nullable=True)
    shutdown_at = Column(DateTime(timezone=True), nullable=True)
    journal = Column(Text, nullable=True)


class DayBlockORM(Base):
    """Block scheduled on a concrete day."""

    __tablename__ = "day_blocks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    day_id = Column(String(36), ForeignKey("days.id", ondelete="CASCADE"), nullable=False, index=True)
    start_min = Column(Integer, nullable=False)
    end_min = Column(Integer, nullable=False)
    depth_level = Column(SmallInteger, nullable=False)
    goal_id = Column(String(36), nullable=True)
    label = Column(String(300), nullable=True)
    status = Column(String(10), nullable=False, default="planned")
    actual_sec = Column(Integer, nullable=False, default=0)
    origin = Column(String(12), nullable=False, default="standing")


# ===========================================
# Database Session Management
# ===========================================


@lru_cache()
def get_engine():
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)


def get_session_factory():
    """Get async session factory."""
    engine = get_engine()
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db():
    """Initialize database tables."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
