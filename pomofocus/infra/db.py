"""
SQLAlchemy database models and configuration.

Architecture Decision: Why SQLAlchemy?
- Provides ORM for cleaner code and prevents SQL injection
- Supports async operations for non-blocking database access
- Lets the dataset be stored relationally while the core only sees load()/save()
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Integer, DateTime, Boolean, ForeignKey

from pomofocus.infra.config import get_settings


# Base class for all models
class Base(DeclarativeBase):
    pass


class ProjectModel(Base):
    """SQLAlchemy model for Project entity"""
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    # UTC, stored without an offset
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class SubtaskModel(Base):
    """SQLAlchemy model for Subtask entity"""
    __tablename__ = "subtasks"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    project_id: Mapped[str] = mapped_column(String(64), ForeignKey("projects.id"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    total_sessions: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_sessions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class AppSessionModel(Base):
    """SQLAlchemy model for per-day app usage"""
    __tablename__ = "app_sessions"

    date: Mapped[str] = mapped_column(String(16), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_seconds: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class TimerSettingsModel(Base):
    """Single-row table holding timer settings and accumulated stats"""
    __tablename__ = "timer_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    work_duration: Mapped[int] = mapped_column(Integer, nullable=False)
    short_break_duration: Mapped[int] = mapped_column(Integer, nullable=False)
    long_break_duration: Mapped[int] = mapped_column(Integer, nullable=False)
    sessions_before_long_break: Mapped[int] = mapped_column(Integer, nullable=False)
    total_work_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_break_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class DatabaseEngine:
    """
    Manages database connection and session lifecycle.

    Singleton pattern ensures only one engine exists per application.
    """
    _instance: Optional['DatabaseEngine'] = None

    def __init__(self, db_url: str):
        self.engine = create_async_engine(db_url, echo=False)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    @classmethod
    def get_instance(cls, db_url: Optional[str] = None) -> 'DatabaseEngine':
        """Get or create the database engine instance (default URL from settings)"""
        if cls._instance is None:
            cls._instance = cls(db_url or get_settings().get_db_url())
        return cls._instance

    async def create_tables(self):
        """Create all tables in the database"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self):
        await self.engine.dispose()

    def get_session(self) -> AsyncSession:
        """Get a new database session"""
        return self.session_factory()


# Convenience functions
def get_engine(db_url: Optional[str] = None) -> DatabaseEngine:
    """Get the database engine instance"""
    return DatabaseEngine.get_instance(db_url)


async def init_db(db_url: Optional[str] = None):
    """Initialize the database (create tables)"""
    engine = get_engine(db_url)
    await engine.create_tables()
