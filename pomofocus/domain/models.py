"""
Domain Models using Pydantic for validation.

Architecture Decision: Why Pydantic?
The dataset travels through three boundaries (SQLite, JSON import, JSON export).
Pydantic validates every entry point once, and aliases keep the camelCase file
format separate from the snake_case attributes used in code.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from pomofocus.utils import format_duration, parse_duration


def generate_id() -> str:
    """Random 128-bit identifier"""
    return uuid.uuid4().hex


class TimerMode(str, Enum):
    """Timer phases. Values match the keys used in exported files."""
    WORK = "pomodoro"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

    @property
    def is_break(self) -> bool:
        return self is not TimerMode.WORK


class NotificationKind(str, Enum):
    WORK_COMPLETE = "workComplete"
    BREAK_COMPLETE = "breakComplete"


class ImportMode(str, Enum):
    REPLACE = "replace"
    MERGE = "merge"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TimerSettings(_CamelModel):
    """Phase durations in minutes and the long-break cadence"""

    work_duration: int = Field(default=25, gt=0)
    short_break_duration: int = Field(default=5, gt=0)
    long_break_duration: int = Field(default=15, gt=0)
    sessions_before_long_break: int = Field(default=4, ge=1)

    def duration_for(self, mode: TimerMode) -> int:
        """Configured length of a phase, in seconds"""
        if mode is TimerMode.WORK:
            return self.work_duration * 60
        elif mode is TimerMode.SHORT_BREAK:
            return self.short_break_duration * 60
        elif mode is TimerMode.LONG_BREAK:
            return self.long_break_duration * 60
        raise ValueError(f"Unknown timer mode: {mode!r}")


class Subtask(_CamelModel):
    """
    A unit of work that needs a target number of completed work phases.

    completed_sessions never exceeds total_sessions, and is_completed always
    mirrors completed_sessions >= total_sessions.
    """

    id: str = Field(default_factory=generate_id, min_length=1)
    name: str = Field(..., min_length=1)
    total_sessions: int = Field(default=4, ge=1)
    completed_sessions: int = Field(default=0, ge=0)
    is_completed: bool = False

    @model_validator(mode="after")
    def _check_progress(self) -> "Subtask":
        if self.completed_sessions > self.total_sessions:
            raise ValueError(
                f"completedSessions ({self.completed_sessions}) exceeds "
                f"totalSessions ({self.total_sessions})"
            )
        self.is_completed = self.completed_sessions >= self.total_sessions
        return self

    @property
    def remaining_sessions(self) -> int:
        return self.total_sessions - self.completed_sessions

    def record_completed_session(self) -> bool:
        """
        Count one finished work phase.

        Returns:
            False if the subtask was already complete (nothing changes)
        """
        if self.completed_sessions >= self.total_sessions:
            return False
        self.completed_sessions += 1
        if self.completed_sessions >= self.total_sessions:
            self.is_completed = True
        return True

    def adjust_session_target(self, delta: int) -> bool:
        """
        Change total_sessions by delta.

        The change is applied only if the new total stays >= completed_sessions
        and >= 1. Returns whether it was applied.
        """
        new_total = self.total_sessions + delta
        if new_total < self.completed_sessions or new_total < 1:
            return False
        self.total_sessions = new_total
        self.is_completed = self.completed_sessions >= self.total_sessions
        return True


class Project(_CamelModel):
    """A named group of subtasks. Owns its subtasks."""

    id: str = Field(default_factory=generate_id, min_length=1)
    name: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    subtasks: List[Subtask] = Field(default_factory=list)

    @field_validator("created_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are local time
        if value.tzinfo is None:
            value = value.astimezone()
        return value.astimezone(timezone.utc)

    def find_subtask(self, subtask_id: str) -> Optional[Subtask]:
        return next((s for s in self.subtasks if s.id == subtask_id), None)


class Stats(_CamelModel):
    """Accumulated phase time in seconds"""

    total_work_time: int = Field(default=0, ge=0)
    total_break_time: int = Field(default=0, ge=0)


class AppSession(_CamelModel):
    """
    Application usage for one calendar day.

    duration is kept in seconds and written as HH:MM:SS.
    """

    date: str = Field(..., min_length=1)
    duration: int = Field(default=0, ge=0)

    @field_validator("duration", mode="before")
    @classmethod
    def _parse_duration(cls, value):
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @field_serializer("duration")
    def _serialize_duration(self, duration: int) -> str:
        return format_duration(duration)


class Dataset(_CamelModel):
    """
    The unit of persistence, import and export.

    Projects are unique by id and app sessions by date.
    """

    projects: List[Project] = Field(default_factory=list)
    settings: TimerSettings = Field(default_factory=TimerSettings)
    stats: Stats = Field(default_factory=Stats)
    app_sessions: List[AppSession] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_identities(self) -> "Dataset":
        project_ids = [p.id for p in self.projects]
        if len(project_ids) != len(set(project_ids)):
            raise ValueError("Duplicate project id in dataset")
        dates = [s.date for s in self.app_sessions]
        if len(dates) != len(set(dates)):
            raise ValueError("Duplicate app session date in dataset")
        return self

    def find_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def find_app_session(self, date_key: str) -> Optional[AppSession]:
        return next((s for s in self.app_sessions if s.date == date_key), None)

    def to_json_dict(self) -> dict:
        """JSON-compatible dict in the exported (camelCase) shape"""
        return self.model_dump(mode="json", by_alias=True)


class AppPreferences(BaseModel):
    """
    User configuration and preferences for the host application.

    This allows users to customize behavior without touching code.
    """
    model_config = ConfigDict(from_attributes=True)

    # Phase transitions
    auto_start_breaks: bool = Field(default=True, description="Start a break as soon as work completes")
    auto_start_work: bool = Field(default=False, description="Start work as soon as a break completes")
    auto_start_delay_ms: int = Field(default=1000, ge=0, description="Delay before an automatic start")

    # Day keys for app sessions
    reporting_timezone: str = Field(default="Europe/Istanbul", description="IANA timezone for day keys")

    # UI settings
    language: str = Field(default="auto", description="UI language: 'en', 'de', or 'auto' (detect from system)")
    show_notifications: bool = True

    # Export settings
    export_directory: Optional[str] = Field(default=None, description="Default directory for exported files")

    @field_validator("reporting_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise ValueError(f"Unknown timezone: {value!r}") from e
        return value
