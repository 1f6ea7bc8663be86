"""
Progress Service - derives time and completion figures for a project.

Recomputed on every call; subtasks change far less often than they are shown.
"""

from pydantic import BaseModel

from pomofocus.domain.models import Project, TimerSettings
from pomofocus.utils import format_duration


class ProjectProgress(BaseModel):
    """Aggregate sessions and time for one project (times in seconds)"""

    total_sessions: int = 0
    completed_sessions: int = 0
    spent_time: int = 0
    remaining_time: int = 0
    progress: float = 0.0

    @property
    def spent_time_display(self) -> str:
        return format_duration(self.spent_time)

    @property
    def remaining_time_display(self) -> str:
        return format_duration(self.remaining_time)


def calculate_project_progress(project: Project, settings: TimerSettings) -> ProjectProgress:
    """
    Sum sessions over all subtasks and convert them to time.

    A project without subtasks reports zero everywhere.
    """
    total_sessions = sum(s.total_sessions for s in project.subtasks)
    completed_sessions = sum(s.completed_sessions for s in project.subtasks)
    session_seconds = settings.work_duration * 60

    return ProjectProgress(
        total_sessions=total_sessions,
        completed_sessions=completed_sessions,
        spent_time=completed_sessions * session_seconds,
        remaining_time=(total_sessions - completed_sessions) * session_seconds,
        progress=(completed_sessions / total_sessions) * 100 if total_sessions > 0 else 0.0,
    )
