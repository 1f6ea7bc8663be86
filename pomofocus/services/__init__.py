"""Services layer - Business logic"""

from .app_state import AppState
from .backup_service import BackupService
from .progress_service import ProjectProgress, calculate_project_progress
from .project_service import ProjectService
from .reconcile_service import reconcile
from .session_tracker import AppSessionTracker
from .timer_service import TimerEngine, TimerSnapshot

__all__ = [
    "AppState", "BackupService", "ProjectProgress", "calculate_project_progress",
    "ProjectService", "reconcile", "AppSessionTracker", "TimerEngine", "TimerSnapshot",
]
