"""Domain layer - Pure business entities and logic"""

from .models import (
    AppPreferences, AppSession, Dataset, ImportMode, NotificationKind,
    Project, Stats, Subtask, TimerMode, TimerSettings,
)
from .errors import FormatError, PersistenceError, PomoFocusError, RejectedAdjustment

__all__ = [
    "AppPreferences", "AppSession", "Dataset", "ImportMode", "NotificationKind",
    "Project", "Stats", "Subtask", "TimerMode", "TimerSettings",
    "FormatError", "PersistenceError", "PomoFocusError", "RejectedAdjustment",
]
