"""
SQLAlchemy ORM models.
Separated from db.py for cleaner imports.
"""

from .db import AppSessionModel, Base, ProjectModel, SubtaskModel, TimerSettingsModel

__all__ = ["AppSessionModel", "Base", "ProjectModel", "SubtaskModel", "TimerSettingsModel"]
