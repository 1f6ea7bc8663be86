"""Infrastructure layer - Database, persistence, configuration and cadence"""

from .db import DatabaseEngine, get_engine, init_db
from .models import ProjectModel, SubtaskModel, AppSessionModel, TimerSettingsModel
from .repository import DatasetRepository
from .ticker import Ticker, QtTicker

__all__ = [
    "DatabaseEngine", "get_engine", "init_db",
    "ProjectModel", "SubtaskModel", "AppSessionModel", "TimerSettingsModel",
    "DatasetRepository", "Ticker", "QtTicker",
]
