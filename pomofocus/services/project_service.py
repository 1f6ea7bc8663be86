"""
Project Service - creates projects and edits subtask targets and timer settings.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from pydantic import ValidationError

from pomofocus.domain.errors import RejectedAdjustment
from pomofocus.domain.models import Project, Subtask, TimerSettings
from pomofocus.i18n import tr
from pomofocus.services.app_state import AppState
from pomofocus.services.progress_service import ProjectProgress, calculate_project_progress

logger = logging.getLogger(__name__)

DEFAULT_SUBTASK_SESSIONS = 4


class ProjectService:
    """Operations on the projects held by an AppState"""

    def __init__(self, state: AppState):
        self.state = state

    def create_project(self, name: str, subtasks: Iterable[Tuple[str, Optional[int]]]) -> Project:
        """
        Create a project with its subtasks.

        Args:
            name: Project name (surrounding whitespace is removed)
            subtasks: (name, sessions) pairs; blank names are skipped and a
                missing session count defaults to 4

        Raises:
            ValueError: if the name is blank or no subtask is left
        """
        name = name.strip()
        if not name:
            raise ValueError("Please enter a project name")

        items: List[Subtask] = []
        for subtask_name, sessions in subtasks:
            subtask_name = subtask_name.strip()
            if not subtask_name:
                continue
            items.append(Subtask(name=subtask_name, total_sessions=sessions or DEFAULT_SUBTASK_SESSIONS))

        if not items:
            raise ValueError("Please add at least one subtask")

        project = Project(name=name, subtasks=items)
        self.state.dataset.projects.append(project)
        self.state.checkpoint()
        logger.info("Project created: %s (%d subtasks)", project.name, len(items))
        return project

    def get_progress(self, project_id: str) -> ProjectProgress:
        project = self._get_project(project_id)
        return calculate_project_progress(project, self.state.dataset.settings)

    def adjust_session_target(self, project_id: str, subtask_id: str, delta: int) -> Subtask:
        """
        Change a subtask's target session count by delta.

        Raises:
            KeyError: if the project or subtask does not exist
            RejectedAdjustment: if the new total would be below the completed
                sessions or below 1 (nothing changes)
        """
        project = self._get_project(project_id)
        subtask = project.find_subtask(subtask_id)
        if subtask is None:
            raise KeyError(f"Subtask {subtask_id} not found in project {project_id}")

        if not subtask.adjust_session_target(delta):
            raise RejectedAdjustment(subtask.id, subtask.total_sessions + delta, subtask.completed_sessions)

        self.state.checkpoint()
        return subtask

    def update_settings(self, **changes) -> TimerSettings:
        """
        Replace timer settings with validated values.

        Accepts field names (work_duration=50) or aliases (workDuration=50).
        The running phase keeps its length; the next phase uses the new one.

        Raises:
            pydantic.ValidationError: for invalid values (settings unchanged)
        """
        aliases = {info.alias: name for name, info in TimerSettings.model_fields.items() if info.alias}
        values = self.state.dataset.settings.model_dump()
        for key, value in changes.items():
            values[aliases.get(key, key)] = value
        settings = TimerSettings.model_validate(values)
        self.state.dataset.settings = settings
        self.state.checkpoint()
        return settings

    def active_task_label(self) -> str:
        """Text describing the current selection"""
        project = self.state.active_project()
        if project is None:
            return tr("task.no_project")
        subtask = self.state.active_subtask()
        if subtask is None:
            return tr("task.select_subtask")
        return tr("task.label", name=subtask.name,
                  completed=subtask.completed_sessions, total=subtask.total_sessions)

    def _get_project(self, project_id: str) -> Project:
        project = self.state.find_project(project_id)
        if project is None:
            raise KeyError(f"Project {project_id} not found")
        return project
