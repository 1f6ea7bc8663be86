"""
Repository Pattern Implementation.

Architecture Decision: Why Repository Pattern?
The core only needs "load the dataset" and "save the dataset". Keeping the
table layout here means the services never see SQL, and tests can swap in an
in-memory store.
"""

import logging
from collections import defaultdict
from datetime import timezone
from typing import Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pomofocus.domain.errors import PersistenceError
from pomofocus.domain.models import AppSession, Dataset, Project, Stats, Subtask, TimerSettings
from pomofocus.infra.db import (
    AppSessionModel, ProjectModel, SubtaskModel, TimerSettingsModel, get_engine,
)

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1


class DatasetRepository:
    """
    Stores the whole application dataset.

    Converts between domain models (Pydantic) and ORM models (SQLAlchemy).
    save() rewrites every table inside one transaction so a failed save
    leaves the previous dataset in place.
    """

    def __init__(self, session: Optional[AsyncSession] = None):
        self.session = session

    async def _get_session(self) -> AsyncSession:
        """Get session - either injected or create new one"""
        if self.session:
            return self.session
        engine = get_engine()
        return engine.get_session()

    async def load(self) -> Optional[Dataset]:
        """
        Load the saved dataset.

        Returns:
            None if nothing has been saved yet

        Raises:
            PersistenceError: on database errors or corrupt rows
        """
        try:
            session = await self._get_session()
            async with session:
                settings_row = await session.get(TimerSettingsModel, SETTINGS_ROW_ID)
                if settings_row is None:
                    return None

                project_rows = (await session.execute(
                    select(ProjectModel).order_by(ProjectModel.position)
                )).scalars().all()
                subtask_rows = (await session.execute(
                    select(SubtaskModel).order_by(SubtaskModel.project_id, SubtaskModel.position)
                )).scalars().all()
                session_rows = (await session.execute(
                    select(AppSessionModel).order_by(AppSessionModel.position)
                )).scalars().all()

                return self._to_dataset(settings_row, project_rows, subtask_rows, session_rows)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load dataset: {e}", cause=e) from e
        except ValidationError as e:
            raise PersistenceError(f"Stored dataset is invalid: {e}", cause=e) from e

    async def save(self, dataset: Dataset) -> None:
        """
        Replace the stored dataset with the given one.

        Raises:
            PersistenceError: if the transaction fails (nothing is written)
        """
        try:
            session = await self._get_session()
            async with session:
                try:
                    # Children first due to foreign keys
                    await session.execute(delete(SubtaskModel))
                    await session.execute(delete(ProjectModel))
                    await session.execute(delete(AppSessionModel))
                    await session.execute(delete(TimerSettingsModel))

                    session.add(TimerSettingsModel(
                        id=SETTINGS_ROW_ID,
                        work_duration=dataset.settings.work_duration,
                        short_break_duration=dataset.settings.short_break_duration,
                        long_break_duration=dataset.settings.long_break_duration,
                        sessions_before_long_break=dataset.settings.sessions_before_long_break,
                        total_work_time=dataset.stats.total_work_time,
                        total_break_time=dataset.stats.total_break_time,
                    ))
                    for position, project in enumerate(dataset.projects):
                        session.add(ProjectModel(
                            id=project.id,
                            position=position,
                            name=project.name,
                            created_at=project.created_at.astimezone(timezone.utc).replace(tzinfo=None),
                        ))
                    # Flush parents so subtask foreign keys resolve
                    await session.flush()
                    for project in dataset.projects:
                        for position, subtask in enumerate(project.subtasks):
                            session.add(SubtaskModel(
                                id=subtask.id,
                                project_id=project.id,
                                position=position,
                                name=subtask.name,
                                total_sessions=subtask.total_sessions,
                                completed_sessions=subtask.completed_sessions,
                                is_completed=subtask.is_completed,
                            ))
                    for position, app_session in enumerate(dataset.app_sessions):
                        session.add(AppSessionModel(
                            date=app_session.date,
                            position=position,
                            duration_seconds=app_session.duration,
                        ))
                    await session.commit()
                except SQLAlchemyError:
                    await session.rollback()
                    raise
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to save dataset: {e}", cause=e) from e

        logger.debug("Dataset saved: %d projects, %d app sessions",
                     len(dataset.projects), len(dataset.app_sessions))

    @staticmethod
    def _to_dataset(settings_row: TimerSettingsModel,
                    project_rows: List[ProjectModel],
                    subtask_rows: List[SubtaskModel],
                    session_rows: List[AppSessionModel]) -> Dataset:
        subtasks_by_project: Dict[str, List[Subtask]] = defaultdict(list)
        for row in subtask_rows:
            subtasks_by_project[row.project_id].append(Subtask(
                id=row.id,
                name=row.name,
                total_sessions=row.total_sessions,
                completed_sessions=row.completed_sessions,
                is_completed=row.is_completed,
            ))

        projects = [
            Project(
                id=row.id,
                name=row.name,
                created_at=row.created_at.replace(tzinfo=timezone.utc),
                subtasks=subtasks_by_project.get(row.id, []),
            )
            for row in project_rows
        ]

        return Dataset(
            projects=projects,
            settings=TimerSettings(
                work_duration=settings_row.work_duration,
                short_break_duration=settings_row.short_break_duration,
                long_break_duration=settings_row.long_break_duration,
                sessions_before_long_break=settings_row.sessions_before_long_break,
            ),
            stats=Stats(
                total_work_time=settings_row.total_work_time,
                total_break_time=settings_row.total_break_time,
            ),
            app_sessions=[
                AppSession(date=row.date, duration=row.duration_seconds)
                for row in session_rows
            ],
        )
