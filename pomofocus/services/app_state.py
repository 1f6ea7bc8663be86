"""
Application State - the single root of truth handed to every service.

Architecture Decision: Explicit state object
Services receive the AppState they operate on instead of reaching for module
globals, so tests can build as many independent states as they need.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Protocol

from pomofocus.domain.errors import PersistenceError
from pomofocus.domain.models import Dataset, Project, Subtask

logger = logging.getLogger(__name__)


class DatasetStore(Protocol):
    """Persistence contract. Implementations raise PersistenceError on failure."""

    def load(self) -> Awaitable[Optional[Dataset]]: ...

    def save(self, dataset: Dataset) -> Awaitable[None]: ...


class AppState:
    """
    Holds the dataset, the current project/subtask selection and the store.

    Every mutating service operation ends with checkpoint(), which saves the
    dataset. Save failures are reported, never raised.
    """

    def __init__(self, dataset: Optional[Dataset] = None,
                 store: Optional[DatasetStore] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.dataset = dataset if dataset is not None else Dataset()
        self.store = store
        self.active_project_id: Optional[str] = None
        self.active_subtask_id: Optional[str] = None
        self.last_persistence_error: Optional[PersistenceError] = None

        self._loop = loop
        self._owns_loop = False
        self._persistence_listeners: List[Callable[[PersistenceError], None]] = []

    # ----- Selection -----
    def find_project(self, project_id: str) -> Optional[Project]:
        return self.dataset.find_project(project_id)

    def find_subtask(self, project_id: str, subtask_id: str) -> Optional[Subtask]:
        project = self.find_project(project_id)
        return project.find_subtask(subtask_id) if project else None

    def active_project(self) -> Optional[Project]:
        if self.active_project_id is None:
            return None
        return self.find_project(self.active_project_id)

    def active_subtask(self) -> Optional[Subtask]:
        if self.active_project_id is None or self.active_subtask_id is None:
            return None
        return self.find_subtask(self.active_project_id, self.active_subtask_id)

    def select_project(self, project_id: Optional[str]) -> None:
        """Select a project (or None). Clears the subtask selection."""
        if project_id is not None and self.find_project(project_id) is None:
            raise KeyError(f"Project {project_id} not found")
        self.active_project_id = project_id
        self.active_subtask_id = None

    def select_subtask(self, project_id: str, subtask_id: str) -> None:
        """Select the subtask that receives completed work sessions"""
        if self.find_subtask(project_id, subtask_id) is None:
            raise KeyError(f"Subtask {subtask_id} not found in project {project_id}")
        self.active_project_id = project_id
        self.active_subtask_id = subtask_id

    def clear_selection(self) -> None:
        self.active_project_id = None
        self.active_subtask_id = None

    def replace_dataset(self, dataset: Dataset) -> Optional[PersistenceError]:
        """Swap in a new dataset in one step, then save it"""
        self.dataset = dataset
        self.clear_selection()
        return self.checkpoint()

    # ----- Persistence -----
    def on_persistence_error(self, callback: Callable[[PersistenceError], None]) -> None:
        if callback not in self._persistence_listeners:
            self._persistence_listeners.append(callback)

    def load(self) -> Optional[PersistenceError]:
        """
        Load the saved dataset from the store.

        Keeps the current (default) dataset when nothing was saved or the
        load fails. Returns the error, if any.
        """
        if self.store is None:
            return None
        try:
            loaded = self._run(self.store.load())
        except PersistenceError as e:
            logger.error("Loading saved data failed, starting with defaults: %s", e)
            self._report(e)
            return e

        if loaded is not None:
            self.dataset = loaded
            self.clear_selection()
            logger.info("Loaded %d projects", len(loaded.projects))
        return None

    def checkpoint(self) -> Optional[PersistenceError]:
        """
        Save the dataset. Called after every mutating operation.

        Returns:
            The PersistenceError if the save failed, else None
        """
        if self.store is None:
            return None
        try:
            self._run(self.store.save(self.dataset.model_copy(deep=True)))
        except PersistenceError as e:
            logger.warning("Saving data failed, keeping in-memory state: %s", e)
            self._report(e)
            return e
        self.last_persistence_error = None
        return None

    def close(self) -> None:
        """Close the event loop if this state created it"""
        if self._owns_loop and self._loop is not None and not self._loop.is_closed():
            self._loop.close()
        self._loop = None
        self._owns_loop = False

    def _report(self, error: PersistenceError) -> None:
        self.last_persistence_error = error
        for callback in self._persistence_listeners:
            try:
                callback(error)
            except Exception:
                logger.exception("Persistence error listener failed")

    def _run(self, awaitable):
        if self._loop is None:
            self._loop = asyncio.new_event_loop()
            self._owns_loop = True
        return self._loop.run_until_complete(awaitable)
