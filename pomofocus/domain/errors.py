"""
Error hierarchy for the focus tracker core.

Nothing here is fatal: every failure means "operation skipped, state unchanged".
"""

from typing import Optional


class PomoFocusError(Exception):
    """Base class for all errors raised by the core"""


class FormatError(PomoFocusError, ValueError):
    """An imported payload does not match the dataset schema"""


class RejectedAdjustment(PomoFocusError, ValueError):
    """
    A session-target change would drop below the completed sessions or below 1.
    """

    def __init__(self, subtask_id: str, requested_total: int, completed: int):
        self.subtask_id = subtask_id
        self.requested_total = requested_total
        self.completed = completed
        super().__init__(
            f"Cannot set {requested_total} sessions for subtask {subtask_id}: "
            f"{completed} already completed (minimum 1)"
        )


class PersistenceError(PomoFocusError):
    """Loading or saving the dataset failed. The in-memory state is untouched."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
