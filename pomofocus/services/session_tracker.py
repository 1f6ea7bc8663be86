"""
Session Tracker - logs how long the application is in use, per calendar day.

Runs independently of the pomodoro timer. The elapsed time since the
reference instant is folded into the day's AppSession entry on commit().
"""

import datetime
import logging
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, Signal

from pomofocus.domain.models import AppSession
from pomofocus.infra.ticker import QtTicker, Ticker
from pomofocus.services.app_state import AppState
from pomofocus.utils import DEFAULT_REPORTING_TIMEZONE, day_key

logger = logging.getLogger(__name__)

DISPLAY_INTERVAL_MS = 1000

Clock = Callable[[], datetime.datetime]


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def fold_session(sessions: List[AppSession], date: str, seconds: int) -> None:
    """Add seconds to the entry for date, creating it if needed (in place)"""
    existing = next((s for s in sessions if s.date == date), None)
    if existing is not None:
        existing.duration += seconds
    else:
        sessions.append(AppSession(date=date, duration=seconds))


class AppSessionTracker(QObject):
    """
    Tracks the current app session.

    commit() is not idempotent: calling it twice without reset_reference()
    counts the same time twice. Hosts that keep running after a commit use
    checkpoint() instead.
    """

    # Signals
    elapsed_changed = Signal(int)  # seconds since the reference instant

    def __init__(self, state: AppState,
                 clock: Optional[Clock] = None,
                 ticker: Optional[Ticker] = None,
                 timezone: str = DEFAULT_REPORTING_TIMEZONE,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.state = state
        self.clock = clock or _utc_now
        self.timezone = timezone
        self._ticker = ticker
        self.started_at = self.clock()

    def elapsed_since_start(self) -> int:
        """Whole seconds since the reference instant"""
        elapsed = (self.clock() - self.started_at).total_seconds()
        return max(0, int(elapsed))

    def today_key(self) -> str:
        return day_key(self.clock(), self.timezone)

    def commit(self) -> int:
        """
        Fold the elapsed time into today's entry and save.

        Returns:
            The number of seconds committed
        """
        elapsed = self.elapsed_since_start()
        date = self.today_key()
        fold_session(self.state.dataset.app_sessions, date, elapsed)
        self.state.checkpoint()
        logger.info("App session committed: %ds on %s", elapsed, date)
        return elapsed

    def reset_reference(self) -> None:
        self.started_at = self.clock()

    def checkpoint(self) -> int:
        """Commit and start counting again from now"""
        elapsed = self.commit()
        self.reset_reference()
        return elapsed

    def pending_sessions(self, sessions: List[AppSession]) -> List[AppSession]:
        """
        Copy of sessions with the in-progress time added to today's entry.

        The input list and its entries are left untouched.
        """
        folded = [s.model_copy() for s in sessions]
        fold_session(folded, self.today_key(), self.elapsed_since_start())
        return folded

    # ----- Display cadence -----
    def start_display(self) -> None:
        if self._ticker is None:
            self._ticker = QtTicker(self)
        if not self._ticker.is_active():
            self._ticker.start(DISPLAY_INTERVAL_MS, self._emit_elapsed)

    def stop_display(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()

    def _emit_elapsed(self) -> None:
        self.elapsed_changed.emit(self.elapsed_since_start())
