"""
Timer Service - the pomodoro state machine.

Architecture Decision: Observer Pattern (Qt Signals)
The engine emits signals when state changes, keeping it decoupled from UI.
Time is fed in through a Ticker, so tick() and complete() can be driven
directly without waiting on a clock.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from pomofocus.domain.models import NotificationKind, TimerMode
from pomofocus.i18n import tr
from pomofocus.infra.ticker import QtTicker, Ticker
from pomofocus.services.app_state import AppState
from pomofocus.utils import format_timer_display

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000

Notifier = Callable[[NotificationKind, str, str], None]


@dataclass(frozen=True)
class TimerSnapshot:
    mode: TimerMode
    remaining_seconds: int
    is_running: bool
    current_session_index: int
    sessions_before_long_break: int

    @property
    def display(self) -> str:
        return format_timer_display(self.remaining_seconds)


class TimerEngine(QObject):
    """
    Cycles Work -> Short/Long Break -> Work indefinitely.

    Completing a work phase credits the active subtask (if any) and the work
    stats, then moves to a break. Completing a break credits the break stats
    and returns to work. Whether the next phase starts on its own is decided
    by auto_start_breaks / auto_start_work.
    """

    # Signals
    ticked = Signal(int)  # remaining_seconds
    mode_changed = Signal(str)  # TimerMode value
    state_changed = Signal()
    work_completed = Signal()
    break_completed = Signal()

    def __init__(self, state: AppState,
                 ticker: Optional[Ticker] = None,
                 notifier: Optional[Notifier] = None,
                 auto_start_breaks: bool = True,
                 auto_start_work: bool = False,
                 auto_start_delay_ms: int = 0,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.state = state
        self.ticker = ticker if ticker is not None else QtTicker(self)
        self.notifier = notifier
        self.auto_start_breaks = auto_start_breaks
        self.auto_start_work = auto_start_work
        self.auto_start_delay_ms = auto_start_delay_ms

        self.mode = TimerMode.WORK
        self.is_running = False
        self.current_session_index = 1
        # Phase length is fixed when the mode is set; settings edits apply on the next phase
        self._phase_seconds = state.dataset.settings.duration_for(self.mode)
        self.remaining_seconds = self._phase_seconds

        self._auto_start_generation = 0
        self._auto_start_pending = False

    # ----- Public API -----
    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            mode=self.mode,
            remaining_seconds=self.remaining_seconds,
            is_running=self.is_running,
            current_session_index=self.current_session_index,
            sessions_before_long_break=self.state.dataset.settings.sessions_before_long_break,
        )

    def set_mode(self, mode: TimerMode) -> None:
        """Switch phase and load its full duration. Pauses a running timer."""
        mode = TimerMode(mode)
        self._cancel_auto_start()
        if self.is_running:
            self.pause()

        self.mode = mode
        self._phase_seconds = self.state.dataset.settings.duration_for(mode)
        self.remaining_seconds = self._phase_seconds

        self.mode_changed.emit(mode.value)
        self.ticked.emit(self.remaining_seconds)
        self.state_changed.emit()

    def start(self) -> None:
        """Start or resume the countdown. No-op while running."""
        if self.is_running:
            return
        self._cancel_auto_start()
        self.is_running = True
        self.ticker.start(TICK_INTERVAL_MS, self.tick)
        logger.info("Timer started: %s (%s left)", self.mode.value,
                    format_timer_display(self.remaining_seconds))
        self.state_changed.emit()

    def pause(self) -> None:
        """
        Stop the countdown, keeping the remaining time.

        Also cancels a scheduled automatic start.
        """
        self._cancel_auto_start()
        if not self.is_running:
            return
        self.is_running = False
        self.ticker.stop()
        logger.info("Timer paused: %s (%s left)", self.mode.value,
                    format_timer_display(self.remaining_seconds))
        self.state_changed.emit()

    def reset(self) -> None:
        """Stop and reload the full duration of the current mode"""
        self.pause()
        self.set_mode(self.mode)

    def tick(self) -> None:
        """Advance by one second. Called by the ticker while running."""
        if not self.is_running:
            return

        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        self.ticked.emit(self.remaining_seconds)

        if self.remaining_seconds <= 0:
            self.complete()

    def complete(self) -> None:
        """Finish the current phase and move on to the next one"""
        completed_mode = self.mode
        self.pause()

        if completed_mode is TimerMode.WORK:
            self._complete_work()
        elif completed_mode in (TimerMode.SHORT_BREAK, TimerMode.LONG_BREAK):
            self._complete_break(completed_mode)
        else:
            raise ValueError(f"Unknown timer mode: {completed_mode!r}")

    # ----- Phase transitions -----
    def _complete_work(self) -> None:
        self._notify(NotificationKind.WORK_COMPLETE,
                     tr("notify.work_complete.title"),
                     tr("notify.work_complete.body"))

        subtask = self.state.active_subtask()
        if subtask is not None and subtask.record_completed_session():
            logger.info("Subtask %r: %d/%d sessions", subtask.name,
                        subtask.completed_sessions, subtask.total_sessions)

        dataset = self.state.dataset
        dataset.stats.total_work_time += self._phase_seconds

        if self.current_session_index >= dataset.settings.sessions_before_long_break:
            self.current_session_index = 1
            next_mode = TimerMode.LONG_BREAK
        else:
            self.current_session_index += 1
            next_mode = TimerMode.SHORT_BREAK

        self.state.checkpoint()
        logger.info("Work phase complete, next: %s", next_mode.value)

        self.set_mode(next_mode)
        self.work_completed.emit()

        if self.auto_start_breaks:
            self._schedule_auto_start()

    def _complete_break(self, completed_mode: TimerMode) -> None:
        self._notify(NotificationKind.BREAK_COMPLETE,
                     tr("notify.break_complete.title"),
                     tr("notify.break_complete.body"))

        self.state.dataset.stats.total_break_time += self._phase_seconds
        self.state.checkpoint()
        logger.info("%s complete, back to work", completed_mode.value)

        self.set_mode(TimerMode.WORK)
        self.break_completed.emit()

        if self.auto_start_work:
            self._schedule_auto_start()

    # ----- Internals -----
    def _schedule_auto_start(self) -> None:
        if self.auto_start_delay_ms <= 0:
            self.start()
            return

        self._auto_start_generation += 1
        self._auto_start_pending = True
        generation = self._auto_start_generation

        def fire():
            if self._auto_start_pending and generation == self._auto_start_generation:
                self._auto_start_pending = False
                self.start()

        self.ticker.single_shot(self.auto_start_delay_ms, fire)

    def _cancel_auto_start(self) -> None:
        if self._auto_start_pending:
            self._auto_start_pending = False
            self._auto_start_generation += 1

    def _notify(self, kind: NotificationKind, title: str, body: str) -> None:
        if not self.notifier:
            return
        try:
            self.notifier(kind, title, body)
        except Exception:
            logger.exception("Notifier failed for %s", kind.value)
