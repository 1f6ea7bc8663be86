"""
Cadence sources for the timer and the session display.

Architecture Decision: Strategy Pattern
The timer engine only knows the abstract Ticker. The desktop host plugs in a
QTimer-backed implementation; tests drive the engine by hand.
"""

from abc import ABCMeta, abstractmethod
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer


class QABCMeta(type(QObject), ABCMeta):
    """Combined metaclass for QObject and ABC"""
    pass


class Ticker(QObject, metaclass=QABCMeta):
    """
    A repeating callback plus one-shot delays.

    start() while already active replaces the interval and callback.
    """

    @abstractmethod
    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        """Call callback every interval_ms until stop()"""

    @abstractmethod
    def stop(self) -> None:
        """Stop the repeating callback. Safe to call when inactive."""

    @abstractmethod
    def is_active(self) -> bool:
        """Whether the repeating callback is scheduled"""

    @abstractmethod
    def single_shot(self, delay_ms: int, callback: Callable[[], None]) -> None:
        """Call callback once after delay_ms"""


class QtTicker(Ticker):
    """Ticker driven by the Qt event loop"""

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._timer = QTimer(self)
        self._callback: Optional[Callable[[], None]] = None
        self._timer.timeout.connect(self._on_timeout)

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start(interval_ms)

    def stop(self) -> None:
        self._timer.stop()

    def is_active(self) -> bool:
        return self._timer.isActive()

    def single_shot(self, delay_ms: int, callback: Callable[[], None]) -> None:
        QTimer.singleShot(delay_ms, callback)

    def _on_timeout(self):
        if self._callback:
            self._callback()
