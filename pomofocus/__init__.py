"""PomoFocus - pomodoro timer with project and subtask progress tracking"""

__version__ = "1.0.0"
