#!/usr/bin/env python

"""
PomoFocus - Main Entry Point

A pomodoro timer that tracks completed work sessions against projects and
subtasks, logs daily app usage, and imports/exports its data as JSON.

Usage:
    python main.py
"""

import logging
import sys

from pomofocus.infra.config import get_settings
from pomofocus.ui import SystemTrayApp


def main():
    """Main entry point"""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = SystemTrayApp()
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
