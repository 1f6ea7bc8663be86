"""
System Tray Application - desktop host for the focus timer.

Architecture Decision: Presentation Layer
This layer only wires collaborators together (Qt event loop, tray menu,
notifications, file dialogs). Business logic is delegated to Services.
"""

import asyncio
import logging
import sys
from typing import Optional

from PySide6.QtWidgets import QApplication, QFileDialog, QMenu, QMessageBox, QSystemTrayIcon
from PySide6.QtGui import QAction, QColor, QIcon, QPixmap

from pomofocus.domain.errors import FormatError, PersistenceError
from pomofocus.domain.models import ImportMode, NotificationKind, TimerMode
from pomofocus.i18n import on_language_changed, set_language, tr
from pomofocus.infra.config import get_settings
from pomofocus.infra.db import get_engine, init_db
from pomofocus.infra.repository import DatasetRepository
from pomofocus.services import AppSessionTracker, AppState, BackupService, ProjectService, TimerEngine
from pomofocus.utils import format_duration

logger = logging.getLogger(__name__)

# Boolean preferences offered as checkable menu entries
TOGGLE_PREFERENCES = ("auto_start_breaks", "auto_start_work", "show_notifications")


class SystemTrayApp:
    """
    Main application class managing the system tray icon and coordination.

    Follows Clean Architecture: UI delegates to Services, Services use Repositories.
    """

    def __init__(self):
        self.app = QApplication(sys.argv)
        self.app.setQuitOnLastWindowClosed(False)
        self.app.setWindowIcon(self._create_icon())

        # Settings
        self.settings = get_settings()
        prefs = self.settings.preferences
        set_language(prefs.language)

        # Event loop for async repository calls
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        self.loop.run_until_complete(init_db(self.settings.get_db_url()))

        # State and services
        self.state = AppState(store=DatasetRepository(), loop=self.loop)
        self.state.on_persistence_error(self._on_persistence_error)
        self.state.load()

        self.projects = ProjectService(self.state)
        self.timer = TimerEngine(
            self.state,
            notifier=self._notify,
            auto_start_breaks=prefs.auto_start_breaks,
            auto_start_work=prefs.auto_start_work,
            auto_start_delay_ms=prefs.auto_start_delay_ms,
        )
        self.tracker = AppSessionTracker(self.state, timezone=prefs.reporting_timezone)
        self.backup = BackupService(self.state, self.tracker)

        # Setup UI
        self.tray_icon = QSystemTrayIcon(self._create_icon(), self.app)
        self.tray_icon.setToolTip(tr("app.ready"))
        self.setup_menu()
        self.tray_icon.show()

        self._connect_signals()
        self.tracker.start_display()

    def _create_icon(self) -> QIcon:
        pixmap = QPixmap(16, 16)
        pixmap.fill(QColor("tomato"))
        return QIcon(pixmap)

    def _connect_signals(self):
        """Connect service signals to UI handlers"""
        self.timer.ticked.connect(lambda _: self.update_tooltip())
        self.timer.state_changed.connect(self._update_start_action)
        self.tracker.elapsed_changed.connect(self._on_app_session_elapsed)
        self.app.aboutToQuit.connect(self._on_about_to_quit)
        on_language_changed(lambda _: self.setup_menu())

    def setup_menu(self):
        """Setup the system tray context menu"""
        menu = QMenu()

        self.start_action = QAction(tr("tray.start"), self.app)
        self.start_action.triggered.connect(self._toggle_timer)
        menu.addAction(self.start_action)

        reset_action = QAction(tr("tray.reset"), self.app)
        reset_action.triggered.connect(lambda: self.timer.reset())
        menu.addAction(reset_action)

        mode_menu = menu.addMenu(tr("tray.mode"))
        for mode in TimerMode:
            action = QAction(tr(f"timer.mode.{mode.value}"), self.app)
            action.triggered.connect(lambda checked=False, m=mode: self.timer.set_mode(m))
            mode_menu.addAction(action)

        prefs_menu = menu.addMenu(tr("tray.preferences"))
        for name in TOGGLE_PREFERENCES:
            action = QAction(tr(f"tray.pref.{name}"), self.app)
            action.setCheckable(True)
            action.setChecked(getattr(self.settings.preferences, name))
            action.toggled.connect(lambda checked, n=name: self._set_preference(n, checked))
            prefs_menu.addAction(action)

        menu.addSeparator()

        self.session_action = QAction(tr("tray.app_session", elapsed=format_duration(0)), self.app)
        self.session_action.setEnabled(False)
        menu.addAction(self.session_action)

        menu.addSeparator()

        export_action = QAction(tr("tray.export"), self.app)
        export_action.triggered.connect(self._export_data)
        menu.addAction(export_action)

        import_action = QAction(tr("tray.import"), self.app)
        import_action.triggered.connect(self._import_data)
        menu.addAction(import_action)

        menu.addSeparator()

        quit_action = QAction(tr("tray.quit"), self.app)
        quit_action.triggered.connect(self.app.quit)
        menu.addAction(quit_action)

        self.tray_icon.setContextMenu(menu)
        self.menu = menu

    # ----- Handlers -----
    def _toggle_timer(self):
        if self.timer.is_running:
            self.timer.pause()
        else:
            self.timer.start()

    def _update_start_action(self):
        self.start_action.setText(tr("tray.pause") if self.timer.is_running else tr("tray.start"))
        self.update_tooltip()

    def update_tooltip(self):
        """Update the tray icon tooltip with the countdown and active task"""
        snap = self.timer.snapshot()
        session = tr("timer.session", current=snap.current_session_index,
                     total=snap.sessions_before_long_break)
        self.tray_icon.setToolTip(
            f"{snap.display} - {tr(f'timer.mode.{snap.mode.value}')}\n"
            f"{session}\n{self.projects.active_task_label()}"
        )

    def _on_app_session_elapsed(self, seconds: int):
        self.session_action.setText(tr("tray.app_session", elapsed=format_duration(seconds)))

    def _notify(self, kind: NotificationKind, title: str, body: str):
        if not self.settings.preferences.show_notifications:
            return
        self.tray_icon.showMessage(title, body, QSystemTrayIcon.Information, 10000)
        QApplication.beep()

    def _set_preference(self, name: str, value: bool):
        """Apply a toggled preference and remember it for the next start"""
        try:
            self.settings.update_preferences(**{name: value})
        except OSError as e:
            logger.warning("Could not save preferences: %s", e)
        prefs = self.settings.preferences
        self.timer.auto_start_breaks = prefs.auto_start_breaks
        self.timer.auto_start_work = prefs.auto_start_work

    def _on_persistence_error(self, error: PersistenceError):
        self.tray_icon.showMessage(
            tr("app.name"),
            tr("error.save_failed", error=error),
            QSystemTrayIcon.Warning,
            5000
        )

    def _export_data(self):
        try:
            path = self.backup.export_to_file(self.settings.preferences.export_directory)
        except OSError as e:
            QMessageBox.warning(None, tr("app.name"), tr("export.error", error=e))
            return
        self.tray_icon.showMessage(tr("app.name"), tr("export.success", path=path),
                                   QSystemTrayIcon.Information, 3000)

    def _import_data(self):
        filename, _ = QFileDialog.getOpenFileName(None, tr("import.title"), "", "JSON (*.json)")
        if not filename:
            return

        answer = QMessageBox.question(None, tr("import.title"), tr("import.replace_question"))
        mode = ImportMode.REPLACE if answer == QMessageBox.Yes else ImportMode.MERGE

        try:
            self.backup.import_from_file(filename, mode)
        except (FormatError, OSError) as e:
            QMessageBox.warning(None, tr("import.title"), tr("import.error", error=e))
            return

        QMessageBox.information(None, tr("import.title"), tr("import.success"))
        self.update_tooltip()

    def _on_about_to_quit(self):
        """Stop the timer and log the app session exactly once"""
        self.timer.pause()
        self.tracker.stop_display()
        self.tracker.commit()
        self.loop.run_until_complete(get_engine().dispose())
        self.loop.close()

    def run(self) -> int:
        """Run the application"""
        return self.app.exec()
