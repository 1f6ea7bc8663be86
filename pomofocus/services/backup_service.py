"""
Backup Service - Handles data export and import functionality.

Architecture Decision: Why JSON for exports?
- Human-readable format for easy inspection and manual edits
- Cross-platform compatible
- The same shape is accepted back by import, with the summary block ignored
"""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pomofocus.domain.errors import FormatError
from pomofocus.domain.models import ImportMode
from pomofocus.services.app_state import AppState
from pomofocus.services.reconcile_service import reconcile
from pomofocus.services.session_tracker import AppSessionTracker
from pomofocus.utils import day_key, format_duration

logger = logging.getLogger(__name__)


class BackupService:
    """
    Builds export snapshots and applies imports to the application state.

    Export naming convention: pomodoro-data-DDMonYY.json
    """

    EXPORT_PREFIX = "pomodoro-data-"
    EXPORT_EXTENSION = ".json"

    def __init__(self, state: AppState, tracker: Optional[AppSessionTracker] = None):
        self.state = state
        self.tracker = tracker

    def _get_default_export_dir(self) -> Path:
        """Get the default export directory based on OS"""
        if os.name == 'nt':  # Windows
            base = Path(os.getenv('APPDATA')) / 'PomoFocus'
        else:  # Linux/Mac
            base = Path.home() / '.local' / 'share' / 'pomofocus'

        export_dir = base / 'exports'
        export_dir.mkdir(parents=True, exist_ok=True)
        return export_dir

    def _get_export_dir(self, custom_dir: Optional[str] = None) -> Path:
        """Get the export directory, using custom or default"""
        if custom_dir and custom_dir.strip():
            export_dir = Path(custom_dir)
            export_dir.mkdir(parents=True, exist_ok=True)
            return export_dir
        return self._get_default_export_dir()

    def _generate_export_filename(self) -> str:
        """Generate a dated export filename"""
        if self.tracker is not None:
            stamp = self.tracker.today_key()
        else:
            stamp = day_key(datetime.now().astimezone())
        return f"{self.EXPORT_PREFIX}{stamp}{self.EXPORT_EXTENSION}"

    def build_snapshot(self) -> Dict[str, Any]:
        """
        Read-only projection of the dataset for export.

        The running app session is folded into appSessions (the live dataset
        is not touched) and a summary block is added.
        """
        dataset = self.state.dataset.model_copy(deep=True)
        if self.tracker is not None:
            dataset.app_sessions = self.tracker.pending_sessions(dataset.app_sessions)

        completed = 0
        incomplete = 0
        for project in dataset.projects:
            for subtask in project.subtasks:
                if subtask.is_completed:
                    completed += 1
                else:
                    incomplete += 1

        snapshot = dataset.to_json_dict()
        snapshot["summary"] = {
            "totalProjects": len(dataset.projects),
            "completedSubtasks": completed,
            "incompleteSubtasks": incomplete,
            "totalWorkTime": format_duration(dataset.stats.total_work_time),
            "totalBreakTime": format_duration(dataset.stats.total_break_time),
        }
        return snapshot

    def export_to_file(self, export_dir: Optional[str] = None) -> Path:
        """
        Write the export snapshot to a JSON file.

        Args:
            export_dir: Optional custom export directory

        Returns:
            Path to the created file
        """
        export_file = self._get_export_dir(export_dir) / self._generate_export_filename()
        snapshot = self.build_snapshot()

        with open(export_file, 'w', encoding='utf-8') as f:
            json.dump(snapshot, f, indent=2, ensure_ascii=False)

        logger.info(f"Data exported: {export_file}")
        return export_file

    def import_payload(self, payload: Mapping, mode: ImportMode) -> Dict[str, int]:
        """
        Apply already-parsed import data.

        Raises:
            FormatError: if the payload is malformed (state unchanged)

        Returns:
            Dictionary with counts of projects and app sessions afterwards
        """
        result = reconcile(self.state.dataset, payload, mode)
        self.state.replace_dataset(result)
        return {
            "projects": len(result.projects),
            "appSessions": len(result.app_sessions),
        }

    def import_from_file(self, import_file: Path, mode: ImportMode) -> Dict[str, int]:
        """
        Import data from an exported JSON file.

        Args:
            import_file: Path to the file
            mode: REPLACE all data or MERGE new entries in

        Returns:
            Dictionary with counts of projects and app sessions afterwards
        """
        import_file = Path(import_file)
        if not import_file.exists():
            raise FileNotFoundError(f"Import file not found: {import_file}")

        try:
            with open(import_file, 'r', encoding='utf-8') as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise FormatError(f"Invalid JSON in {import_file.name}: {e}") from e

        counts = self.import_payload(payload, mode)
        logger.info(f"Data imported from {import_file}: {counts}")
        return counts
