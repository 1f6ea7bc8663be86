"""
Tests for project creation, session targets and timer settings.
"""

import pytest
from pydantic import ValidationError

from pomofocus.domain.errors import RejectedAdjustment
from pomofocus.i18n import set_language
from pomofocus.services.project_service import DEFAULT_SUBTASK_SESSIONS, ProjectService


@pytest.fixture
def service(app_state):
    return ProjectService(app_state)


class TestCreateProject:
    def test_creates_and_saves(self, service, app_state, store):
        project = service.create_project("  Website  ", [("Design", 2), ("Build", None)])

        assert project.name == "Website"
        assert [(s.name, s.total_sessions) for s in project.subtasks] == [
            ("Design", 2),
            ("Build", DEFAULT_SUBTASK_SESSIONS),
        ]
        assert all(s.completed_sessions == 0 for s in project.subtasks)
        assert app_state.dataset.projects[-1] is project
        assert store.save_count == 1

    def test_ids_are_unique(self, service):
        a = service.create_project("A", [("x", 1)])
        b = service.create_project("B", [("x", 1)])

        assert a.id != b.id
        assert a.subtasks[0].id != b.subtasks[0].id

    def test_blank_subtasks_are_skipped(self, service):
        project = service.create_project("A", [(" ", 3), ("Real", 1)])
        assert [s.name for s in project.subtasks] == ["Real"]

    @pytest.mark.parametrize("name,subtasks", [
        ("   ", [("x", 1)]),
        ("A", []),
        ("A", [("  ", 2)]),
    ])
    def test_rejected_input(self, service, app_state, store, name, subtasks):
        with pytest.raises(ValueError):
            service.create_project(name, subtasks)
        assert len(app_state.dataset.projects) == 1
        assert store.save_count == 0


class TestAdjustSessionTarget:
    def test_increase(self, service, store):
        subtask = service.adjust_session_target("proj-1", "sub-1", 2)

        assert subtask.total_sessions == 6
        assert store.save_count == 1

    def test_reopens_completed_subtask(self, service):
        subtask = service.adjust_session_target("proj-1", "sub-2", 1)

        assert subtask.total_sessions == 3
        assert subtask.is_completed is False

    def test_cannot_drop_below_completed(self, service, app_state, store):
        with pytest.raises(RejectedAdjustment) as exc_info:
            service.adjust_session_target("proj-1", "sub-1", -3)

        assert exc_info.value.requested_total == 1
        assert exc_info.value.completed == 2
        assert app_state.find_subtask("proj-1", "sub-1").total_sessions == 4
        assert store.save_count == 0

    def test_decrease_to_completed_marks_done(self, service):
        subtask = service.adjust_session_target("proj-1", "sub-1", -2)
        assert subtask.total_sessions == 2
        assert subtask.is_completed is True

    def test_unknown_ids(self, service):
        with pytest.raises(KeyError):
            service.adjust_session_target("missing", "sub-1", 1)
        with pytest.raises(KeyError):
            service.adjust_session_target("proj-1", "missing", 1)


class TestUpdateSettings:
    def test_field_names_and_aliases(self, service, app_state, store):
        settings = service.update_settings(work_duration=50, shortBreakDuration=10)

        assert settings.work_duration == 50
        assert settings.short_break_duration == 10
        assert settings.long_break_duration == 2
        assert app_state.dataset.settings is settings
        assert store.save_count == 1

    def test_invalid_value_keeps_settings(self, service, app_state, store):
        before = app_state.dataset.settings

        with pytest.raises(ValidationError):
            service.update_settings(sessions_before_long_break=0)

        assert app_state.dataset.settings is before
        assert store.save_count == 0


class TestProgressAndLabel:
    def test_progress(self, service):
        progress = service.get_progress("proj-1")
        assert progress.completed_sessions == 4
        assert progress.total_sessions == 6

    def test_label_follows_selection(self, service, app_state):
        set_language("en")

        assert service.active_task_label() == "No project selected"

        app_state.select_project("proj-1")
        assert service.active_task_label() == "Select a subtask to begin"

        app_state.select_subtask("proj-1", "sub-1")
        assert service.active_task_label() == "Outline (2/4 sessions)"
