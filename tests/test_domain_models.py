"""
Tests for the domain entities and their invariants.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from pomofocus.domain.models import (
    AppPreferences, AppSession, Dataset, Project, Subtask, TimerMode, TimerSettings,
)


class TestSubtask:
    """Session counting and target adjustment."""

    def test_is_completed_follows_sessions(self):
        """is_completed is derived from the counts, not trusted from input."""
        assert Subtask(name="a", total_sessions=2, completed_sessions=2, is_completed=False).is_completed
        assert not Subtask(name="a", total_sessions=3, completed_sessions=2, is_completed=True).is_completed

    def test_completed_above_total_is_rejected(self):
        with pytest.raises(ValidationError):
            Subtask(name="a", total_sessions=2, completed_sessions=3)

    @pytest.mark.parametrize("field,value", [
        ("name", ""),
        ("total_sessions", 0),
        ("completed_sessions", -1),
    ])
    def test_field_constraints(self, field, value):
        data = {"name": "a", "total_sessions": 2, "completed_sessions": 0, field: value}
        with pytest.raises(ValidationError):
            Subtask(**data)

    def test_ids_are_generated_and_unique(self):
        first, second = Subtask(name="a"), Subtask(name="b")
        assert first.id and second.id
        assert first.id != second.id

    def test_record_completed_session_stops_at_total(self):
        subtask = Subtask(name="a", total_sessions=2, completed_sessions=1)

        assert subtask.record_completed_session() is True
        assert subtask.completed_sessions == 2
        assert subtask.is_completed

        assert subtask.record_completed_session() is False
        assert subtask.completed_sessions == 2

    def test_adjust_below_completed_is_rejected(self):
        """total 4, completed 3, delta -2 -> new total 2 < 3, nothing changes."""
        subtask = Subtask(name="a", total_sessions=4, completed_sessions=3)

        assert subtask.adjust_session_target(-2) is False
        assert subtask.total_sessions == 4
        assert subtask.completed_sessions == 3
        assert not subtask.is_completed

    def test_adjust_up(self):
        """total 4, completed 2, delta +1 -> total 5, still incomplete."""
        subtask = Subtask(name="a", total_sessions=4, completed_sessions=2)

        assert subtask.adjust_session_target(1) is True
        assert subtask.total_sessions == 5
        assert not subtask.is_completed

    def test_adjust_down_to_completed_marks_complete(self):
        subtask = Subtask(name="a", total_sessions=4, completed_sessions=3)

        assert subtask.adjust_session_target(-1) is True
        assert subtask.total_sessions == 3
        assert subtask.is_completed

    def test_adjust_up_reopens_completed_subtask(self):
        subtask = Subtask(name="a", total_sessions=2, completed_sessions=2)

        subtask.adjust_session_target(1)
        assert not subtask.is_completed

    def test_adjust_never_below_one(self):
        subtask = Subtask(name="a", total_sessions=1, completed_sessions=0)

        assert subtask.adjust_session_target(-1) is False
        assert subtask.total_sessions == 1


class TestTimerSettings:
    def test_defaults(self):
        settings = TimerSettings()
        assert (settings.work_duration, settings.short_break_duration,
                settings.long_break_duration, settings.sessions_before_long_break) == (25, 5, 15, 4)

    def test_duration_for_each_mode(self):
        settings = TimerSettings(work_duration=50, short_break_duration=10, long_break_duration=30)
        assert settings.duration_for(TimerMode.WORK) == 3000
        assert settings.duration_for(TimerMode.SHORT_BREAK) == 600
        assert settings.duration_for(TimerMode.LONG_BREAK) == 1800

    def test_accepts_camel_case(self):
        assert TimerSettings.model_validate({"workDuration": 40}).work_duration == 40

    @pytest.mark.parametrize("data", [
        {"workDuration": 0},
        {"shortBreakDuration": -5},
        {"sessionsBeforeLongBreak": 0},
    ])
    def test_rejects_invalid_values(self, data):
        with pytest.raises(ValidationError):
            TimerSettings.model_validate(data)


class TestAppSession:
    def test_duration_parsed_from_hms(self):
        assert AppSession.model_validate({"date": "18Oct26", "duration": "01:02:03"}).duration == 3723

    def test_duration_accepts_seconds(self):
        assert AppSession(date="18Oct26", duration=90).duration == 90

    def test_duration_written_as_hms(self):
        dumped = AppSession(date="18Oct26", duration=3723).model_dump(by_alias=True)
        assert dumped == {"date": "18Oct26", "duration": "01:02:03"}

    def test_malformed_duration_is_rejected(self):
        with pytest.raises(ValidationError):
            AppSession.model_validate({"date": "18Oct26", "duration": "1:2"})


class TestDataset:
    def test_json_shape_uses_camel_case(self, sample_project):
        data = Dataset(projects=[sample_project]).to_json_dict()

        assert set(data) == {"projects", "settings", "stats", "appSessions"}
        assert set(data["settings"]) == {
            "workDuration", "shortBreakDuration", "longBreakDuration", "sessionsBeforeLongBreak",
        }
        assert set(data["stats"]) == {"totalWorkTime", "totalBreakTime"}
        project = data["projects"][0]
        assert "createdAt" in project
        assert project["subtasks"][0] == {
            "id": "sub-1", "name": "Outline", "totalSessions": 4,
            "completedSessions": 2, "isCompleted": False,
        }

    def test_duplicate_project_ids_rejected(self):
        with pytest.raises(ValidationError):
            Dataset(projects=[Project(id="a", name="x"), Project(id="a", name="y")])

    def test_duplicate_session_dates_rejected(self):
        with pytest.raises(ValidationError):
            Dataset(app_sessions=[AppSession(date="18Oct26"), AppSession(date="18Oct26")])

    def test_summary_block_is_ignored(self):
        dataset = Dataset.model_validate({"projects": [], "summary": {"totalProjects": 3}})
        assert "summary" not in dataset.to_json_dict()

    def test_project_without_subtasks_is_allowed(self):
        assert Project(name="Empty").subtasks == []


class TestProjectTimestamp:
    def test_offset_is_normalised_to_utc(self):
        project = Project.model_validate({"id": "p", "name": "P", "createdAt": "2026-10-18T10:00:00+03:00"})
        assert project.created_at == datetime(2026, 10, 18, 7, 0, tzinfo=timezone.utc)
        assert project.created_at.utcoffset() == timedelta(0)

    def test_zulu_suffix(self):
        project = Project.model_validate({"id": "p", "name": "P", "createdAt": "2026-10-18T07:00:00.000Z"})
        assert project.created_at == datetime(2026, 10, 18, 7, 0, tzinfo=timezone.utc)

    def test_naive_value_is_taken_as_local_time(self):
        naive = datetime(2026, 10, 18, 7, 0)
        project = Project(name="P", created_at=naive)
        assert project.created_at == naive.astimezone()
        assert project.created_at.tzinfo is timezone.utc

    def test_default_is_aware(self):
        assert Project(name="P").created_at.tzinfo is timezone.utc


class TestAppPreferences:
    def test_known_timezone(self):
        assert AppPreferences(reporting_timezone="UTC").reporting_timezone == "UTC"

    @pytest.mark.parametrize("value", ["Mars/Olympus_Mons", "", "../etc/passwd"])
    def test_unknown_timezone_is_rejected(self, value):
        with pytest.raises(ValidationError):
            AppPreferences(reporting_timezone=value)
