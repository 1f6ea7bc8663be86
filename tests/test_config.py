"""
Tests for settings loading (defaults, YAML file, environment).
"""

import pytest
import yaml
from pydantic import ValidationError

from pomofocus.infra.config import Settings


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("POMOFOCUS_LOG_LEVEL", "POMOFOCUS_DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def make_settings(workdir, **kwargs):
    return Settings(config_dir=workdir / "config-home", data_dir=workdir / "data", **kwargs)


def write_workspace_preferences(workdir, text):
    (workdir / "config").mkdir(exist_ok=True)
    (workdir / "config" / "settings.yaml").write_text(text, encoding="utf-8")


def test_defaults(workdir):
    settings = make_settings(workdir)

    assert settings.log_level == "INFO"
    assert settings.preferences.auto_start_breaks is True
    assert settings.preferences.auto_start_work is False
    assert settings.preferences.reporting_timezone == "Europe/Istanbul"
    assert (workdir / "data").is_dir()
    assert settings.preferences_file == workdir / "config-home" / "settings.yaml"


def test_default_db_url(workdir):
    settings = make_settings(workdir)
    assert settings.get_db_url() == f"sqlite+aiosqlite:///{workdir / 'data' / 'pomofocus.db'}"


def test_explicit_db_url(workdir):
    settings = make_settings(workdir, database_url="sqlite+aiosqlite:///:memory:")
    assert settings.get_db_url() == "sqlite+aiosqlite:///:memory:"


def test_env_overrides(workdir, monkeypatch):
    monkeypatch.setenv("POMOFOCUS_LOG_LEVEL", "debug")
    assert make_settings(workdir).log_level == "DEBUG"


def test_unknown_log_level(workdir):
    with pytest.raises(ValidationError):
        make_settings(workdir, log_level="LOUD")


def test_preferences_from_workspace_yaml(workdir):
    write_workspace_preferences(
        workdir, yaml.dump({"auto_start_work": True, "auto_start_delay_ms": 0, "language": "de"})
    )

    prefs = make_settings(workdir).preferences

    assert prefs.auto_start_work is True
    assert prefs.auto_start_delay_ms == 0
    assert prefs.language == "de"
    assert prefs.auto_start_breaks is True


def test_unknown_timezone_falls_back_to_default(workdir):
    write_workspace_preferences(
        workdir, yaml.dump({"reporting_timezone": "Mars/Olympus_Mons", "auto_start_work": True})
    )

    prefs = make_settings(workdir).preferences

    assert prefs.reporting_timezone == "Europe/Istanbul"
    assert prefs.auto_start_work is True


@pytest.mark.parametrize("text", ["auto_start_work: [unclosed", "- just\n- a list\n"])
def test_unusable_file_keeps_defaults(workdir, text):
    write_workspace_preferences(workdir, text)
    assert make_settings(workdir).preferences.auto_start_work is False


def test_update_preferences_is_saved(workdir):
    settings = make_settings(workdir)

    prefs = settings.update_preferences(auto_start_work=True, reporting_timezone="UTC")

    assert prefs.auto_start_work is True
    reloaded = make_settings(workdir)
    assert reloaded.preferences.auto_start_work is True
    assert reloaded.preferences.reporting_timezone == "UTC"


def test_update_preferences_rejects_unknown_timezone(workdir):
    settings = make_settings(workdir)

    with pytest.raises(ValidationError):
        settings.update_preferences(reporting_timezone="Nowhere/Special")

    assert settings.preferences.reporting_timezone == "Europe/Istanbul"
    assert not settings.preferences_file.exists()


def test_save_goes_to_workspace_file_when_present(workdir):
    write_workspace_preferences(workdir, yaml.dump({"language": "de"}))
    settings = make_settings(workdir)

    settings.update_preferences(show_notifications=False)

    data = yaml.safe_load((workdir / "config" / "settings.yaml").read_text(encoding="utf-8"))
    assert data["show_notifications"] is False
    assert data["language"] == "de"
