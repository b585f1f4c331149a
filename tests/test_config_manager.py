import json

import pytest

from OmniCalc import config_manager


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config_manager, "config_json", path)
    return path


def test_missing_file_falls_back_to_defaults(config_file):
    assert config_manager.load_setting_value("all") == config_manager.DEFAULT_SETTINGS
    assert config_manager.load_setting_value("decimal_places") == 8
    assert config_manager.load_setting_value("unknown") == 0


def test_file_values_override_defaults(config_file):
    config_file.write_text(json.dumps({"darkmode": True}), encoding="utf-8")

    settings = config_manager.load_setting_value("all")
    assert settings["darkmode"] is True
    assert settings["ai_model"] == "gemini-3-flash-preview"


def test_corrupt_file_falls_back_to_defaults(config_file):
    config_file.write_text("{{{", encoding="utf-8")
    assert config_manager.load_setting_value("debug") is False


@pytest.mark.parametrize("stored, expected", [(3, 3), (20, 8), (-1, 0), ("abc", 8)])
def test_decimal_places_are_clamped(config_file, stored, expected):
    config_file.write_text(json.dumps({"decimal_places": stored}), encoding="utf-8")
    assert config_manager.decimal_places() == expected


def test_save_setting_round_trip(config_file):
    settings = config_manager.load_setting_value("all")
    settings["darkmode"] = True
    assert config_manager.save_setting(settings) == settings
    assert config_manager.load_setting_value("darkmode") is True


def test_history_path_is_relative_to_project_root(config_file):
    assert config_manager.history_path() == config_manager.PROJECT_ROOT / "history.json"
