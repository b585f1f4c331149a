# config_manager.py
import sys
import json
from pathlib import Path

# Resolve project root depending on run mode (Script or .exe)
if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent.parent

config_json = PROJECT_ROOT / "config.json"
ui_strings = PROJECT_ROOT / "ui_strings.json"

# Used whenever config.json is missing, unreadable or lacks a key
DEFAULT_SETTINGS = {
    "darkmode": False,
    "debug": False,
    "decimal_places": 8,
    "ai_model": "gemini-3-flash-preview",
    "history_file": "history.json"
}

MAX_DECIMAL_PLACES = 8


def load_setting_value(key_value):
    try:
        with open(config_json, 'r', encoding= 'utf-8') as f:
            settings_dict = json.load(f)

    except (FileNotFoundError, json.JSONDecodeError):
        settings_dict = {}

    if not isinstance(settings_dict, dict):
        settings_dict = {}

    merged = dict(DEFAULT_SETTINGS)
    merged.update(settings_dict)

    if key_value == "all":
        return merged

    else:
        return merged.get(key_value, 0)


def load_setting_description(key_value):
    try:
        with open(ui_strings, 'r', encoding= 'utf-8') as f:
            settings_dict = json.load(f)

    except (FileNotFoundError, json.JSONDecodeError):
        return {}


    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)




def save_setting(settings_dict):
    try:
        with open (config_json, 'w', encoding= 'utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except OSError:
        return{}


def decimal_places():
    """Configured number of fractional digits, clamped to 0..MAX_DECIMAL_PLACES."""
    value = load_setting_value("decimal_places")
    try:
        value = int(value)
    except (TypeError, ValueError):
        return MAX_DECIMAL_PLACES
    return max(0, min(value, MAX_DECIMAL_PLACES))


def history_path():
    return PROJECT_ROOT / str(load_setting_value("history_file"))


def is_debug():
    return load_setting_value("debug") == True
