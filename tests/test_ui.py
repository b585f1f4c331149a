import json
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")
pytest.importorskip("pynput.keyboard")

from PySide6.QtCore import Qt, QEvent
from PySide6.QtGui import QKeyEvent

from OmniCalc import UI
from OmniCalc import config_manager
from OmniCalc.AiService import AiSolveClient
from OmniCalc.CalcState import Action, ActionType, CalcMode


@pytest.fixture(scope="module")
def app():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def window(app, history):
    window = UI.CalculatorWindow(history=history, ai_client=AiSolveClient(client=object(), model="test-model"))
    yield window
    window.close()


def key(text):
    return QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_unknown, Qt.KeyboardModifier.NoModifier, text)


def test_ai_input_is_locked_while_loading(window):
    window.dispatch(Action(ActionType.SET_MODE, CalcMode.AI_ASSISTANT))
    window.dispatch(Action(ActionType.AI_INPUT, "What is 25% of 1500?"))
    window.dispatch(Action(ActionType.AI_SUBMIT))

    assert window.ai_input.isReadOnly()
    assert not window.ai_button.isEnabled()


def test_error_tooltip(window):
    for value in ("5", "÷", "0", "="):
        window.handle_button_press(value)

    assert window.display.text() == "Error"
    assert window.display.toolTip() == "Calculator Error 3003: Division by Zero"


def test_keyboard_ignores_non_ascii_digits(window):
    window.keyPressEvent(key("²"))
    window.keyPressEvent(key("٣"))
    assert window.state.display == "0"

    window.keyPressEvent(key("7"))
    assert window.state.display == "7"


def test_settings_apply_without_restart(window, tmp_path, monkeypatch):
    history_file = tmp_path / "other_history.json"
    history_file.write_text(json.dumps({"calc_history": [
        {"id": "a1", "expression": "2 + 2", "result": "4", "timestamp": 1700000000000},
    ]}), encoding="utf-8")

    config_file = tmp_path / "config.json"
    settings = dict(config_manager.DEFAULT_SETTINGS)
    settings.update({"ai_model": "other-model", "history_file": str(history_file)})
    config_file.write_text(json.dumps(settings), encoding="utf-8")
    monkeypatch.setattr(config_manager, "config_json", config_file)

    window.apply_settings()

    assert window.ai_client.model == "other-model"
    assert [entry.expression for entry in window.state.history] == ["2 + 2"]
    assert window.history.entries == window.state.history
