# UI.py
"""""PySide6 user interface for OmniCalc.

Structure
---------
- Calculator UI: main window with mode switcher, display, keypad, AI panel and history panel
- Settings UI: modal dialog for user preferences

Responsibilities (Calculator)
-----------------------------
- Build window, display, layout and buttons
- Turn every button press into a CalcState action and re-render the returned state
- Dispatch AI problems to AiService in a worker thread
- Clipboard integration (copy display, Shift-click a history entry to copy its result)
- Dark/light mode

Responsibilities (Settings)
---------------------------
- Load Current Settings and Settings Descriptions via Config_Manager
- Validate user input (decimal places must be 0..8)
- Save and apply theme changes immediately


Threading Note
--------------
The AI request is executed off the UI thread in Worker(QObject), so the window stays responsive.
The answer (always an AiResponse, never an exception) is emitted via a Qt signal and handled back in the UI.
"""""

from PySide6 import QtWidgets
from PySide6.QtCore import Qt, QObject, Signal
import sys
import threading
from dataclasses import replace
from datetime import datetime
from pynput.keyboard import Controller
import pyperclip
from . import config_manager as config_manager
from . import MathEngine as MathEngine
from . import CalcState as CalcState
from .CalcState import Action, ActionType, CalcMode
from .HistoryStore import HistoryStore
from .AiService import AiSolveClient


# Keypad button text → operator stored in the expression
OPERATOR_KEYS = {"÷": "/", "×": "*", "-": "-", "+": "+"}

# Scientific row: (button text, function name)
SCIENTIFIC_KEYS = [
    ("sin", "sin"), ("cos", "cos"), ("tan", "tan"), ("√", "sqrt"),
    ("log", "log10"), ("ln", "ln"), ("e^x", "exp"), ("x²", "square"),
]


def is_shift_pressed():
    """""

    Small and simple check, whether shift is pressed or not.
    Used for "Shift-click to copy" in the history panel.

    """""

    keyboard_controller = Controller()
    qt_shift = bool(QtWidgets.QApplication.keyboardModifiers() & Qt.KeyboardModifier.ShiftModifier)
    return keyboard_controller.shift_pressed or qt_shift


def pretty_expression(expression):
    # The expression keeps ASCII operators; show the keypad glyphs instead
    return expression.replace(" * ", " × ").replace(" / ", " ÷ ")


class Worker(QObject):
    """""

    This Class always runs in a seperate thread, responsible for sending the problem to AiService.py
    and emits a Signal when the answer arrived back to the Calculator UI for processing

    """""

    job_finished = Signal(object, str)

    def __init__(self, client, problem):
        super().__init__()
        self.client = client
        self.data = problem

    def run_solve(self):
        # solve() never raises: failures already come back as the sentinel response
        response = self.client.solve(self.data)
        self.job_finished.emit(response, self.data)


class SettingsDialog(QtWidgets.QDialog):
    """""

    This class is responsible for managing the settings window, saving the new settings and opening an error
    message if something went wrong.

    All of the Settings can be seperated into two categories:
    1. Checkboxes   (Managed with True or False)
    2. Input Fields (Managed as a String or Integer)

    """""

    settings_saved = Signal()  # Signal to tell the main window to update

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}  # Dictionary, in which all of the Widgets (Setting options) are saved and stored.

        # --- 1. Window Setup ---
        self.setWindowTitle("OmniCalc Settings")
        self.setMinimumSize(320, 220)

        main_layout = QtWidgets.QVBoxLayout(self)

        # --- 2. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        # --- 3. Build Widgets ---
        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            # --- 3a. Checkbox Builder (for Boolean settings) ---
            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            # --- 3b. Input Field Builder (for Integer and String settings) ---
            else:
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                if key_value == "decimal_places":
                    description += f" (0-{config_manager.MAX_DECIMAL_PLACES})"
                label = QtWidgets.QLabel(description + ":")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))  # Show current value as placeholder

                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

        # --- 4. OK / Cancel Buttons ---
        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.StandardButton.Ok | QtWidgets.QDialogButtonBox.StandardButton.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(lambda: self.save_settings(self.setting_value_list))
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self, setting_value_list):
        for key_value, widget in self.widgets.items():

            # --- Handle Checkboxes ---
            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()

            # --- Handle Input Fields ---
            elif isinstance(widget, QtWidgets.QLineEdit):
                new_value_str = widget.text().strip()

                # If user left it blank, keep the old value
                if new_value_str == "":
                    continue

                if isinstance(setting_value_list[key_value], int):
                    try:
                        new_value_int = int(new_value_str)
                        if key_value == "decimal_places" and not 0 <= new_value_int <= config_manager.MAX_DECIMAL_PLACES:
                            raise ValueError(f"'{new_value_int}' is out of range 0-{config_manager.MAX_DECIMAL_PLACES}.")
                    except ValueError as e:
                        # Show an error box and STOP the save process
                        QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                                       f"Error in input for '{key_value}':\n\n{e}\n\nPlease correct your input.")
                        return
                    setting_value_list[key_value] = new_value_int
                else:
                    setting_value_list[key_value] = new_value_str

        saved_settings = config_manager.save_setting(setting_value_list)

        if saved_settings != {}:
            self.settings_saved.emit()
            self.accept()
        else:
            QtWidgets.QMessageBox.critical(self, "Error", "Settings could not be saved (error in config_manager).")

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class CalculatorWindow(QtWidgets.QWidget):

    def __init__(self, history=None, ai_client=None):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")

        # --- 2. State ---
        self.history = history if history is not None else HistoryStore()
        self.ai_client = ai_client if ai_client is not None else AiSolveClient()
        self.state = CalcState.initial_state(self.history)
        self.worker = None  # Keeps the running AI worker alive until it reports back
        self.history_visible = False

        # --- 3. Window Setup ---
        self.setWindowTitle("OmniCalc AI")
        self.resize(720, 560)
        root_layout = QtWidgets.QHBoxLayout(self)

        calculator_area = QtWidgets.QWidget()
        main_v_layout = QtWidgets.QVBoxLayout(calculator_area)
        root_layout.addWidget(calculator_area, 2)

        # --- 4. Mode Bar ---
        mode_bar = QtWidgets.QHBoxLayout()
        main_v_layout.addLayout(mode_bar)
        self.mode_buttons = {}
        for mode, text in ((CalcMode.STANDARD, "Standard"), (CalcMode.SCIENTIFIC, "Scientific"),
                           (CalcMode.AI_ASSISTANT, "AI Assistant")):
            button = QtWidgets.QPushButton(text)
            button.setCheckable(True)
            button.clicked.connect(lambda checked=False, m=mode: self.dispatch(Action(ActionType.SET_MODE, m)))
            mode_bar.addWidget(button)
            self.mode_buttons[mode] = button
        mode_bar.addStretch(1)

        settings_button = QtWidgets.QPushButton("⚙")
        settings_button.setToolTip("Settings")
        settings_button.clicked.connect(self.open_settings)
        copy_button = QtWidgets.QPushButton("📋")
        copy_button.setToolTip("Copy display")
        copy_button.clicked.connect(lambda: pyperclip.copy(self.state.display))
        self.history_toggle = QtWidgets.QPushButton("View History")
        self.history_toggle.clicked.connect(self.toggle_history)
        for button in (settings_button, copy_button, self.history_toggle):
            mode_bar.addWidget(button)

        # --- 5. Display Setup ---
        self.expression_label = QtWidgets.QLabel("")
        self.expression_label.setAlignment(Qt.AlignmentFlag.AlignRight)
        main_v_layout.addWidget(self.expression_label)

        self.display = QtWidgets.QLineEdit("0")
        self.display.setAlignment(Qt.AlignmentFlag.AlignRight)
        self.display.setReadOnly(True)
        font = self.display.font()
        font.setPointSize(36)
        self.display.setFont(font)
        main_v_layout.addWidget(self.display)

        # --- 6. Pads ---
        self.pads = QtWidgets.QStackedWidget()
        main_v_layout.addWidget(self.pads, 1)
        self.pads.addWidget(self.build_keypad())
        self.pads.addWidget(self.build_ai_panel())

        # --- 7. History Panel ---
        self.history_panel = self.build_history_panel()
        root_layout.addWidget(self.history_panel, 1)

        self.update_darkmode()
        self.render()

    # --- Builders ---
    def build_keypad(self):
        keypad = QtWidgets.QWidget()
        keypad_layout = QtWidgets.QVBoxLayout(keypad)
        keypad_layout.setContentsMargins(0, 0, 0, 0)

        expanding_policy = QtWidgets.QSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding
        )

        # Scientific row (only visible in scientific mode)
        self.scientific_row = QtWidgets.QWidget()
        scientific_grid = QtWidgets.QGridLayout(self.scientific_row)
        scientific_grid.setContentsMargins(0, 0, 0, 0)
        for index, (text, func) in enumerate(SCIENTIFIC_KEYS):
            button = QtWidgets.QPushButton(text)
            button.setSizePolicy(expanding_policy)
            button.clicked.connect(lambda checked=False, f=func: self.dispatch(Action(ActionType.SCIENTIFIC, f)))
            scientific_grid.addWidget(button, index // 4, index % 4)
        keypad_layout.addWidget(self.scientific_row)

        # (text, row, column, column span)
        buttons = [
            ('C', 0, 0, 1), ('±', 0, 1, 1), ('%', 0, 2, 1), ('÷', 0, 3, 1),
            ('7', 1, 0, 1), ('8', 1, 1, 1), ('9', 1, 2, 1), ('×', 1, 3, 1),
            ('4', 2, 0, 1), ('5', 2, 1, 1), ('6', 2, 2, 1), ('-', 2, 3, 1),
            ('1', 3, 0, 1), ('2', 3, 1, 1), ('3', 3, 2, 1), ('+', 3, 3, 1),
            ('0', 4, 0, 2), ('.', 4, 2, 1), ('=', 4, 3, 1),
        ]

        button_container = QtWidgets.QWidget()
        button_grid = QtWidgets.QGridLayout(button_container)
        button_grid.setSpacing(4)
        button_grid.setContentsMargins(0, 0, 0, 0)
        self.button_objects = {}
        for text, row, col, span in buttons:
            button = QtWidgets.QPushButton(text)
            button.setSizePolicy(expanding_policy)
            if text == '=':
                button.setStyleSheet("background-color: #4f46e5; color: white; font-weight: bold;")
            button.clicked.connect(lambda checked=False, val=text: self.handle_button_press(val))
            button_grid.addWidget(button, row, col, 1, span)
            self.button_objects[text] = button
        keypad_layout.addWidget(button_container, 1)

        return keypad

    def build_ai_panel(self):
        panel = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(panel)
        layout.setContentsMargins(0, 0, 0, 0)

        self.ai_input = QtWidgets.QPlainTextEdit()
        self.ai_input.setPlaceholderText("Ask me anything: 'What is 25% of 1500?' or 'Solve for x: 2x + 5 = 15'")
        self.ai_input.textChanged.connect(
            lambda: self.dispatch(Action(ActionType.AI_INPUT, self.ai_input.toPlainText()), render=False))
        layout.addWidget(self.ai_input, 1)

        self.ai_button = QtWidgets.QPushButton("Solve with AI")
        self.ai_button.clicked.connect(self.submit_ai)
        layout.addWidget(self.ai_button, 0, Qt.AlignmentFlag.AlignRight)

        self.ai_result_label = QtWidgets.QLabel("")
        self.ai_result_label.setWordWrap(True)
        self.ai_explanation_label = QtWidgets.QLabel("")
        self.ai_explanation_label.setWordWrap(True)
        self.ai_steps = QtWidgets.QListWidget()
        for widget in (self.ai_result_label, self.ai_explanation_label, self.ai_steps):
            layout.addWidget(widget)

        return panel

    def build_history_panel(self):
        panel = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(panel)

        header = QtWidgets.QHBoxLayout()
        header.addWidget(QtWidgets.QLabel("Calculation History"))
        header.addStretch(1)
        clear_button = QtWidgets.QPushButton("Clear All")
        clear_button.clicked.connect(lambda: self.dispatch(Action(ActionType.CLEAR_HISTORY)))
        header.addWidget(clear_button)
        layout.addLayout(header)

        self.history_list = QtWidgets.QListWidget()
        self.history_list.itemClicked.connect(self.handle_history_click)
        layout.addWidget(self.history_list, 1)

        panel.setVisible(False)
        return panel

    # --- State handling ---
    def dispatch(self, action, render=True):
        self.state = CalcState.update(self.state, action, self.history)
        if render:
            self.render()

    def handle_button_press(self, value):
        if value == "C":
            self.dispatch(Action(ActionType.CLEAR))
        elif value == "±":
            self.dispatch(Action(ActionType.SIGN_FLIP))
        elif value == "%":
            self.dispatch(Action(ActionType.PERCENT))
        elif value == "=":
            self.dispatch(Action(ActionType.CALCULATE))
        elif value in OPERATOR_KEYS:
            self.dispatch(Action(ActionType.OPERATOR, OPERATOR_KEYS[value]))
        else:
            self.dispatch(Action(ActionType.DIGIT, value))

    def handle_history_click(self, item):
        entry = item.data(Qt.ItemDataRole.UserRole)
        if entry is None:
            return
        if is_shift_pressed():
            pyperclip.copy(entry.result)
            return
        self.dispatch(Action(ActionType.RECALL, entry))

    def submit_ai(self):
        was_loading = self.state.ai_loading
        self.dispatch(Action(ActionType.AI_SUBMIT))
        if was_loading or not self.state.ai_loading:
            return  # blank input or a request is already running

        # --- Start Worker Thread ---
        self.worker = Worker(self.ai_client, self.state.ai_problem)
        self.worker.job_finished.connect(self.ai_result)
        threading.Thread(target=self.worker.run_solve, daemon=True).start()

    def ai_result(self, response, problem):
        self.worker = None
        self.dispatch(Action(ActionType.AI_FINISHED, response))

    def toggle_history(self):
        self.history_visible = not self.history_visible
        self.render()

    # --- Rendering ---
    def render(self):
        state = self.state

        self.expression_label.setText(pretty_expression(state.expression))
        self.display.setText(state.display)
        self.display.setToolTip(state.error_detail)

        for mode, button in self.mode_buttons.items():
            button.setChecked(mode == state.mode)
        self.scientific_row.setVisible(state.mode == CalcMode.SCIENTIFIC)
        self.pads.setCurrentIndex(1 if state.mode == CalcMode.AI_ASSISTANT else 0)

        # AI panel
        self.ai_input.setReadOnly(state.ai_loading)
        self.ai_button.setEnabled(not state.ai_loading)
        self.ai_button.setText("Thinking..." if state.ai_loading else "Solve with AI")
        self.ai_steps.clear()
        if state.ai_result is not None:
            self.ai_result_label.setText(f"AI Result: {state.ai_result.result}")
            self.ai_explanation_label.setText(state.ai_result.explanation)
            for number, step in enumerate(state.ai_result.steps, start=1):
                self.ai_steps.addItem(f"{number}. {step}")
        else:
            self.ai_result_label.setText("")
            self.ai_explanation_label.setText("")

        # History panel
        self.history_panel.setVisible(self.history_visible)
        self.history_toggle.setText("Close History" if self.history_visible else "View History")
        self.history_list.clear()
        if not state.history:
            self.history_list.addItem("No history yet")
        for entry in state.history:
            time_text = datetime.fromtimestamp(entry.timestamp / 1000).strftime("%H:%M:%S")
            item = QtWidgets.QListWidgetItem(f"{time_text}   {pretty_expression(entry.expression)}\n= {entry.result}")
            item.setData(Qt.ItemDataRole.UserRole, entry)
            self.history_list.addItem(item)

    # --- Key Event Handlers ---
    def keyPressEvent(self, event):
        if self.state.mode == CalcMode.AI_ASSISTANT:
            super().keyPressEvent(event)
            return

        text = event.text()
        if event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter) or text == "=":
            self.dispatch(Action(ActionType.CALCULATE))
        elif event.key() == Qt.Key.Key_Escape:
            self.dispatch(Action(ActionType.CLEAR))
        elif text in ("+", "-", "*", "/"):
            self.dispatch(Action(ActionType.OPERATOR, text))
        elif (text != "" and text in MathEngine.Digits) or text == ".":
            self.dispatch(Action(ActionType.DIGIT, text))
        else:
            super().keyPressEvent(event)

    def update_darkmode(self):
        # --- Apply Dark/Light Mode ---
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("background-color: #121212; color: white;")
            self.display.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
        else:
            self.setStyleSheet("")
            self.display.setStyleSheet("font-weight: bold;")

    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()  # "exec" makes the dialog modal (blocks main window)

        self.apply_settings()

    def apply_settings(self):
        # --- Reload settings after dialog closes ---
        old_settings = self.setting_value_list
        self.setting_value_list = config_manager.load_setting_value("all")

        if self.setting_value_list["ai_model"] != old_settings["ai_model"]:
            self.ai_client.model = self.setting_value_list["ai_model"]

        # A different history file means a different history
        if self.setting_value_list["history_file"] != old_settings["history_file"]:
            self.history = HistoryStore()
            self.history.load()
            self.state = replace(self.state, history=self.history.entries)

        self.update_darkmode()
        self.render()


def main():
    # --- Main Application Entry Point ---
    app = QtWidgets.QApplication(sys.argv)
    window = CalculatorWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
