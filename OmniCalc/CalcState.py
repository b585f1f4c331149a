# CalcState.py
"""""
Application state and the update function that drives it.

Every button press becomes an Action. `update(state, action, history)` returns
the next CalcState; the UI only renders whatever state it gets back. The
HistoryStore passed in is the one place that outlives a single update.

The AI call is split in two actions: AI_SUBMIT marks the request as running,
AI_FINISHED delivers the answer once the worker thread is done.
"""""

from dataclasses import dataclass, replace
from enum import Enum

from . import config_manager as config_manager
from . import MathEngine
from . import ScientificEngine
from . import error as E
from .AiService import AiResponse

ERROR_MARKER = "Error"

# Debug toggle for optional prints in this module
debug = config_manager.is_debug()


class CalcMode(Enum):
    STANDARD = "STANDARD"
    SCIENTIFIC = "SCIENTIFIC"
    AI_ASSISTANT = "AI_ASSISTANT"


class ActionType(Enum):
    DIGIT = "digit"
    OPERATOR = "operator"
    CALCULATE = "calculate"
    CLEAR = "clear"
    SIGN_FLIP = "sign_flip"
    PERCENT = "percent"
    SCIENTIFIC = "scientific"
    SET_MODE = "set_mode"
    RECALL = "recall"
    CLEAR_HISTORY = "clear_history"
    AI_INPUT = "ai_input"
    AI_SUBMIT = "ai_submit"
    AI_FINISHED = "ai_finished"


@dataclass(frozen=True)
class Action:
    type: ActionType
    value: object = None


@dataclass(frozen=True)
class CalcState:
    display: str = "0"
    expression: str = ""
    mode: CalcMode = CalcMode.STANDARD
    history: tuple = ()
    ai_input: str = ""
    ai_loading: bool = False
    ai_result: AiResponse = None
    ai_problem: str = ""  # problem text of the request in flight
    decimal_places: int = None  # None: take it from config.json
    error_detail: str = ""  # coded description of the last "Error", shown as display tooltip


def initial_state(history):
    """State at startup: empty display and whatever history could be loaded."""
    history.load()
    return CalcState(history=history.entries)


# -----------------------------
# Keypad handlers
# -----------------------------

def handle_digit(state, digit):
    display = state.display
    if digit == ".":
        if display == ERROR_MARKER:
            return replace(state, display="0.")
        if "." in display:
            return state
        return replace(state, display=display + ".")

    if display == "0" or display == ERROR_MARKER:
        return replace(state, display=digit)
    return replace(state, display=display + digit)


def pending_expression(state):
    """The committed part of the expression, or "" when it doesn't end in an operator.

    A recalled history entry leaves a finished expression like "7 + 3" behind;
    the displayed result then starts a new calculation instead of being glued
    onto its last operand.
    """
    stripped = state.expression.rstrip()
    if stripped and MathEngine.isOp(stripped[-1]) != -1:
        return state.expression
    return ""


def show_error(state, error):
    if debug == True:
        print(E.describe(error))
    return replace(state, display=ERROR_MARKER, expression="", error_detail=E.describe(error))


def handle_operator(state, operator):
    # Nothing to commit after an error
    if state.display == ERROR_MARKER:
        return state
    operator = MathEngine.Operator_Aliases.get(operator, operator)
    return replace(state, expression=pending_expression(state) + state.display + " " + operator + " ", display="0")


def handle_calculate(state, history):
    full_expression = pending_expression(state) + state.display
    try:
        result = MathEngine.calculate(full_expression, state.decimal_places)
    except E.EvaluationError as e:
        return show_error(state, e)

    history.append(full_expression, result)
    return replace(state, display=result, expression="")


def handle_unary(state, function):
    """± and %: rewrite the current operand in place."""
    try:
        return replace(state, display=function(state.display, state.decimal_places))
    except E.EvaluationError as e:
        return show_error(state, e)


def handle_scientific(state, func, history):
    try:
        result = ScientificEngine.apply(func, state.display, state.decimal_places)
    except E.EvaluationError as e:
        return show_error(state, e)

    history.append(ScientificEngine.label(func, state.display), result)
    return replace(state, display=result)


# -----------------------------
# AI handlers
# -----------------------------

def handle_ai_submit(state):
    problem = state.ai_input.strip()
    if not problem or state.ai_loading:
        return state
    return replace(state, ai_loading=True, ai_result=None, ai_problem=problem)


def handle_ai_finished(state, response, history):
    if not isinstance(response, AiResponse):
        response = AiResponse.sentinel()
    problem = state.ai_problem or state.ai_input.strip()
    history.append(f"AI: {problem}", response.result)
    return replace(state, ai_loading=False, ai_result=response, ai_problem="")


# -----------------------------
# Dispatcher
# -----------------------------

def update(state, action, history):
    """Apply one action and return the next state."""
    kind = action.type

    if kind == ActionType.DIGIT:
        new_state = handle_digit(state, action.value)
    elif kind == ActionType.OPERATOR:
        new_state = handle_operator(state, action.value)
    elif kind == ActionType.CALCULATE:
        new_state = handle_calculate(state, history)
    elif kind == ActionType.CLEAR:
        new_state = replace(state, display="0", expression="")
    elif kind == ActionType.SIGN_FLIP:
        new_state = handle_unary(state, MathEngine.negate)
    elif kind == ActionType.PERCENT:
        new_state = handle_unary(state, MathEngine.percent)
    elif kind == ActionType.SCIENTIFIC:
        new_state = handle_scientific(state, action.value, history)
    elif kind == ActionType.SET_MODE:
        new_state = replace(state, mode=CalcMode(action.value))
    elif kind == ActionType.RECALL:
        expression, result = history.recall(action.value)
        new_state = replace(state, display=result, expression=expression)
    elif kind == ActionType.CLEAR_HISTORY:
        history.clear()
        new_state = state
    elif kind == ActionType.AI_INPUT:
        new_state = replace(state, ai_input=action.value or "")
    elif kind == ActionType.AI_SUBMIT:
        new_state = handle_ai_submit(state)
    elif kind == ActionType.AI_FINISHED:
        new_state = handle_ai_finished(state, action.value, history)
    else:
        raise ValueError(f"Unknown action: {kind}")

    if new_state.display != ERROR_MARKER:
        new_state = replace(new_state, error_detail="")
    return replace(new_state, history=history.entries)
