# MathEngine.py
"""""
Arithmetic engine for OmniCalc.

Pipeline
--------
1) Tokenizer: converts the pending expression text into a flat list of tokens.
2) Evaluator: folds "operand (operator operand)*" strictly from left to right.
   There is no operator precedence: every operator press in the UI commits the
   value to its left, so "2 + 3 * 4" is (2 + 3) * 4 = 20.
3) Formatter: renders results as plain decimal strings with a bounded number
   of fractional digits.

Only decimal literals and + - * / are understood. Nothing in here hands user
text to eval()/exec().
"""""

import math
from decimal import Decimal, getcontext, localcontext, Overflow, InvalidOperation, ROUND_HALF_UP

from . import config_manager as config_manager
from . import error as E

# Debug toggle for optional prints in this module
debug = config_manager.is_debug()

# Supported operators (kept as a simple list for quick membership checks)
Operations = ["+", "-", "*", "/"]

# Keypad glyphs accepted as aliases of the ASCII operators
Operator_Aliases = {"×": "*", "÷": "/", "−": "-"}

# Only ASCII digits belong to the grammar ("²" or "٣" do not)
Digits = "0123456789"

# Global Decimal precision used by this module
getcontext().prec = 50


# -----------------------------
# Utilities / small helpers
# -----------------------------

def isInt(zahl):
    """Return True if the given string consists of ASCII digits only; else False."""
    return isinstance(zahl, str) and zahl != "" and all(c in Digits for c in zahl)


def isOp(zahl):
    """Return index of a known operator or -1 if unknown."""
    try:
        return Operations.index(Operator_Aliases.get(zahl, zahl))
    except ValueError:
        return -1


def to_decimal(str_number):
    """Convert a numeric literal to Decimal, raising EvaluationError on garbage."""
    try:
        value = Decimal(str_number)
    except InvalidOperation:
        raise E.EvaluationError(f"Invalid number: {str_number!r}", code="3011", equation=str_number)
    if not value.is_finite():
        raise E.EvaluationError(f"Invalid number: {str_number!r}", code="3011", equation=str_number)
    return value


# -----------------------------
# Tokenizer
# -----------------------------

def tokenize(expression):
    """Convert raw expression text into a token list of Decimals and operator strings.

    A '-' counts as the sign of the following literal when it opens the
    expression or directly follows another operator ("-5 + -3").
    """
    tokens = []
    b = 0

    while b < len(expression):
        current_char = expression[b]

        # --- Whitespace (ignored) ---
        if current_char.isspace():
            b += 1
            continue

        previous_is_value = bool(tokens) and isinstance(tokens[-1], Decimal)
        is_sign = (isOp(current_char) != -1 and Operator_Aliases.get(current_char, current_char) == "-"
                   and not previous_is_value
                   and b + 1 < len(expression)
                   and (isInt(expression[b + 1]) or expression[b + 1] == "."))

        # --- Numbers: optional sign, digits and decimal separator ---
        if isInt(current_char) or current_char == "." or is_sign:
            str_number = "-" if is_sign else current_char
            hat_schon_komma = current_char == "."  # Only one dot allowed in a numeric literal

            while (b + 1 < len(expression)) and (isInt(expression[b + 1]) or expression[b + 1] == "."):
                if expression[b + 1] == ".":
                    if hat_schon_komma:
                        raise E.EvaluationError("More than one '.' in one number.", code="3008", equation=expression)
                    hat_schon_komma = True

                b += 1
                str_number += expression[b]

            tokens.append(to_decimal(str_number))

        # --- Operators ---
        elif isOp(current_char) != -1:
            tokens.append(Operator_Aliases.get(current_char, current_char))

        else:
            raise E.EvaluationError(f"Unexpected token: {current_char}", code="3011", equation=expression)

        b += 1

    if debug == True:
        print(tokens)

    return tokens


# -----------------------------
# Evaluator (left to right)
# -----------------------------

def apply_operator(left_value, operator, right_value):
    """Apply a single binary operator to two Decimals."""
    if operator == '+':
        return left_value + right_value
    elif operator == '-':
        return left_value - right_value
    elif operator == '*':
        return left_value * right_value
    elif operator == '/':
        if right_value == 0:
            raise E.EvaluationError("Division by zero", code="3003")
        return left_value / right_value
    else:
        raise E.EvaluationError(f"Unknown operator: {operator}", code="3004")


def evaluate(expression):
    """Evaluate an accumulated expression like "12 + 3 * " + "4" and return a Decimal."""
    tokens = tokenize(expression)

    if not tokens:
        raise E.EvaluationError("Empty expression.", code="3000", equation=expression)

    first = tokens.pop(0)
    if not isinstance(first, Decimal):
        raise E.EvaluationError(f"Missing number before {first}", code="3001", equation=expression)

    result = first
    try:
        while tokens:
            operator = tokens.pop(0)
            if isinstance(operator, Decimal):
                raise E.EvaluationError("Missing operator between numbers.", code="3002", equation=expression)
            if not tokens or not isinstance(tokens[0], Decimal):
                raise E.EvaluationError(f"Missing number after {operator}", code="3001", equation=expression)
            result = apply_operator(result, operator, tokens.pop(0))
            if debug == True:
                print("Currently at: " + str(result))
    except Overflow:
        raise E.EvaluationError("Number too large (Arithmetic overflow).", code="3026", equation=expression)
    except E.CalcError as e:
        e.equation = expression
        raise e

    if not result.is_finite():
        raise E.EvaluationError("Number too large (Arithmetic overflow).", code="3026", equation=expression)

    return result


# -----------------------------
# Result formatting
# -----------------------------

def format_result(ergebnis, decimal_places=None):
    """Render a Decimal (or float) as a plain decimal string.

    At most `decimal_places` fractional digits (default from config.json,
    never more than 8), trailing zeros trimmed, no exponent and no grouping
    separators. "-0" collapses to "0".
    """
    if decimal_places is None:
        decimal_places = config_manager.decimal_places()
    decimal_places = max(0, min(int(decimal_places), config_manager.MAX_DECIMAL_PLACES))

    if isinstance(ergebnis, float):
        if not math.isfinite(ergebnis):
            raise E.EvaluationError("Result is not a finite number.", code="2003")
        # repr() gives the shortest round-tripping text, so no float artifacts
        ergebnis = Decimal(repr(ergebnis))
    elif isinstance(ergebnis, int):
        ergebnis = Decimal(ergebnis)

    if not ergebnis.is_finite():
        raise E.EvaluationError("Result is not a finite number.", code="2003")

    if ergebnis != ergebnis.to_integral_value():
        # A temporary precision boost prevents InvalidOperation during quantize()
        with localcontext() as ctx:
            ctx.prec = max(128, ergebnis.adjusted() + decimal_places + 2)
            ergebnis = ergebnis.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP)

    if ergebnis == 0:
        return "0"

    return format(ergebnis.normalize(), "f")


# -----------------------------
# Public entry points
# -----------------------------

def calculate(problem, decimal_places=None):
    """Main API: tokenize → evaluate → format."""
    return format_result(evaluate(problem), decimal_places)


def parse_operand(text):
    """Parse the display text as exactly one numeric operand."""
    tokens = tokenize(text)
    if len(tokens) != 1 or not isinstance(tokens[0], Decimal):
        raise E.EvaluationError(f"Invalid operand: {text}", code="2004", equation=text)
    return tokens[0]


def negate(display, decimal_places=None):
    """The ± key: flip the sign of the current operand."""
    return format_result(-parse_operand(display), decimal_places)


def percent(display, decimal_places=None):
    """The % key: divide the current operand by 100."""
    return format_result(parse_operand(display) / 100, decimal_places)
