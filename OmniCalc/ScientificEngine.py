# ScientificEngine
"""""
Unary scientific functions applied to the current operand (never to the
pending expression). Angles are in radians.
"""""
import math

from . import MathEngine
from . import error as E


def isSCT(func, number):  # Sin / Cos / Tan
    if func == "sin":
        return math.sin(number)
    elif func == "cos":
        return math.cos(number)
    elif func == "tan":
        return math.tan(number)
    return False


def isLog(func, number):
    if number <= 0:
        raise E.EvaluationError(f"{func}({number}): logarithm of a non-positive number.", code="2002")
    if func == "log10":
        return math.log10(number)
    return math.log(number)


def isE(number):
    try:
        return math.exp(number)
    except OverflowError:
        raise E.EvaluationError(f"exp({number}) is too large.", code="2003")


def isRoot(number):
    if number < 0:
        raise E.EvaluationError(f"sqrt({number}): square root of a negative number.", code="2001")
    return math.sqrt(number)


def isSquare(number):
    # Squared in Decimal so that e.g. 0.1² stays 0.01
    return number * number


# Names double as history labels: "sqrt(16)", "log10(100)", ...
Science_Operations = ["sin", "cos", "tan", "sqrt", "log10", "ln", "exp", "square"]


def label(func, operand_text):
    """History label for a scientific calculation, e.g. 'sqrt(4)'."""
    return f"{func}({operand_text})"


def apply(func, operand_text, decimal_places=None):
    """Apply `func` to the display text and return the formatted result.

    Raises EvaluationError for unknown functions, malformed operands and
    domain errors (sqrt of a negative, log of a non-positive, overflow).
    """
    if func not in Science_Operations:
        raise E.EvaluationError(f"Unknown scientific function: {func}", code="2000", equation=operand_text)

    operand = MathEngine.parse_operand(operand_text)

    try:
        if func == "square":
            ergebnis = isSquare(operand)
        else:
            number = float(operand)
            if not math.isfinite(number):
                raise E.EvaluationError(f"Invalid operand: {operand_text}", code="2004")

            if func in ("sin", "cos", "tan"):
                ergebnis = isSCT(func, number)
            elif func in ("log10", "ln"):
                ergebnis = isLog(func, number)
            elif func == "sqrt":
                ergebnis = isRoot(number)
            else:
                ergebnis = isE(number)

        return MathEngine.format_result(ergebnis, decimal_places)

    except E.CalcError as e:
        e.equation = label(func, operand_text)
        raise e
    except (ValueError, OverflowError, ArithmeticError) as e:
        raise E.EvaluationError(f"Error with scientific function: {e}", code="2003",
                                equation=label(func, operand_text))
