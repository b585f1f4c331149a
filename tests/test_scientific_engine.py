import pytest

from OmniCalc import ScientificEngine
from OmniCalc import error as E


@pytest.mark.parametrize("func, operand, expected", [
    ("sqrt", "4", "2"),
    ("sqrt", "2", "1.41421356"),
    ("square", "1.5", "2.25"),
    ("square", "-3", "9"),
    ("log10", "100", "2"),
    ("ln", "1", "0"),
    ("exp", "0", "1"),
    ("exp", "1", "2.71828183"),
    ("sin", "0", "0"),
    ("cos", "0", "1"),
    ("tan", "0", "0"),
    ("sin", "1.5707963267948966", "1"),
    ("sin", "3.14159265358979", "0"),
])
def test_apply(func, operand, expected):
    assert ScientificEngine.apply(func, operand, 8) == expected


@pytest.mark.parametrize("func, operand, code", [
    ("sqrt", "-4", "2001"),
    ("log10", "0", "2002"),
    ("log10", "-10", "2002"),
    ("ln", "0", "2002"),
    ("exp", "1000", "2003"),
    ("cosh", "1", "2000"),
    ("sin", "Error", "3011"),
])
def test_domain_errors(func, operand, code):
    with pytest.raises(E.EvaluationError) as excinfo:
        ScientificEngine.apply(func, operand, 8)
    assert excinfo.value.code == code


def test_errors_carry_the_label():
    with pytest.raises(E.EvaluationError) as excinfo:
        ScientificEngine.apply("sqrt", "-4", 8)
    assert excinfo.value.equation == "sqrt(-4)"


def test_label():
    assert ScientificEngine.label("sqrt", "4") == "sqrt(4)"
    assert ScientificEngine.label("log10", "0.5") == "log10(0.5)"


def test_all_eight_functions_are_known():
    assert ScientificEngine.Science_Operations == [
        "sin", "cos", "tan", "sqrt", "log10", "ln", "exp", "square"]
