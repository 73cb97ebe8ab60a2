from __future__ import annotations

import math

import pytest

from papervault.errors import ValidationFailed
from papervault.tools.calculator import ERROR, ScientificCalculator, evaluate_keys


def press_all(*keys):
    calc = ScientificCalculator()
    for key in keys:
        calc.press(key)
    return calc


@pytest.mark.parametrize("keys, display", [
    (["1", "2", "+", "7", "="], "19"),
    (["9", "÷", "4", "="], "2.25"),
    (["2", "xʸ", "1", "0", "="], "1024"),
    (["2", "+", "3", "×", "4", "="], "20"),
    (["5", "-", "8", "="], "-3"),
    (["1", "6", "sqrt"], "4"),
    (["4", "1/x"], "0.25"),
    (["3", "x²"], "9"),
    (["1", "0", "0", "log"], "2"),
    (["5", "0", "%"], "0.5"),
    (["1", "2", "3", "←"], "12"),
    (["7", "±"], "-7"),
    (["1", ".", ".", "5"], "1.5"),
])
def test_key_sequences(keys, display):
    assert press_all(*keys).display == display


@pytest.mark.parametrize("keys", [
    ["1", "÷", "0", "="],
    ["1", "±", "sqrt"],
    ["0", "ln"],
    ["2", "asin"],
])
def test_invalid_operations_show_error(keys):
    calc = press_all(*keys)
    assert calc.display == ERROR
    assert calc.has_error


def test_digit_after_error_starts_fresh():
    calc = press_all("1", "÷", "0", "=", "7")
    assert calc.display == "7"
    assert not calc.has_error


def test_result_can_be_chained():
    assert press_all("2", "+", "3", "=", "×", "4", "=").display == "20"
    assert press_all("2", "+", "3", "=", "6", "+", "1", "=").display == "7"


def test_memory_keys():
    calc = press_all("5", "Min", "C", "3", "M+", "MR")
    assert calc.display == "8"
    calc.press("MC")
    assert calc.memory == 0


def test_pi_and_trig():
    calc = press_all("π", "cos")
    assert float(calc.display) == pytest.approx(-1.0)
    assert float(press_all("π").display) == pytest.approx(math.pi)


def test_evaluate_keys_reports_state():
    assert evaluate_keys(["6", "×", "7", "="]).unwrap() == {"display": "42", "error": False, "memory": 0.0}
    failed = evaluate_keys(["1", "?"])
    assert isinstance(failed.error, ValidationFailed)
