"""Key-press driven scientific calculator.

Feed keys one at a time with ``press``; ``display`` shows what a calculator
screen would. Invalid operations (division by zero, domain errors,
non-finite results) put the calculator into an ``Error`` state that the next
digit or ``C`` clears. Trigonometric functions work in radians.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, Iterable, List, Optional

from ..errors import ValidationFailed, returns_result

ERROR = "Error"
MAX_INPUT_DIGITS = 15

BINARY_ALIASES = {"+": "+", "-": "-", "×": "×", "*": "×", "÷": "÷", "/": "÷", "xʸ": "xʸ", "^": "xʸ"}
MEMORY_KEYS = ("MC", "MR", "M+", "Min")


def _sqrt(x: float) -> Optional[float]:
    return None if x < 0 else math.sqrt(x)


def _reciprocal(x: float) -> Optional[float]:
    return None if x == 0 else 1 / x


def _inverse_trig(fn: Callable[[float], float]) -> Callable[[float], Optional[float]]:
    return lambda x: None if x < -1 or x > 1 else fn(x)


def _positive_log(fn: Callable[[float], float]) -> Callable[[float], Optional[float]]:
    return lambda x: None if x <= 0 else fn(x)


UNARY: Dict[str, Callable[[float], Optional[float]]] = {
    "sqrt": _sqrt,
    "√": _sqrt,
    "1/x": _reciprocal,
    "x²": lambda x: x ** 2,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": _inverse_trig(math.asin),
    "acos": _inverse_trig(math.acos),
    "atan": math.atan,
    "log": _positive_log(math.log10),
    "ln": _positive_log(math.log),
    "10ˣ": lambda x: math.pow(10, x),
    "eˣ": math.exp,
}


def format_number(value: float) -> str:
    if math.isfinite(value) and value == int(value) and abs(value) < 1e15:
        return str(int(value))
    text = repr(float(value))
    if len(text) > 15 and value not in (math.pi, math.e):
        if abs(value) > 1e15 or (abs(value) < 1e-5 and value != 0):
            return f"{value:.9e}"
        return f"{value:.10g}"
    return text


class ScientificCalculator:
    def __init__(self) -> None:
        self.display = "0"
        self.memory = 0.0
        self._current: Optional[float] = None
        self._operator: Optional[str] = None
        self._waiting = False
        self.has_error = False

    def press(self, key: str) -> str:
        if len(key) == 1 and key in "0123456789":
            self._digit(key)
        elif key == ".":
            self._decimal()
        elif key in BINARY_ALIASES:
            self._binary(BINARY_ALIASES[key])
        elif key == "=":
            self._equals()
        elif key in UNARY:
            self._unary(key)
        elif key in MEMORY_KEYS:
            self._memory(key)
        elif key == "π":
            if self.has_error:
                self.clear()
            self._show(math.pi)
            self._waiting = True
        elif key in ("C", "AC"):
            self.clear()
        elif key == "←":
            self._backspace()
        elif key == "±":
            self._toggle_sign()
        elif key == "%":
            self._percent()
        else:
            raise ValueError(f"unknown key: {key!r}")
        return self.display

    def clear(self) -> None:
        self.display = "0"
        self._current = None
        self._operator = None
        self._waiting = False
        self.has_error = False

    def _show(self, value: float | str) -> None:
        self.display = value if isinstance(value, str) else format_number(value)

    def _error(self) -> None:
        self.display = ERROR
        self.has_error = True
        self._current = None
        self._operator = None

    def _value(self) -> Optional[float]:
        try:
            return float(self.display)
        except ValueError:
            self._error()
            return None

    def _digit(self, digit: str) -> None:
        if self.has_error:
            self.clear()
            self._show(digit)
        elif self._waiting:
            self._show(digit)
            self._waiting = False
        elif self.display == "0":
            self._show(digit)
        elif len(self.display.lstrip("-").replace(".", "")) < MAX_INPUT_DIGITS:
            self._show(self.display + digit)

    def _decimal(self) -> None:
        if self.has_error:
            return
        if self._waiting:
            self._show("0.")
            self._waiting = False
        elif "." not in self.display:
            self._show(self.display + ".")

    def _backspace(self) -> None:
        if self.has_error:
            self.clear()
        elif len(self.display) > 1:
            self._show(self.display[:-1])
        else:
            self._show("0")

    def _toggle_sign(self) -> None:
        if self.has_error or self.display == "0":
            return
        value = self._value()
        if value is not None:
            self._show(-value)

    def _percent(self) -> None:
        if self.has_error:
            return
        value = self._value()
        if value is not None:
            self._show(value / 100)
            self._waiting = True

    @staticmethod
    def _calculate(a: float, b: float, op: str) -> Optional[float]:
        try:
            if op == "+":
                return a + b
            if op == "-":
                return a - b
            if op == "×":
                return a * b
            if op == "÷":
                return None if b == 0 else a / b
            if op == "xʸ":
                return math.pow(a, b)
        except (OverflowError, ValueError):
            return None
        return None

    def _apply_pending(self, value: float) -> Optional[float]:
        assert self._current is not None and self._operator is not None
        result = self._calculate(self._current, value, self._operator)
        if result is None or not math.isfinite(result):
            self._error()
            return None
        self._show(result)
        self._current = result
        return result

    def _binary(self, op: str) -> None:
        if self.has_error:
            return
        value = self._value()
        if value is None:
            return
        if self._current is None or self._operator is None:
            self._current = value
        elif not self._waiting:
            if self._apply_pending(value) is None:
                return
        self._waiting = True
        self._operator = op

    def _equals(self) -> None:
        if self.has_error:
            return
        value = self._value()
        if value is None:
            return
        if self._current is not None and self._operator:
            if self._apply_pending(value) is None:
                return
            self._operator = None
            self._waiting = True

    def _unary(self, key: str) -> None:
        if self.has_error:
            return
        value = self._value()
        if value is None:
            return
        try:
            result = UNARY[key](value)
        except (OverflowError, ValueError):
            result = None
        if result is None or not math.isfinite(result):
            self._error()
        else:
            self._show(result)
            self._waiting = True

    def _memory(self, key: str) -> None:
        if key == "MC":
            self.memory = 0.0
            if self.has_error:
                self.clear()
            return
        if key == "MR":
            if self.has_error:
                self.clear()
            self._show(self.memory)
            self._waiting = True
            return
        if self.has_error:
            return
        try:
            shown = float(self.display)
        except ValueError:
            return
        self.memory = self.memory + shown if key == "M+" else shown


@returns_result
def evaluate_keys(keys: Iterable[str], memory: float = 0.0) -> Dict[str, object]:
    calc = ScientificCalculator()
    calc.memory = memory
    pressed: List[str] = []
    for key in keys:
        try:
            calc.press(key)
        except ValueError as e:
            raise ValidationFailed(str(e), errors={"keys": [f"unknown key at position {len(pressed)}: {key}"]}) from e
        pressed.append(key)
    return {"display": calc.display, "error": calc.has_error, "memory": calc.memory}
