"""Runtime value rules: truthiness, equality and display form.

Lox values map onto Python objects directly: Number is `float`, String is
`str`, Bool is `bool`, Nil is `None`; callables and instances are the
classes in `functions` and `classes`.
"""

from __future__ import annotations

import math
from typing import Any

_PRIMITIVES = (float, str, bool)


def is_number(value: Any) -> bool:
    # bool is an int subclass, never a float, so it is excluded here.
    return type(value) is float


def is_truthy(value: Any) -> bool:
    if value is None:
        return False
    if value is False:
        return False
    return True


def is_equal(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is right
    if type(left) is not type(right):
        return False
    if isinstance(left, _PRIMITIVES):
        return left == right
    return left is right


def format_number(value: float) -> str:
    if math.isfinite(value) and value.is_integer():
        # Every integral digit, never exponent notation: 1e20 -> 100000000000000000000.
        return f"{value:.0f}"
    return repr(value)


def stringify(value: Any) -> str:
    if value is None:
        return "nil"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if is_number(value):
        return format_number(value)
    return str(value)
