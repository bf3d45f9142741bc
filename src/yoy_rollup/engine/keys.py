"""Classification and stringification of transaction field values.

Group keys and filter matches work on the string form of a field value.
Only strings and numbers have one; anything else (None, booleans,
containers) is classified as unsupported and never reaches aggregation.
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
import math
from numbers import Real
from typing import Any


class ValueKind(Enum):
    STRING = "string"
    NUMBER = "number"
    UNSUPPORTED = "unsupported"


def classify_value(value: Any) -> ValueKind:
    """Return whether `value` is a string, a number, or unsupported."""
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, bool):
        return ValueKind.UNSUPPORTED
    if isinstance(value, Real):
        return ValueKind.NUMBER
    return ValueKind.UNSUPPORTED


def _number_to_str(value: Real) -> str:
    """Print a number the way spreadsheet exports and JSON render it.

    Integral floats drop the trailing ".0" so `2024.0` and `2024` share a key.
    Exponent form is used only below 1e-6 or from 1e21 up, without
    zero-padding (`1e-7`, `1e+21`); everything else prints positionally.
    """
    if isinstance(value, int):
        return str(value)
    f = float(value)
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "Infinity" if f > 0 else "-Infinity"
    if f == 0:
        return "0"

    # shortest round-trip digits, as value = 0.DIGITS * 10**n
    sign, digit_tuple, exponent = Decimal(repr(f)).as_tuple()
    digits = "".join(map(str, digit_tuple)).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = exponent + k
    prefix = "-" if sign else ""

    if k <= n <= 21:
        return prefix + digits + "0" * (n - k)
    if 0 < n <= 21:
        return prefix + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return prefix + "0." + "0" * -n + digits

    e = n - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{prefix}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def stringify(value: Any) -> str | None:
    """Return the string form of a string or number, else None."""
    kind = classify_value(value)
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.NUMBER:
        return _number_to_str(value)
    return None


def group_key(value: Any) -> str | None:
    """Return the group key for a `groupBy` value, or None to drop it."""
    return stringify(value)


def is_blank(value: Any) -> bool:
    """True for values that never match a filter: None, "", 0, NaN, False."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, Real):
        f = float(value)
        return f == 0 or math.isnan(f)
    return False
