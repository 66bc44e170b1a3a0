"""Value helpers for Fable.

Variables always hold text. Numbers only exist transiently while the
evaluator runs; this module converts between the two representations and
provides the tolerant float comparison used by relational expressions.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union
import math
import struct


@dataclass
class ErrorVal:
    """Represents a Fable error value.

    Errors carry a kind name (for example `UndefinedLabel`) and a human
    readable message.
    """
    name: str
    message: str


Value = Union[float, str]

# relative tolerance for == and != on numbers, in units in the last place
ULPS_TOLERANCE = 16


def format_number(value: float) -> str:
    """Render a number the way it is stored in a variable.

    Integral values print without a fractional part and no value ever uses
    exponent notation, so `2+3` stores `5` and `1/10000000` stores
    `0.0000001`.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    if value == int(value):
        return str(int(value))
    return format(Decimal(repr(value)), 'f')


def _ordered_bits(value: float) -> int:
    return struct.unpack('<q', struct.pack('<d', value))[0]


def approx_eq(a: float, b: float, ulps: int = ULPS_TOLERANCE) -> bool:
    """Float equality allowing `ulps` representable steps of difference."""
    if a == b:
        return True
    if math.isnan(a) or math.isnan(b):
        return False
    return abs(_ordered_bits(a) - _ordered_bits(b)) <= ulps


def to_string(value: Value) -> str:
    if isinstance(value, float):
        return format_number(value)
    return value
