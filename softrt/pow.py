"""Raising a float to an integer power by repeated squaring."""

from __future__ import annotations

import math
import struct
from typing import Callable

from .formats import F32, F64

__all__ = ["powisf2", "powidf2"]

_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1


def _round_f32(x: float) -> float:
    """Round a double to the nearest single-precision value."""
    try:
        return struct.unpack("<f", struct.pack("<f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def _identity(x: float) -> float:
    return x


def _powi(a: float, b: int, rounding: Callable[[float], float]) -> float:
    if not _I32_MIN <= b <= _I32_MAX:
        raise ValueError(f"exponent {b} does not fit in 32 bits")
    recip = b < 0
    power = abs(b)
    result = 1.0
    while True:
        if power & 1:
            result = rounding(result * a)
        power >>= 1
        if power == 0:
            break
        a = rounding(a * a)

    if not recip:
        return result
    if result == 0.0:
        return math.copysign(math.inf, result)
    return rounding(1.0 / result)


def powisf2(a: float, b: int) -> float:
    """Single-precision ``a ** b`` for a 32-bit integer ``b``."""
    return _powi(F32.from_repr(F32.repr(a)), b, _round_f32)


def powidf2(a: float, b: int) -> float:
    """Double-precision ``a ** b`` for a 32-bit integer ``b``."""
    return _powi(F64.from_repr(F64.repr(a)), b, _identity)