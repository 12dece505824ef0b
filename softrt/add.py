"""Soft-float addition and subtraction with round-to-nearest-even."""

from __future__ import annotations

from .formats import F32, F64, FloatFormat

__all__ = ["add_bits", "addsf3", "adddf3", "subsf3", "subdf3"]


def _shift_right_sticky(value: int, shift: int) -> int:
    """Shift right, OR-ing a 1 into the lowest bit if any set bit is lost."""
    lost = value & ((1 << shift) - 1)
    return (value >> shift) | int(lost != 0)


def add_bits(fmt: FloatFormat, a: int, b: int) -> int:
    """Add two bit patterns of format ``fmt`` and return the result's bits."""
    mask = fmt.int_mask
    bits = fmt.bits
    significand_bits = fmt.significand_bits
    implicit_bit = fmt.implicit_bit
    significand_mask = fmt.significand_mask
    sign_bit = fmt.sign_mask
    abs_mask = fmt.abs_mask
    exponent_mask = fmt.exponent_mask
    inf_rep = exponent_mask
    quiet_bit = implicit_bit >> 1
    qnan_rep = exponent_mask | quiet_bit

    a_abs = a & abs_mask
    b_abs = b & abs_mask

    # Zero, infinity or NaN on either side.
    if (a_abs - 1) & mask >= inf_rep - 1 or (b_abs - 1) & mask >= inf_rep - 1:
        if a_abs > inf_rep:
            return a_abs | quiet_bit
        if b_abs > inf_rep:
            return b_abs | quiet_bit
        if a_abs == inf_rep:
            # Opposite infinities cancel to NaN.
            return qnan_rep if (a ^ b) == sign_bit else a
        if b_abs == inf_rep:
            return b
        if a_abs == 0:
            # Keep the sign right for zero + zero.
            return a & b if b_abs == 0 else b
        if b_abs == 0:
            return a

    a_rep, b_rep = (b, a) if b_abs > a_abs else (a, b)

    a_exponent = (a_rep & exponent_mask) >> significand_bits
    b_exponent = (b_rep & exponent_mask) >> significand_bits
    a_significand = a_rep & significand_mask
    b_significand = b_rep & significand_mask

    if a_exponent == 0:
        a_exponent, a_significand = fmt.normalize(a_significand)
    if b_exponent == 0:
        b_exponent, b_significand = fmt.normalize(b_significand)

    result_sign = a_rep & sign_bit
    subtraction = ((a_rep ^ b_rep) & sign_bit) != 0

    # Leave room for round, guard and sticky bits.
    a_significand = (a_significand | implicit_bit) << 3
    b_significand = (b_significand | implicit_bit) << 3

    align = a_exponent - b_exponent
    if align:
        b_significand = _shift_right_sticky(b_significand, align)

    if subtraction:
        a_significand -= b_significand
        if a_significand == 0:
            return 0
        top = implicit_bit << 3
        if a_significand < top:
            shift = top.bit_length() - a_significand.bit_length()
            a_significand <<= shift
            a_exponent -= shift
    else:
        a_significand += b_significand
        if a_significand & (implicit_bit << 4):
            a_significand = _shift_right_sticky(a_significand, 1)
            a_exponent += 1

    if a_exponent >= fmt.exponent_max:
        return inf_rep | result_sign

    if a_exponent <= 0:
        a_significand = _shift_right_sticky(a_significand, 1 - a_exponent)
        a_exponent = 0

    round_guard_sticky = a_significand & 0x7

    result = (a_significand >> 3) & significand_mask
    result |= a_exponent << significand_bits
    result |= result_sign

    # Rounding may carry into the exponent, overflowing to infinity.
    if round_guard_sticky > 0x4:
        result += 1
    if round_guard_sticky == 0x4:
        result += result & 1

    return result & mask


def addsf3(a: float, b: float) -> float:
    """Single-precision ``a + b``."""
    return F32.from_repr(add_bits(F32, F32.repr(a), F32.repr(b)))


def adddf3(a: float, b: float) -> float:
    """Double-precision ``a + b``."""
    return F64.from_repr(add_bits(F64, F64.repr(a), F64.repr(b)))


def subsf3(a: float, b: float) -> float:
    """Single-precision ``a - b``."""
    return F32.from_repr(add_bits(F32, F32.repr(a), F32.repr(b) ^ F32.sign_mask))


def subdf3(a: float, b: float) -> float:
    """Double-precision ``a - b``."""
    return F64.from_repr(add_bits(F64, F64.repr(a), F64.repr(b) ^ F64.sign_mask))