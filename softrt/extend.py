"""Widening conversion between IEEE-754 formats."""

from __future__ import annotations

from .formats import F32, F64, FloatFormat

__all__ = ["extend_bits", "extendsfdf2"]


def extend_bits(src: FloatFormat, dst: FloatFormat, a: int) -> int:
    """Convert bit pattern ``a`` of format ``src`` to the wider format ``dst``."""
    src_min_normal = src.implicit_bit
    src_infinity = src.exponent_mask
    src_qnan = src.significand_mask
    src_nan_code = src_qnan - 1

    sign_bits_delta = dst.significand_bits - src.significand_bits
    exp_bias_delta = dst.exponent_bias - src.exponent_bias
    a_abs = a & src.abs_mask
    abs_result = 0

    if src_min_normal <= a_abs < src_infinity:
        # Normal: shift into place and rebias the exponent.
        abs_result = (a_abs << sign_bits_delta) + (exp_bias_delta << dst.significand_bits)
    elif a_abs >= src_infinity:
        # Infinity or NaN: keep the quiet bit and right-align the payload.
        abs_result = dst.exponent_max << dst.significand_bits
        abs_result |= (a_abs & src_qnan) << sign_bits_delta
        abs_result |= (a_abs & src_nan_code) << sign_bits_delta
    elif a_abs != 0:
        # Subnormal: renormalise and clear the leading bit.
        scale = src_min_normal.bit_length() - a_abs.bit_length()
        abs_result = (a_abs << (sign_bits_delta + scale)) & dst.int_mask
        abs_result = (abs_result ^ dst.implicit_bit) | (
            (exp_bias_delta - scale + 1) << dst.significand_bits
        )

    sign_result = (a & src.sign_mask) << (dst.bits - src.bits)
    return (abs_result | sign_result) & dst.int_mask


def extendsfdf2(a: float) -> float:
    """Widen a single-precision value to double precision."""
    return F64.from_repr(extend_bits(F32, F64, F32.repr(a)))