"""Narrowing conversion between IEEE-754 formats with round-to-nearest-even."""

from __future__ import annotations

from .formats import F32, F64, FloatFormat

__all__ = ["trunc_bits", "truncdfsf2"]


def trunc_bits(src: FloatFormat, dst: FloatFormat, a: int) -> int:
    """Convert bit pattern ``a`` of format ``src`` to the narrower format ``dst``."""
    src_mask = src.int_mask
    delta = src.significand_bits - dst.significand_bits
    round_mask = (1 << delta) - 1
    halfway = 1 << (delta - 1)
    src_qnan = 1 << (src.significand_bits - 1)
    src_nan_code = src_qnan - 1

    underflow_exponent = src.exponent_bias + 1 - dst.exponent_bias
    overflow_exponent = src.exponent_bias + dst.exponent_max - dst.exponent_bias
    underflow = underflow_exponent << src.significand_bits
    overflow = overflow_exponent << src.significand_bits

    dst_qnan = 1 << (dst.significand_bits - 1)
    dst_nan_code = dst_qnan - 1
    dst_infinity = dst.exponent_max << dst.significand_bits

    a_abs = a & src.abs_mask
    sign = a & src.sign_mask

    if (a_abs - underflow) & src_mask < (a_abs - overflow) & src_mask:
        # Within the normal range of the destination: shift and rebias.
        abs_result = a_abs >> delta
        abs_result -= (src.exponent_bias - dst.exponent_bias) << dst.significand_bits
        round_bits = a_abs & round_mask
        if round_bits > halfway:
            abs_result += 1
        elif round_bits == halfway:
            abs_result += abs_result & 1
    elif a_abs > src.exponent_mask:
        # NaN: quiet it and keep what fits of the payload.
        abs_result = dst_infinity | dst_qnan
        abs_result |= dst_nan_code & ((a_abs & src_nan_code) >> delta)
    elif a_abs >= overflow:
        abs_result = dst_infinity
    else:
        # Underflow to a subnormal or zero.
        a_exp = a_abs >> src.significand_bits
        shift = src.exponent_bias - dst.exponent_bias - a_exp + 1
        significand = (a & src.significand_mask) | src.implicit_bit
        if shift > src.significand_bits:
            abs_result = 0
        else:
            sticky = int((significand << (src.bits - shift)) & src_mask != 0)
            denormalized = (significand >> shift) | sticky
            abs_result = denormalized >> delta
            round_bits = denormalized & round_mask
            if round_bits > halfway:
                abs_result += 1
            elif round_bits == halfway:
                abs_result += abs_result & 1

    return (abs_result | (sign >> (src.bits - dst.bits))) & dst.int_mask


def truncdfsf2(a: float) -> float:
    """Round a double-precision value to single precision."""
    return F32.from_repr(trunc_bits(F64, F32, F64.repr(a)))