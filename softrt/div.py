"""Soft-float division using a Newton-Raphson reciprocal estimate."""

from __future__ import annotations

from typing import Optional

from .formats import F32, F64, FloatFormat

__all__ = ["div32_bits", "div64_bits", "divsf3", "divdf3"]

_M32 = (1 << 32) - 1
_M64 = (1 << 64) - 1

# Initial reciprocal estimate: 3/4 + 1/sqrt(2) in Q32, minus b/2.
_RECIP_SEED = 0x7504F333


def _prepare(
    fmt: FloatFormat, a: int, b: int
) -> tuple[Optional[int], int, int, int, int]:
    """Handle special operands and normalise significands.

    Returns ``(result, a_significand, b_significand, quotient_exponent,
    quotient_sign)``; ``result`` is not None when the answer is already known.
    """
    significand_bits = fmt.significand_bits
    max_exponent = fmt.exponent_max
    implicit_bit = fmt.implicit_bit
    significand_mask = fmt.significand_mask
    abs_mask = fmt.abs_mask
    inf_rep = fmt.exponent_mask
    quiet_bit = implicit_bit >> 1
    qnan_rep = inf_rep | quiet_bit

    a_exponent = (a >> significand_bits) & max_exponent
    b_exponent = (b >> significand_bits) & max_exponent
    quotient_sign = (a ^ b) & fmt.sign_mask

    a_significand = a & significand_mask
    b_significand = b & significand_mask
    scale = 0

    # Zero, subnormal, infinity or NaN on either side.
    if not 0 < a_exponent < max_exponent or not 0 < b_exponent < max_exponent:
        a_abs = a & abs_mask
        b_abs = b & abs_mask

        if a_abs > inf_rep:
            return a | quiet_bit, 0, 0, 0, quotient_sign
        if b_abs > inf_rep:
            return b | quiet_bit, 0, 0, 0, quotient_sign
        if a_abs == inf_rep:
            result = qnan_rep if b_abs == inf_rep else a_abs | quotient_sign
            return result, 0, 0, 0, quotient_sign
        if b_abs == inf_rep:
            return quotient_sign, 0, 0, 0, quotient_sign
        if a_abs == 0:
            result = qnan_rep if b_abs == 0 else quotient_sign
            return result, 0, 0, 0, quotient_sign
        if b_abs == 0:
            return inf_rep | quotient_sign, 0, 0, 0, quotient_sign

        if a_abs < implicit_bit:
            exponent, a_significand = fmt.normalize(a_significand)
            scale += exponent
        if b_abs < implicit_bit:
            exponent, b_significand = fmt.normalize(b_significand)
            scale -= exponent

    a_significand |= implicit_bit
    b_significand |= implicit_bit
    quotient_exponent = a_exponent - b_exponent + scale
    return None, a_significand, b_significand, quotient_exponent, quotient_sign


def _recip32(q31b: int) -> int:
    """Refine a Q32 reciprocal of ``q31b`` with three Newton-Raphson steps."""
    reciprocal = (_RECIP_SEED - q31b) & _M32
    for _ in range(3):
        correction = (-(((reciprocal * q31b) & _M64) >> 32)) & _M32
        reciprocal = (((reciprocal * correction) & _M64) >> 31) & _M32
    return reciprocal


def _finish(
    fmt: FloatFormat,
    quotient: int,
    a_significand: int,
    b_significand: int,
    quotient_exponent: int,
    quotient_sign: int,
) -> int:
    """Compute the residual, round, and assemble the result bits."""
    mask = fmt.int_mask
    significand_bits = fmt.significand_bits

    if quotient < (fmt.implicit_bit << 1):
        quotient_exponent -= 1
        residual = (
            (a_significand << (significand_bits + 1)) - quotient * b_significand
        ) & mask
    else:
        quotient >>= 1
        residual = ((a_significand << significand_bits) - quotient * b_significand) & mask

    written_exponent = quotient_exponent + fmt.exponent_bias

    if written_exponent >= fmt.exponent_max:
        return fmt.exponent_mask | quotient_sign
    if written_exponent < 1:
        # Subnormal results are flushed to zero.
        return quotient_sign

    round_up = int(((residual << 1) & mask) > b_significand)
    abs_result = quotient & fmt.significand_mask
    abs_result |= written_exponent << significand_bits
    abs_result = (abs_result + round_up) & mask
    return abs_result | quotient_sign


def div32_bits(fmt: FloatFormat, a: int, b: int) -> int:
    """Divide bit patterns with a 32-bit reciprocal (single precision)."""
    mask = fmt.int_mask
    done, a_sig, b_sig, q_exp, q_sign = _prepare(fmt, a, b)
    if done is not None:
        return done & mask

    q31b = ((b_sig << 8) & mask) & _M32
    reciprocal = (_recip32(q31b) - 2) & _M32

    quotient = (((a_sig << 1) & mask) * (reciprocal & mask)) >> fmt.bits
    return _finish(fmt, quotient, a_sig, b_sig, q_exp, q_sign)


def div64_bits(fmt: FloatFormat, a: int, b: int) -> int:
    """Divide bit patterns with a 64-bit reciprocal (double precision)."""
    mask = fmt.int_mask
    done, a_sig, b_sig, q_exp, q_sign = _prepare(fmt, a, b)
    if done is not None:
        return done & mask

    q31b = (b_sig >> 21) & _M32
    # Step down by one so an estimate that wrapped to zero stays usable.
    recip32 = (_recip32(q31b) - 1) & _M32

    # A final, wider iteration reaches about 56 correct bits.
    q63blo = ((b_sig << 11) & mask) & _M32
    correction = (-((recip32 * q31b + ((recip32 * q63blo) >> 32)) & _M64)) & _M64
    c_hi = correction >> 32
    c_lo = correction & _M32
    reciprocal = (recip32 * c_hi + ((recip32 * c_lo) >> 32)) & _M64
    reciprocal = (reciprocal - 2) & _M64

    quotient = (((a_sig << 2) & mask) * (reciprocal & mask)) >> fmt.bits
    return _finish(fmt, quotient, a_sig, b_sig, q_exp, q_sign)


def divsf3(a: float, b: float) -> float:
    """Single-precision ``a / b``."""
    return F32.from_repr(div32_bits(F32, F32.repr(a), F32.repr(b)))


def divdf3(a: float, b: float) -> float:
    """Double-precision ``a / b``."""
    return F64.from_repr(div64_bits(F64, F64.repr(a), F64.repr(b)))