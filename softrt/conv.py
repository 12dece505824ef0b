"""Conversions between integers and IEEE-754 floats, done on bit patterns.

Integer-to-float conversions round to nearest, ties to even. Float-to-integer
conversions truncate toward zero and saturate: values beyond the target range
(including infinities) give the range limit, and NaN gives zero.
"""

from __future__ import annotations

from .formats import F32, F64, FloatFormat

__all__ = [
    "u32_to_f32_bits",
    "u32_to_f64_bits",
    "u64_to_f32_bits",
    "u64_to_f64_bits",
    "u128_to_f32_bits",
    "u128_to_f64_bits",
    "floatunsisf",
    "floatunsidf",
    "floatundisf",
    "floatundidf",
    "floatuntisf",
    "floatuntidf",
    "floatsisf",
    "floatsidf",
    "floatdisf",
    "floatdidf",
    "floattisf",
    "floattidf",
    "fixunssfsi",
    "fixunssfdi",
    "fixunssfti",
    "fixunsdfsi",
    "fixunsdfdi",
    "fixunsdfti",
    "fixsfsi",
    "fixsfdi",
    "fixsfti",
    "fixdfsi",
    "fixdfdi",
    "fixdfti",
]


def _unsigned(i: int, width: int) -> int:
    if not 0 <= i < (1 << width):
        raise ValueError(f"{i} is out of range for a {width}-bit unsigned integer")
    return i


def _signed(i: int, width: int) -> int:
    limit = 1 << (width - 1)
    if not -limit <= i < limit:
        raise ValueError(f"{i} is out of range for a {width}-bit signed integer")
    return i


def _uint_to_bits(i: int, fmt: FloatFormat) -> int:
    """Round a non-negative integer to the nearest value of ``fmt``."""
    if i == 0:
        return 0
    n = i.bit_length()
    precision = fmt.significand_bits + 1
    if n <= precision:
        m = i << (precision - n)
    else:
        shift = n - precision
        m = i >> shift
        rest = i & ((1 << shift) - 1)
        half = 1 << (shift - 1)
        if rest > half or (rest == half and m & 1):
            m += 1
    # The significand still carries its leading bit, which adds one to the
    # exponent field; a rounding carry may move on into the exponent too.
    exponent = fmt.exponent_bias + n - 2
    return (exponent << fmt.significand_bits) + m


def _int_to_bits(i: int, fmt: FloatFormat) -> int:
    sign = fmt.sign_mask if i < 0 else 0
    return _uint_to_bits(abs(i), fmt) | sign


def u32_to_f32_bits(i: int) -> int:
    """Bit pattern of the binary32 value nearest to the u32 ``i``."""
    return _uint_to_bits(_unsigned(i, 32), F32)


def u32_to_f64_bits(i: int) -> int:
    """Bit pattern of the binary64 value equal to the u32 ``i``."""
    return _uint_to_bits(_unsigned(i, 32), F64)


def u64_to_f32_bits(i: int) -> int:
    """Bit pattern of the binary32 value nearest to the u64 ``i``."""
    return _uint_to_bits(_unsigned(i, 64), F32)


def u64_to_f64_bits(i: int) -> int:
    """Bit pattern of the binary64 value nearest to the u64 ``i``."""
    return _uint_to_bits(_unsigned(i, 64), F64)


def u128_to_f32_bits(i: int) -> int:
    """Bit pattern of the binary32 value nearest to the u128 ``i``."""
    return _uint_to_bits(_unsigned(i, 128), F32)


def u128_to_f64_bits(i: int) -> int:
    """Bit pattern of the binary64 value nearest to the u128 ``i``."""
    return _uint_to_bits(_unsigned(i, 128), F64)


def floatunsisf(i: int) -> float:
    return F32.from_repr(u32_to_f32_bits(i))


def floatunsidf(i: int) -> float:
    return F64.from_repr(u32_to_f64_bits(i))


def floatundisf(i: int) -> float:
    return F32.from_repr(u64_to_f32_bits(i))


def floatundidf(i: int) -> float:
    return F64.from_repr(u64_to_f64_bits(i))


def floatuntisf(i: int) -> float:
    return F32.from_repr(u128_to_f32_bits(i))


def floatuntidf(i: int) -> float:
    return F64.from_repr(u128_to_f64_bits(i))


def floatsisf(i: int) -> float:
    return F32.from_repr(_int_to_bits(_signed(i, 32), F32))


def floatsidf(i: int) -> float:
    return F64.from_repr(_int_to_bits(_signed(i, 32), F64))


def floatdisf(i: int) -> float:
    return F32.from_repr(_int_to_bits(_signed(i, 64), F32))


def floatdidf(i: int) -> float:
    return F64.from_repr(_int_to_bits(_signed(i, 64), F64))


def floattisf(i: int) -> float:
    return F32.from_repr(_int_to_bits(_signed(i, 128), F32))


def floattidf(i: int) -> float:
    return F64.from_repr(_int_to_bits(_signed(i, 128), F64))


def _left_aligned(fmt: FloatFormat, fbits: int, width: int) -> int:
    """Significand with its leading bit placed at the top of ``width`` bits."""
    frac = fbits & fmt.significand_mask
    top = width - 1
    shift = top - fmt.significand_bits
    placed = frac << shift if shift >= 0 else frac >> -shift
    return (1 << top) | placed


def _float_to_uint(fmt: FloatFormat, fbits: int, width: int) -> int:
    sig = fmt.significand_bits
    limit = fmt.exponent_bias + width
    if fbits < fmt.exponent_bias << sig:  # >= 0, < 1
        return 0
    if fbits < limit << sig:  # >= 1, in range
        exponent = fbits >> sig
        return _left_aligned(fmt, fbits, width) >> (limit - 1 - exponent)
    if fbits <= fmt.exponent_mask:  # too large, including infinity
        return (1 << width) - 1
    return 0  # negative or NaN


def _float_to_int(fmt: FloatFormat, bits: int, width: int) -> int:
    sig = fmt.significand_bits
    negative = bool(bits & fmt.sign_mask)
    fbits = bits & fmt.abs_mask
    limit = fmt.exponent_bias + width - 1
    if fbits < fmt.exponent_bias << sig:  # |f| < 1
        return 0
    if fbits < limit << sig:
        exponent = fbits >> sig
        u = _left_aligned(fmt, fbits, width) >> (limit - exponent)
        return -u if negative else u
    if fbits <= fmt.exponent_mask:  # out of range, including infinity
        return -(1 << (width - 1)) if negative else (1 << (width - 1)) - 1
    return 0  # NaN


def fixunssfsi(f: float) -> int:
    return _float_to_uint(F32, F32.repr(f), 32)


def fixunssfdi(f: float) -> int:
    return _float_to_uint(F32, F32.repr(f), 64)


def fixunssfti(f: float) -> int:
    return _float_to_uint(F32, F32.repr(f), 128)


def fixunsdfsi(f: float) -> int:
    return _float_to_uint(F64, F64.repr(f), 32)


def fixunsdfdi(f: float) -> int:
    return _float_to_uint(F64, F64.repr(f), 64)


def fixunsdfti(f: float) -> int:
    return _float_to_uint(F64, F64.repr(f), 128)


def fixsfsi(f: float) -> int:
    return _float_to_int(F32, F32.repr(f), 32)


def fixsfdi(f: float) -> int:
    return _float_to_int(F32, F32.repr(f), 64)


def fixsfti(f: float) -> int:
    return _float_to_int(F32, F32.repr(f), 128)


def fixdfsi(f: float) -> int:
    return _float_to_int(F64, F64.repr(f), 32)


def fixdfdi(f: float) -> int:
    return _float_to_int(F64, F64.repr(f), 64)


def fixdfti(f: float) -> int:
    return _float_to_int(F64, F64.repr(f), 128)