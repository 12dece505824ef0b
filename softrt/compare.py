"""Soft-float comparisons following the libgcc comparison ABI."""

from __future__ import annotations

from enum import Enum

from .formats import F32, F64, FloatFormat

__all__ = [
    "Ordering",
    "compare_bits",
    "unordered_bits",
    "lesf2",
    "gesf2",
    "unordsf2",
    "eqsf2",
    "ltsf2",
    "nesf2",
    "gtsf2",
    "ledf2",
    "gedf2",
    "unorddf2",
    "eqdf2",
    "ltdf2",
    "nedf2",
    "gtdf2",
    "aeabi_fcmple",
    "aeabi_fcmpge",
    "aeabi_fcmpeq",
    "aeabi_fcmplt",
    "aeabi_fcmpgt",
    "aeabi_dcmple",
    "aeabi_dcmpge",
    "aeabi_dcmpeq",
    "aeabi_dcmplt",
    "aeabi_dcmpgt",
]


class Ordering(Enum):
    """Outcome of comparing two floating-point values."""

    LESS = "less"
    EQUAL = "equal"
    GREATER = "greater"
    UNORDERED = "unordered"

    def to_le_abi(self) -> int:
        """Integer result where an unordered comparison reads as greater."""
        if self is Ordering.LESS:
            return -1
        if self is Ordering.EQUAL:
            return 0
        return 1

    def to_ge_abi(self) -> int:
        """Integer result where an unordered comparison reads as less."""
        if self is Ordering.GREATER:
            return 1
        if self is Ordering.EQUAL:
            return 0
        return -1


def unordered_bits(fmt: FloatFormat, a: int, b: int) -> bool:
    """True when either bit pattern is a NaN."""
    inf_rep = fmt.exponent_mask
    return (a & fmt.abs_mask) > inf_rep or (b & fmt.abs_mask) > inf_rep


def compare_bits(fmt: FloatFormat, a: int, b: int) -> Ordering:
    """Compare two bit patterns of format ``fmt`` as floating-point values."""
    if unordered_bits(fmt, a, b):
        return Ordering.UNORDERED
    if (a & fmt.abs_mask) | (b & fmt.abs_mask) == 0:
        return Ordering.EQUAL

    a_srep = fmt.signed_repr(a)
    b_srep = fmt.signed_repr(b)
    if a_srep == b_srep:
        return Ordering.EQUAL
    # With at least one operand non-negative, integer order matches float
    # order; with both negative the sense is reversed.
    integer_less = a_srep < b_srep
    if (a_srep & b_srep) < 0:
        integer_less = not integer_less
    return Ordering.LESS if integer_less else Ordering.GREATER


def _cmp32(a: float, b: float) -> Ordering:
    return compare_bits(F32, F32.repr(a), F32.repr(b))


def _cmp64(a: float, b: float) -> Ordering:
    return compare_bits(F64, F64.repr(a), F64.repr(b))


def lesf2(a: float, b: float) -> int:
    return _cmp32(a, b).to_le_abi()


def gesf2(a: float, b: float) -> int:
    return _cmp32(a, b).to_ge_abi()


def unordsf2(a: float, b: float) -> int:
    return int(unordered_bits(F32, F32.repr(a), F32.repr(b)))


def eqsf2(a: float, b: float) -> int:
    return _cmp32(a, b).to_le_abi()


def ltsf2(a: float, b: float) -> int:
    return _cmp32(a, b).to_le_abi()


def nesf2(a: float, b: float) -> int:
    return _cmp32(a, b).to_le_abi()


def gtsf2(a: float, b: float) -> int:
    return _cmp32(a, b).to_ge_abi()


def ledf2(a: float, b: float) -> int:
    return _cmp64(a, b).to_le_abi()


def gedf2(a: float, b: float) -> int:
    return _cmp64(a, b).to_ge_abi()


def unorddf2(a: float, b: float) -> int:
    return int(unordered_bits(F64, F64.repr(a), F64.repr(b)))


def eqdf2(a: float, b: float) -> int:
    return _cmp64(a, b).to_le_abi()


def ltdf2(a: float, b: float) -> int:
    return _cmp64(a, b).to_le_abi()


def nedf2(a: float, b: float) -> int:
    return _cmp64(a, b).to_le_abi()


def gtdf2(a: float, b: float) -> int:
    return _cmp64(a, b).to_ge_abi()


def aeabi_fcmple(a: float, b: float) -> int:
    return int(lesf2(a, b) <= 0)


def aeabi_fcmpge(a: float, b: float) -> int:
    return int(gesf2(a, b) >= 0)


def aeabi_fcmpeq(a: float, b: float) -> int:
    return int(eqsf2(a, b) == 0)


def aeabi_fcmplt(a: float, b: float) -> int:
    return int(ltsf2(a, b) < 0)


def aeabi_fcmpgt(a: float, b: float) -> int:
    return int(gtsf2(a, b) > 0)


def aeabi_dcmple(a: float, b: float) -> int:
    return int(ledf2(a, b) <= 0)


def aeabi_dcmpge(a: float, b: float) -> int:
    return int(gedf2(a, b) >= 0)


def aeabi_dcmpeq(a: float, b: float) -> int:
    return int(eqdf2(a, b) == 0)


def aeabi_dcmplt(a: float, b: float) -> int:
    return int(ltdf2(a, b) < 0)


def aeabi_dcmpgt(a: float, b: float) -> int:
    return int(gtdf2(a, b) > 0)