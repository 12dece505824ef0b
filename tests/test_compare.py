import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from softrt import compare
from softrt.compare import Ordering, compare_bits, unordered_bits
from softrt.formats import F32, F64

f32s = st.floats(width=32)
f64s = st.floats()


def test_ordering_abi_values():
    assert Ordering.LESS.to_le_abi() == -1
    assert Ordering.EQUAL.to_le_abi() == 0
    assert Ordering.GREATER.to_le_abi() == 1
    assert Ordering.UNORDERED.to_le_abi() == 1
    assert Ordering.LESS.to_ge_abi() == -1
    assert Ordering.EQUAL.to_ge_abi() == 0
    assert Ordering.GREATER.to_ge_abi() == 1
    assert Ordering.UNORDERED.to_ge_abi() == -1
    assert compare.lesf2(math.nan, 1.0) == 1
    assert compare.gesf2(math.nan, 1.0) == -1


def test_signed_zeros_are_equal():
    assert compare_bits(F64, F64.repr(0.0), F64.repr(-0.0)) is Ordering.EQUAL
    assert compare.eqsf2(-0.0, 0.0) == 0


def test_nan_is_unordered():
    assert compare_bits(F32, F32.repr(math.nan), F32.repr(1.0)) is Ordering.UNORDERED
    assert unordered_bits(F64, F64.repr(1.0), F64.repr(math.nan))
    assert compare.unordsf2(math.nan, 0.0) == 1
    assert compare.unorddf2(1.0, 2.0) == 0
    assert compare.ledf2(math.nan, 1.0) == 1
    assert compare.gedf2(math.nan, 1.0) == -1


def test_negative_ordering():
    assert compare.ltdf2(-3.0, -2.0) == -1
    assert compare.gtsf2(-2.0, -3.0) == 1


@given(f64s, f64s)
def test_double_ops_match_python(a, b):
    assert compare.aeabi_dcmple(a, b) == int(a <= b)
    assert compare.aeabi_dcmpge(a, b) == int(a >= b)
    assert compare.aeabi_dcmpeq(a, b) == int(a == b)
    assert compare.aeabi_dcmplt(a, b) == int(a < b)
    assert compare.aeabi_dcmpgt(a, b) == int(a > b)
    assert compare.unorddf2(a, b) == int(math.isnan(a) or math.isnan(b))


@given(f32s, f32s)
def test_single_ops_match_python(a, b):
    assert compare.aeabi_fcmple(a, b) == int(a <= b)
    assert compare.aeabi_fcmpge(a, b) == int(a >= b)
    assert compare.aeabi_fcmpeq(a, b) == int(a == b)
    assert compare.aeabi_fcmplt(a, b) == int(a < b)
    assert compare.aeabi_fcmpgt(a, b) == int(a > b)


@given(st.floats(width=32, allow_nan=False), st.floats(width=32, allow_nan=False))
def test_single_sign_results(a, b):
    expected = (a > b) - (a < b)
    assert compare.lesf2(a, b) == expected
    assert compare.gesf2(a, b) == expected
    assert compare.nesf2(a, b) == expected
    assert compare.ltsf2(a, b) == expected


@given(st.floats(allow_nan=False), st.floats(allow_nan=False))
def test_compare_antisymmetric(a, b):
    forward = compare_bits(F64, F64.repr(a), F64.repr(b))
    backward = compare_bits(F64, F64.repr(b), F64.repr(a))
    flipped = {Ordering.LESS: Ordering.GREATER, Ordering.GREATER: Ordering.LESS}
    assert backward is flipped.get(forward, forward)
    assert compare.nedf2(a, b) == (0 if a == b else forward.to_le_abi())


def test_oversized_single_raises():
    with pytest.raises(OverflowError):
        compare.lesf2(1e300, 1.0)