import math
from fractions import Fraction

import pytest
from hypothesis import given
from hypothesis import strategies as st

from softrt import conv
from softrt.formats import F32, F64

U32_MAX = (1 << 32) - 1
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1
I32_MIN, I32_MAX = -(1 << 31), (1 << 31) - 1
I64_MIN, I64_MAX = -(1 << 63), (1 << 63) - 1
I128_MIN, I128_MAX = -(1 << 127), (1 << 127) - 1

F32_MAX = F32.from_parts(False, F32.exponent_max - 1, F32.significand_mask)


def _f32_half_ulp(x: float) -> Fraction:
    """Half the binary32 unit in the last place of a normal or zero value."""
    if x == 0:
        return Fraction(0)
    return Fraction(2) ** (math.frexp(x)[1] - 25)


def test_zero_gives_positive_zero_bits():
    assert conv.u32_to_f32_bits(0) == 0
    assert conv.u64_to_f32_bits(0) == 0
    assert conv.u128_to_f64_bits(0) == 0
    assert F32.repr(conv.floatsisf(0)) == 0
    assert F64.repr(conv.floattidf(0)) == 0


def test_one_matches_format():
    assert conv.u32_to_f32_bits(1) == F32.repr(1.0)
    assert conv.u32_to_f64_bits(1) == F64.repr(1.0)
    assert conv.u128_to_f32_bits(1) == F32.repr(1.0)
    assert conv.u64_to_f64_bits(1) == F64.repr(1.0)


def test_ties_round_to_even():
    assert conv.floatunsisf(2**24 + 1) == float(2**24)
    assert conv.floatunsisf(2**24 + 3) == float(2**24 + 4)
    assert conv.floatundidf(2**53 + 1) == float(2**53)
    assert conv.floatundidf(2**53 + 3) == float(2**53 + 4)


def test_u32_max_to_f32_rounds_up_to_power_of_two():
    assert conv.floatunsisf(U32_MAX) == float(2**32)


def test_u128_max_to_f32_overflows_to_infinity():
    assert conv.floatuntisf(U128_MAX) == math.inf
    assert conv.floattisf(I128_MIN) == float(-(2**127))


@given(st.integers(0, U32_MAX))
def test_u32_to_f64_is_exact(i):
    assert conv.floatunsidf(i) == i


@given(st.integers(I32_MIN, I32_MAX))
def test_i32_round_trip_through_f64(i):
    assert conv.fixdfsi(conv.floatsidf(i)) == i


@given(st.integers(-(2**24), 2**24))
def test_small_i32_round_trip_through_f32(i):
    assert conv.fixsfsi(conv.floatsisf(i)) == i


@given(st.integers(0, U64_MAX))
def test_u64_to_f64_matches_builtin_rounding(i):
    assert conv.floatundidf(i) == float(i)


@given(st.integers(I64_MIN, I64_MAX))
def test_i64_to_f64_matches_builtin_rounding(i):
    assert conv.floatdidf(i) == float(i)


@given(st.integers(I128_MIN, I128_MAX))
def test_i128_to_f64_matches_builtin_rounding(i):
    assert conv.floattidf(i) == float(i)


@given(st.integers(0, U128_MAX))
def test_u128_to_f64_matches_builtin_rounding(i):
    assert conv.floatuntidf(i) == float(i)


@given(st.integers(0, U32_MAX))
def test_u32_to_f32_matches_single_rounding(i):
    # A u32 is exact in binary64, so one rounding to binary32 is correct.
    assert conv.u32_to_f32_bits(i) == F32.repr(float(i))


@given(st.integers(0, U64_MAX))
def test_u64_to_f32_is_nearest(i):
    result = conv.floatundisf(i)
    assert abs(Fraction(result) - i) <= _f32_half_ulp(result)


@given(st.integers(0, 2**127))
def test_u128_to_f32_is_nearest(i):
    result = conv.floatuntisf(i)
    assert abs(Fraction(result) - i) <= _f32_half_ulp(result)


@given(st.integers(1, I64_MAX))
def test_signed_to_f32_is_symmetric(i):
    assert conv.floatdisf(-i) == -conv.floatdisf(i)
    assert conv.floattisf(-i) == -conv.floattisf(i)


@pytest.mark.parametrize(
    "func, bad",
    [
        (conv.u32_to_f32_bits, -1),
        (conv.u32_to_f32_bits, 1 << 32),
        (conv.u64_to_f64_bits, 1 << 64),
        (conv.u128_to_f32_bits, 1 << 128),
        (conv.floatsisf, 1 << 31),
        (conv.floatsidf, -(1 << 31) - 1),
        (conv.floatdidf, 1 << 63),
        (conv.floattisf, 1 << 127),
    ],
)
def test_out_of_range_integers_raise(func, bad):
    with pytest.raises(ValueError):
        func(bad)


@given(st.floats(min_value=-(2.0**31), max_value=2.0**31, exclude_max=True))
def test_fixdfsi_truncates(f):
    assert conv.fixdfsi(f) == int(f)


@given(st.floats(min_value=-(2.0**63), max_value=2.0**63, exclude_max=True))
def test_fixdfdi_truncates(f):
    assert conv.fixdfdi(f) == int(f)


@given(st.floats(min_value=-(2.0**127), max_value=2.0**127, exclude_max=True))
def test_fixdfti_truncates(f):
    assert conv.fixdfti(f) == int(f)


@given(st.floats(min_value=-(2.0**31), max_value=2.0**31, exclude_max=True, width=32))
def test_fixsfsi_truncates(f):
    assert conv.fixsfsi(f) == int(f)


@given(st.floats(min_value=-(2.0**63), max_value=2.0**63, exclude_max=True, width=32))
def test_fixsfdi_truncates(f):
    assert conv.fixsfdi(f) == int(f)


@given(st.floats(min_value=-(2.0**127), max_value=2.0**127, exclude_max=True, width=32))
def test_fixsfti_truncates(f):
    assert conv.fixsfti(f) == int(f)


@given(st.floats(min_value=0.0, max_value=2.0**32, exclude_max=True))
def test_fixunsdfsi_truncates(f):
    assert conv.fixunsdfsi(f) == int(f)


@given(st.floats(min_value=0.0, max_value=2.0**64, exclude_max=True))
def test_fixunsdfdi_truncates(f):
    assert conv.fixunsdfdi(f) == int(f)


@given(st.floats(min_value=0.0, max_value=2.0**128, exclude_max=True))
def test_fixunsdfti_truncates(f):
    assert conv.fixunsdfti(f) == int(f)


@given(st.floats(min_value=0.0, max_value=2.0**32, exclude_max=True, width=32))
def test_fixunssfsi_truncates(f):
    assert conv.fixunssfsi(f) == int(f)


@given(st.floats(min_value=0.0, max_value=2.0**64, exclude_max=True, width=32))
def test_fixunssfdi_truncates(f):
    assert conv.fixunssfdi(f) == int(f)


@given(st.floats(min_value=0.0, width=32, allow_nan=False, allow_infinity=False))
def test_fixunssfti_truncates(f):
    assert conv.fixunssfti(f) == int(f)


@pytest.mark.parametrize(
    "func, limit",
    [
        (conv.fixunssfsi, U32_MAX),
        (conv.fixunssfdi, U64_MAX),
        (conv.fixunssfti, U128_MAX),
        (conv.fixunsdfsi, U32_MAX),
        (conv.fixunsdfdi, U64_MAX),
        (conv.fixunsdfti, U128_MAX),
    ],
)
def test_unsigned_saturation_and_negatives(func, limit):
    assert func(math.inf) == limit
    assert func(-1.0) == 0
    assert func(-math.inf) == 0
    assert func(math.nan) == 0
    assert func(0.5) == 0


@pytest.mark.parametrize(
    "func, low, high",
    [
        (conv.fixsfsi, I32_MIN, I32_MAX),
        (conv.fixsfdi, I64_MIN, I64_MAX),
        (conv.fixsfti, I128_MIN, I128_MAX),
        (conv.fixdfsi, I32_MIN, I32_MAX),
        (conv.fixdfdi, I64_MIN, I64_MAX),
        (conv.fixdfti, I128_MIN, I128_MAX),
    ],
)
def test_signed_saturation(func, low, high):
    assert func(math.inf) == high
    assert func(-math.inf) == low
    assert func(math.nan) == 0
    assert func(-0.75) == 0


def test_large_finite_values_saturate():
    assert conv.fixdfsi(1e20) == I32_MAX
    assert conv.fixdfsi(-1e20) == I32_MIN
    assert conv.fixunsdfsi(1e20) == U32_MAX
    assert conv.fixsfti(F32_MAX) == I128_MAX
    assert conv.fixsfti(-F32_MAX) == I128_MIN
    assert conv.fixunssfti(F32_MAX) == int(F32_MAX)


def test_single_precision_inputs_are_rounded_first():
    # 2**24 + 1 is not a binary32 value; it rounds to 2**24 before conversion.
    assert conv.fixsfsi(float(2**24 + 1)) == 2**24
    assert conv.fixdfsi(float(2**24 + 1)) == 2**24 + 1