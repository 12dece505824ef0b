import math
import struct

import pytest
from hypothesis import given
from hypothesis import strategies as st

from softrt.formats import F32, F64


def test_format_constants():
    assert F32.exp(F32.repr(1.0)) == 127
    assert F64.exp(F64.repr(1.0)) == 1023
    assert F32.repr(-0.0) == 0x80000000
    assert F32.repr(math.inf) == 0x7F800000
    assert F64.repr(math.inf) == 0x7FF0000000000000
    assert F32.frac(0xFFFFFFFF) == 0x7FFFFF


def test_repr_matches_struct():
    assert F32.repr(1.0) == int.from_bytes(struct.pack("<f", 1.0), "little")
    assert F64.repr(-2.5) == int.from_bytes(struct.pack("<d", -2.5), "little")


@given(st.floats(width=32, allow_nan=False))
def test_f32_round_trip(x):
    assert F32.from_repr(F32.repr(x)) == x


@given(st.floats(allow_nan=False))
def test_f64_round_trip(x):
    assert F64.from_repr(F64.repr(x)) == x


def test_from_repr_rejects_wide_patterns():
    with pytest.raises(ValueError):
        F32.from_repr(1 << 32)
    with pytest.raises(ValueError):
        F64.from_repr(-1)


def test_signed_repr():
    assert F32.signed_repr(F32.sign_mask) == -(2**31)
    assert F32.signed_repr(F32.repr(1.0)) == F32.repr(1.0)
    assert F64.signed_repr(F64.int_mask) == -1


def test_eq_repr():
    assert F64.eq_repr(math.nan, -math.nan)
    assert not F64.eq_repr(0.0, -0.0)
    assert F32.eq_repr(1.5, 1.5)


def test_sign_exp_frac():
    one = F32.repr(1.0)
    assert F32.exp(one) == F32.exponent_bias
    assert F32.frac(one) == 0
    assert F32.imp_frac(one) == F32.implicit_bit
    assert F32.sign(F32.repr(-1.0))
    assert not F32.sign(one)


def test_from_parts():
    assert F32.from_parts(True, F32.exponent_bias, 0) == -1.0
    assert F64.from_parts(False, F64.exponent_max, 0) == math.inf


@given(st.integers(min_value=1, max_value=(1 << 23) - 1))
def test_normalize_subnormal_significand(sig):
    exponent, shifted = F32.normalize(sig)
    assert shifted & F32.implicit_bit
    assert shifted < 2 * F32.implicit_bit
    assert shifted == sig << (1 - exponent)


def test_normalize_already_normal():
    assert F64.normalize(F64.implicit_bit) == (1, F64.implicit_bit)


def test_is_subnormal():
    assert F64.is_subnormal(0)
    assert F64.is_subnormal(1)
    assert not F64.is_subnormal(F64.repr(1.0))