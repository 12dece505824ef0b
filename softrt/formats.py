"""Bit-level description of the IEEE-754 binary32 and binary64 formats."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

__all__ = ["FloatFormat", "F32", "F64"]


@dataclass(frozen=True)
class FloatFormat:
    """An IEEE-754 binary format described by its width and significand width.

    Values are handled either as Python floats or as their raw bit patterns,
    which are non-negative integers of ``bits`` width.
    """

    bits: int
    significand_bits: int
    struct_code: str

    @property
    def int_mask(self) -> int:
        """Mask covering every bit of the representation."""
        return (1 << self.bits) - 1

    @property
    def exponent_bits(self) -> int:
        return self.bits - self.significand_bits - 1

    @property
    def exponent_max(self) -> int:
        return (1 << self.exponent_bits) - 1

    @property
    def exponent_bias(self) -> int:
        return self.exponent_max >> 1

    @property
    def sign_mask(self) -> int:
        return 1 << (self.bits - 1)

    @property
    def significand_mask(self) -> int:
        return (1 << self.significand_bits) - 1

    @property
    def implicit_bit(self) -> int:
        return 1 << self.significand_bits

    @property
    def exponent_mask(self) -> int:
        return self.int_mask & ~(self.sign_mask | self.significand_mask)

    @property
    def abs_mask(self) -> int:
        return self.sign_mask - 1

    def _check(self, bits: int) -> int:
        if not 0 <= bits <= self.int_mask:
            raise ValueError(f"{bits:#x} is not a {self.bits}-bit pattern")
        return bits

    def repr(self, value: float) -> int:
        """Return the bit pattern of ``value`` in this format.

        Raises OverflowError if a finite ``value`` does not fit the format.
        """
        packed = struct.pack("<" + self.struct_code, value)
        return int.from_bytes(packed, "little")

    def from_repr(self, bits: int) -> float:
        """Return the float whose bit pattern in this format is ``bits``."""
        raw = self._check(bits).to_bytes(self.bits // 8, "little")
        return struct.unpack("<" + self.struct_code, raw)[0]

    def signed_repr(self, bits: int) -> int:
        """Reinterpret a bit pattern as a two's-complement signed integer."""
        self._check(bits)
        return bits - (1 << self.bits) if bits & self.sign_mask else bits

    def eq_repr(self, a: float, b: float) -> bool:
        """Compare two floats bitwise, treating any two NaNs as equal."""
        if math.isnan(a) and math.isnan(b):
            return True
        return self.repr(a) == self.repr(b)

    def sign(self, bits: int) -> bool:
        """True when the sign bit is set."""
        return bool(self._check(bits) & self.sign_mask)

    def exp(self, bits: int) -> int:
        """Return the biased exponent field."""
        return (self._check(bits) & self.exponent_mask) >> self.significand_bits

    def frac(self, bits: int) -> int:
        """Return the significand without the implicit bit."""
        return self._check(bits) & self.significand_mask

    def imp_frac(self, bits: int) -> int:
        """Return the significand with the implicit bit set."""
        return self.frac(bits) | self.implicit_bit

    def from_parts(self, sign: bool, exponent: int, significand: int) -> float:
        """Build a float from a sign, a biased exponent and a significand."""
        bits = (
            (int(bool(sign)) << (self.bits - 1))
            | ((exponent << self.significand_bits) & self.exponent_mask)
            | (significand & self.significand_mask)
        )
        return self.from_repr(bits)

    def normalize(self, significand: int) -> tuple[int, int]:
        """Shift a significand so its leading bit lands on the implicit bit.

        Returns ``(exponent, shifted_significand)`` where the exponent is the
        adjustment that the shift implies.
        """
        self._check(significand)
        shift = self.implicit_bit.bit_length() - significand.bit_length()
        return 1 - shift, (significand << shift) & self.int_mask

    def is_subnormal(self, bits: int) -> bool:
        """True when the exponent field is zero (subnormals and zeros)."""
        return (self._check(bits) & self.exponent_mask) == 0


F32 = FloatFormat(bits=32, significand_bits=23, struct_code="f")
F64 = FloatFormat(bits=64, significand_bits=52, struct_code="d")