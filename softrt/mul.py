"""Soft-float multiplication with round-to-nearest-even."""

from __future__ import annotations

from .formats import F32, F64, FloatFormat

__all__ = ["mul_bits", "mulsf3", "muldf3"]


def mul_bits(fmt: FloatFormat, a: int, b: int) -> int:
    """Multiply two bit patterns of format ``fmt`` and return the result's bits."""
    mask = fmt.int_mask
    bits = fmt.bits
    significand_bits = fmt.significand_bits
    max_exponent = fmt.exponent_max
    implicit_bit = fmt.implicit_bit
    significand_mask = fmt.significand_mask
    sign_bit = fmt.sign_mask
    abs_mask = fmt.abs_mask
    inf_rep = fmt.exponent_mask
    quiet_bit = implicit_bit >> 1
    qnan_rep = inf_rep | quiet_bit

    a_exponent = (a >> significand_bits) & max_exponent
    b_exponent = (b >> significand_bits) & max_exponent
    product_sign = (a ^ b) & sign_bit

    a_significand = a & significand_mask
    b_significand = b & significand_mask
    scale = 0

    # Zero, subnormal, infinity or NaN on either side.
    if not 0 < a_exponent < max_exponent or not 0 < b_exponent < max_exponent:
        a_abs = a & abs_mask
        b_abs = b & abs_mask

        if a_abs > inf_rep:
            return a | quiet_bit
        if b_abs > inf_rep:
            return b | quiet_bit
        if a_abs == inf_rep:
            return a_abs | product_sign if b_abs else qnan_rep
        if b_abs == inf_rep:
            return b_abs | product_sign if a_abs else qnan_rep
        if a_abs == 0 or b_abs == 0:
            return product_sign

        if a_abs < implicit_bit:
            exponent, a_significand = fmt.normalize(a_significand)
            scale += exponent
        if b_abs < implicit_bit:
            exponent, b_significand = fmt.normalize(b_significand)
            scale += exponent

    a_significand |= implicit_bit
    b_significand |= implicit_bit

    # Left-align one operand so the product's leading bit sits at or just
    # below the implicit bit of the high half.
    product = a_significand * (b_significand << fmt.exponent_bits)
    product_low = product & mask
    product_high = product >> bits

    product_exponent = a_exponent + b_exponent + scale - fmt.exponent_bias

    if product_high & implicit_bit:
        product_exponent += 1
    else:
        product_high = ((product_high << 1) | (product_low >> (bits - 1))) & mask
        product_low = (product_low << 1) & mask

    if product_exponent >= max_exponent:
        return inf_rep | product_sign

    if product_exponent <= 0:
        shift = 1 - product_exponent
        if shift >= bits:
            return product_sign
        # The bits shifted out of the low half are folded back in as sticky.
        sticky = (product_low << (bits - shift)) & mask
        product_low = (
            ((product_high << (bits - shift)) & mask)
            | (product_low >> shift)
            | sticky
        )
        product_high >>= shift
    else:
        product_high &= significand_mask
        product_high |= product_exponent << significand_bits

    product_high |= product_sign

    if product_low > sign_bit:
        product_high += 1
    if product_low == sign_bit:
        product_high += product_high & 1

    return product_high & mask


def mulsf3(a: float, b: float) -> float:
    """Single-precision ``a * b``."""
    return F32.from_repr(mul_bits(F32, F32.repr(a), F32.repr(b)))


def muldf3(a: float, b: float) -> float:
    """Double-precision ``a * b``."""
    return F64.from_repr(mul_bits(F64, F64.repr(a), F64.repr(b)))