"""ARM EABI helper routines: combined division and memory fill/copy.

Division helpers return ``(quotient, remainder)`` tuples. Memory helpers
write into a writable buffer (``bytearray``, ``memoryview`` and the like) in
place; the ``4`` and ``8`` variants promise an aligned destination and work a
word at a time, with the same result as the plain forms.
"""

from __future__ import annotations

__all__ = [
    "uidivmod",
    "uldivmod",
    "idivmod",
    "ldivmod",
    "memcpy",
    "memcpy4",
    "memcpy8",
    "memmove",
    "memmove4",
    "memmove8",
    "memset",
    "memset4",
    "memset8",
    "memclr",
    "memclr4",
    "memclr8",
]


def _check_unsigned(value: int, width: int) -> int:
    if not 0 <= value < (1 << width):
        raise ValueError(f"{value} is out of range for a {width}-bit unsigned integer")
    return value


def _check_signed(value: int, width: int) -> int:
    limit = 1 << (width - 1)
    if not -limit <= value < limit:
        raise ValueError(f"{value} is out of range for a {width}-bit signed integer")
    return value


def _wrap_signed(value: int, width: int) -> int:
    value &= (1 << width) - 1
    return value - (1 << width) if value >> (width - 1) else value


def _unsigned_divmod(a: int, b: int, width: int) -> tuple[int, int]:
    _check_unsigned(a, width)
    _check_unsigned(b, width)
    if b == 0:
        raise ZeroDivisionError("integer division by zero")
    return divmod(a, b)


def _signed_divmod(a: int, b: int, width: int) -> tuple[int, int]:
    _check_signed(a, width)
    _check_signed(b, width)
    if b == 0:
        raise ZeroDivisionError("integer division by zero")
    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient
    # The most negative value divided by -1 wraps, leaving a zero remainder.
    quotient = _wrap_signed(quotient, width)
    remainder = _wrap_signed(a - quotient * b, width)
    return quotient, remainder


def uidivmod(a: int, b: int) -> tuple[int, int]:
    """Unsigned 32-bit quotient and remainder."""
    return _unsigned_divmod(a, b, 32)


def uldivmod(a: int, b: int) -> tuple[int, int]:
    """Unsigned 64-bit quotient and remainder."""
    return _unsigned_divmod(a, b, 64)


def idivmod(a: int, b: int) -> tuple[int, int]:
    """Signed 32-bit quotient and remainder, rounding toward zero."""
    return _signed_divmod(a, b, 32)


def ldivmod(a: int, b: int) -> tuple[int, int]:
    """Signed 64-bit quotient and remainder, rounding toward zero."""
    return _signed_divmod(a, b, 64)


def _dest_view(dest, n: int) -> memoryview:
    view = memoryview(dest).cast("B")
    if view.readonly:
        raise TypeError("destination buffer is read-only")
    if not 0 <= n <= len(view):
        raise ValueError(f"cannot write {n} bytes into a buffer of {len(view)}")
    return view


def _source_bytes(src, n: int) -> bytes:
    view = memoryview(src).cast("B")
    if not 0 <= n <= len(view):
        raise ValueError(f"cannot read {n} bytes from a buffer of {len(view)}")
    # Taking a copy first keeps overlapping regions correct.
    return bytes(view[:n])


def memcpy(dest, src, n: int) -> None:
    """Copy ``n`` bytes from ``src`` to ``dest``."""
    view = _dest_view(dest, n)
    view[:n] = _source_bytes(src, n)


def memcpy4(dest, src, n: int) -> None:
    """Copy ``n`` bytes, whole words first and then the remaining bytes."""
    view = _dest_view(dest, n)
    data = _source_bytes(src, n)
    words = n - n % 4
    view[:words] = data[:words]
    memcpy(view[words:], data[words:], n - words)


def memcpy8(dest, src, n: int) -> None:
    """Copy ``n`` bytes to an 8-byte aligned destination."""
    memcpy4(dest, src, n)


def memmove(dest, src, n: int) -> None:
    """Copy ``n`` bytes; ``src`` and ``dest`` may overlap."""
    view = _dest_view(dest, n)
    view[:n] = _source_bytes(src, n)


def memmove4(dest, src, n: int) -> None:
    """Overlap-safe copy to a 4-byte aligned destination."""
    memmove(dest, src, n)


def memmove8(dest, src, n: int) -> None:
    """Overlap-safe copy to an 8-byte aligned destination."""
    memmove(dest, src, n)


def memset(dest, n: int, c: int) -> None:
    """Fill ``n`` bytes of ``dest`` with the low byte of ``c``.

    The count comes before the fill value, as in the EABI routine.
    """
    _check_signed(c, 32)
    view = _dest_view(dest, n)
    view[:n] = bytes([c & 0xFF]) * n


def memset4(dest, n: int, c: int) -> None:
    """Fill ``n`` bytes, a word at a time, with the low byte of ``c``."""
    _check_signed(c, 32)
    view = _dest_view(dest, n)
    byte = c & 0xFF
    words = n - n % 4
    view[:words] = bytes([byte, byte, byte, byte]) * (words // 4)
    memset(view[words:], n - words, byte)


def memset8(dest, n: int, c: int) -> None:
    """Fill ``n`` bytes of an 8-byte aligned destination."""
    memset4(dest, n, c)


def memclr(dest, n: int) -> None:
    """Zero ``n`` bytes of ``dest``."""
    memset(dest, n, 0)


def memclr4(dest, n: int) -> None:
    """Zero ``n`` bytes of a 4-byte aligned destination."""
    memset4(dest, n, 0)


def memclr8(dest, n: int) -> None:
    """Zero ``n`` bytes of an 8-byte aligned destination."""
    memset4(dest, n, 0)