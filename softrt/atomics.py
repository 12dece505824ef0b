"""Sub-word atomic operations built on a word-sized compare-and-swap.

Memory is modelled by :class:`WordMemory`, a store of 32-bit words whose only
atomic primitive is compare-and-exchange of a whole aligned word. Byte and
half-word operations are carried out on the word that contains them, retrying
until the exchange succeeds.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

__all__ = [
    "WordMemory",
    "AtomicOp",
    "align_address",
    "shift_mask",
    "extract_aligned",
    "insert_aligned",
    "atomic_rmw",
    "atomic_cmpxchg",
    "sync_fetch_and",
    "sync_op_and_fetch",
    "sync_lock_test_and_set",
    "sync_val_compare_and_swap",
]

_WORD_MASK = 0xFFFF_FFFF
_LANE_MASKS = {1: 0xFF, 2: 0xFFFF, 4: 0xFFFF_FFFF}


def _lane_mask(size: int) -> int:
    try:
        return _LANE_MASKS[size]
    except KeyError:
        raise ValueError(f"unsupported operand size {size}; expected 1, 2 or 4") from None


def _to_signed(value: int, size: int) -> int:
    top = 1 << (8 * size - 1)
    return value - (top << 1) if value & top else value


def _check_operand(value: int, size: int, signed: bool) -> int:
    bits = 8 * size
    low, high = (-(1 << (bits - 1)), (1 << (bits - 1)) - 1) if signed else (0, (1 << bits) - 1)
    if not low <= value <= high:
        kind = "signed" if signed else "unsigned"
        raise ValueError(f"{value} does not fit a {bits}-bit {kind} operand")
    return value & _lane_mask(size)


@dataclass
class WordMemory:
    """Word-addressed memory with an atomic whole-word compare-and-exchange.

    Addresses are byte addresses; words live at multiples of four and read as
    zero until stored. ``big_endian`` sets where bytes sit inside a word.
    """

    big_endian: bool = False
    _words: dict[int, int] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    @staticmethod
    def _word_address(address: int) -> int:
        if address < 0 or address % 4:
            raise ValueError(f"address {address:#x} is not word aligned")
        return address

    @staticmethod
    def _word_value(value: int) -> int:
        if not 0 <= value <= _WORD_MASK:
            raise ValueError(f"{value:#x} is not a 32-bit word")
        return value

    def load(self, address: int) -> int:
        """Return the word stored at ``address``."""
        return self._words.get(self._word_address(address), 0)

    def store(self, address: int, value: int) -> None:
        """Write the word ``value`` at ``address``."""
        address = self._word_address(address)
        value = self._word_value(value)
        with self._lock:
            self._words[address] = value

    def compare_exchange(self, address: int, old: int, new: int) -> bool:
        """Atomically replace the word ``old`` by ``new``; True on success."""
        address = self._word_address(address)
        new = self._word_value(new)
        with self._lock:
            if self._words.get(address, 0) != old:
                return False
            self._words[address] = new
            return True


class AtomicOp(Enum):
    """Read-modify-write operations on a byte, half-word or word lane."""

    ADD = "add"
    SUB = "sub"
    AND = "and"
    OR = "or"
    XOR = "xor"
    NAND = "nand"
    MAX = "max"
    MIN = "min"
    UMAX = "umax"
    UMIN = "umin"

    @property
    def signed(self) -> bool:
        """True for operations that treat lanes as two's-complement values."""
        return self in (AtomicOp.MAX, AtomicOp.MIN)

    def apply(self, current: int, operand: int, size: int) -> int:
        """Combine two lane values and return the new unsigned lane value."""
        mask = _lane_mask(size)
        a = current & mask
        b = operand & mask
        if self is AtomicOp.ADD:
            result = a + b
        elif self is AtomicOp.SUB:
            result = a - b
        elif self is AtomicOp.AND:
            result = a & b
        elif self is AtomicOp.OR:
            result = a | b
        elif self is AtomicOp.XOR:
            result = a ^ b
        elif self is AtomicOp.NAND:
            result = ~(a & b)
        elif self is AtomicOp.UMAX:
            result = max(a, b)
        elif self is AtomicOp.UMIN:
            result = min(a, b)
        else:
            sa, sb = _to_signed(a, size), _to_signed(b, size)
            result = max(sa, sb) if self is AtomicOp.MAX else min(sa, sb)
        return result & mask


# Operations for which an op-and-fetch (returning the new value) form exists.
_OP_AND_FETCH = frozenset(
    {AtomicOp.ADD, AtomicOp.SUB, AtomicOp.AND, AtomicOp.OR, AtomicOp.XOR, AtomicOp.NAND}
)


def align_address(address: int, size: int) -> int:
    """Return the address of the word that holds a lane of ``size`` bytes."""
    ptr_mask = 3 & (4 - size) if size in _LANE_MASKS else _lane_mask(size)
    return address & ~ptr_mask


def shift_mask(address: int, size: int, big_endian: bool = False) -> tuple[int, int]:
    """Return ``(shift, mask)`` locating a lane inside its aligned word."""
    mask = _lane_mask(size)
    endian_adjust = 4 - size if big_endian else 0
    ptr_mask = 3 & (4 - size)
    shift = ((address & ptr_mask) ^ endian_adjust) * 8
    return shift, mask


def extract_aligned(aligned: int, shift: int, mask: int) -> int:
    """Read a lane out of a word."""
    return (aligned >> shift) & mask


def insert_aligned(aligned: int, val: int, shift: int, mask: int) -> int:
    """Return ``aligned`` with the lane at ``shift`` replaced by ``val``."""
    return ((aligned & ~(mask << shift)) | ((val & mask) << shift)) & _WORD_MASK


def atomic_rmw(
    memory: WordMemory,
    address: int,
    size: int,
    op: Callable[[int], int],
    fetch_new: bool,
) -> int:
    """Atomically replace the lane value ``x`` by ``op(x)``.

    Returns the new lane value when ``fetch_new`` is true, else the old one.
    """
    aligned_address = align_address(address, size)
    shift, mask = shift_mask(address, size, memory.big_endian)
    while True:
        current_word = memory.load(aligned_address)
        current = extract_aligned(current_word, shift, mask)
        new = op(current) & mask
        new_word = insert_aligned(current_word, new, shift, mask)
        if memory.compare_exchange(aligned_address, current_word, new_word):
            return new if fetch_new else current


def atomic_cmpxchg(
    memory: WordMemory, address: int, size: int, oldval: int, newval: int
) -> int:
    """Store ``newval`` if the lane holds ``oldval``; return the value seen."""
    aligned_address = align_address(address, size)
    shift, mask = shift_mask(address, size, memory.big_endian)
    while True:
        current_word = memory.load(aligned_address)
        current = extract_aligned(current_word, shift, mask)
        if current != oldval:
            return current
        new_word = insert_aligned(current_word, newval, shift, mask)
        if memory.compare_exchange(aligned_address, current_word, new_word):
            return oldval


def _run(
    memory: WordMemory, address: int, size: int, op: AtomicOp, value: int, fetch_new: bool
) -> int:
    if not isinstance(op, AtomicOp):
        raise TypeError(f"expected an AtomicOp, got {op!r}")
    operand = _check_operand(value, size, op.signed)
    result = atomic_rmw(
        memory, address, size, lambda current: op.apply(current, operand, size), fetch_new
    )
    return _to_signed(result, size) if op.signed else result


def sync_fetch_and(
    memory: WordMemory, address: int, size: int, op: AtomicOp, value: int
) -> int:
    """Apply ``op`` with ``value`` to a lane and return its previous value."""
    return _run(memory, address, size, op, value, fetch_new=False)


def sync_op_and_fetch(
    memory: WordMemory, address: int, size: int, op: AtomicOp, value: int
) -> int:
    """Apply ``op`` with ``value`` to a lane and return its new value.

    Only the arithmetic and bitwise operations have this form.
    """
    if op not in _OP_AND_FETCH:
        raise ValueError(f"{op!r} has no op-and-fetch form")
    return _run(memory, address, size, op, value, fetch_new=True)


def sync_lock_test_and_set(memory: WordMemory, address: int, size: int, value: int) -> int:
    """Store ``value`` in a lane and return what it held before."""
    operand = _check_operand(value, size, signed=False)
    return atomic_rmw(memory, address, size, lambda _current: operand, fetch_new=False)


def sync_val_compare_and_swap(
    memory: WordMemory, address: int, size: int, oldval: int, newval: int
) -> int:
    """Compare-and-swap a lane; return the value it held before the call."""
    oldval = _check_operand(oldval, size, signed=False)
    newval = _check_operand(newval, size, signed=False)
    return atomic_cmpxchg(memory, address, size, oldval, newval)