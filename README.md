# softrt

Software implementations of low-level runtime routines: IEEE-754 single
and double precision addition, subtraction, multiplication, division,
comparison and width conversion; integer/float conversions; integer
powers; sub-word atomic operations over a modelled word memory; and
combined divide/modulo and memory fill/copy helpers.

Addition, subtraction, multiplication, division, comparison, widening,
narrowing and the integer/float conversions are computed with integer
operations on raw bit patterns, so their results do not depend on the
host's floating-point unit. The integer-power routines are the exception:
they use host float arithmetic, rounding each step to the target
precision.

## Installation

```
pip install softrt
```

With the test dependencies:

```
pip install "softrt[test]"
```

## Modules

- `softrt.formats`: `FloatFormat` describes a binary floating-point layout
  (bit width, significand width, masks, exponent bias) and converts
  between floats and bit patterns (`repr`, `from_repr`), splits patterns
  into fields (`sign`, `exp`, `frac`, `imp_frac`), builds them
  (`from_parts`) and normalises subnormal significands (`normalize`).
  `F32` and `F64` are the binary32 and binary64 formats. `repr` raises
  `OverflowError` for a finite value that does not fit the format; the
  other methods raise `ValueError` for a pattern wider than the format.
- `softrt.compare`: `compare_bits` returns an `Ordering`
  (`LESS`, `EQUAL`, `GREATER`, `UNORDERED`), and `unordered_bits` detects
  NaNs. `lesf2`, `gesf2`, `eqsf2`, `ltsf2`, `nesf2`, `gtsf2`, `unordsf2`
  and their `df2` counterparts give the integer comparison results
  (unordered reads as greater for the `le`/`eq`/`lt`/`ne` forms and as
  less for the `ge`/`gt` forms). `aeabi_fcmpeq`, `aeabi_dcmplt` and the
  rest return 1 or 0.
- `softrt.extend` / `softrt.trunc`: `extend_bits` and `extendsfdf2`
  widen single to double precision exactly; `trunc_bits` and `truncdfsf2`
  narrow with round-to-nearest-even, producing subnormals, infinities and
  quiet NaNs (keeping the part of the payload that fits).
- `softrt.add`, `softrt.mul`, `softrt.div`: `addsf3`, `adddf3`,
  `subsf3`, `subdf3`, `mulsf3`, `muldf3`, `divsf3`, `divdf3`, plus the
  bit-pattern forms `add_bits`, `mul_bits`, `div32_bits` and
  `div64_bits`. Addition and multiplication round to nearest, ties to
  even, including subnormal results. Division flushes results that would
  be subnormal to a signed zero.
- `softrt.pow`: `powisf2` and `powidf2` raise a float to a 32-bit integer
  power by repeated squaring; a negative power takes the reciprocal at
  the end. An exponent outside the 32-bit range raises `ValueError`.
- `softrt.conv`: integer to float (`floatunsisf`, `floatsidf`,
  `floattisf`, `floatuntidf`, ...; and the bit-pattern forms
  `u32_to_f32_bits` through `u128_to_f64_bits`) rounding to nearest,
  ties to even; and float to integer (`fixsfsi`, `fixunsdfdi`,
  `fixdfti`, ...) truncating toward zero and saturating at the range
  limits, with NaN giving 0 and negative values giving 0 for the
  unsigned forms. An integer outside its stated width raises
  `ValueError`.
- `softrt.atomics`: `WordMemory` is a thread-safe store of 32-bit words
  with `load`, `store` and `compare_exchange`, little- or big-endian.
  `sync_fetch_and`, `sync_op_and_fetch`, `sync_lock_test_and_set` and
  `sync_val_compare_and_swap` act on 1, 2 or 4 byte lanes inside aligned
  words, using an `AtomicOp` (`ADD`, `SUB`, `AND`, `OR`, `XOR`, `NAND`,
  `MAX`, `MIN`, `UMAX`, `UMIN`) and retrying the word exchange until it
  succeeds. `MAX` and `MIN` compare lanes as signed values; only the
  arithmetic and bitwise operations have an op-and-fetch form. The
  lower-level helpers `align_address`, `shift_mask`, `extract_aligned`,
  `insert_aligned`, `atomic_rmw` and `atomic_cmpxchg` are public too.
- `softrt.aeabi`: `uidivmod`, `uldivmod`, `idivmod` and `ldivmod` return
  `(quotient, remainder)` with the signed forms rounding toward zero and
  raise `ZeroDivisionError` on a zero divisor. `memcpy`, `memmove`,
  `memset`, `memclr` and their `4`/`8` variants write in place into a
  writable buffer such as a `bytearray`; note that `memset` takes the
  count before the fill value.

## Example

```python
from softrt.add import addsf3
from softrt.compare import ltdf2
from softrt.conv import fixsfsi
from softrt.atomics import AtomicOp, WordMemory, sync_fetch_and

addsf3(1.5, 2.25)   # 3.75, rounded to single precision
ltdf2(1.0, 2.0)     # -1
fixsfsi(-3.9)       # -3

memory = WordMemory()
sync_fetch_and(memory, 1, 1, AtomicOp.ADD, 5)   # 0; byte 1 now holds 5
memory.load(0)                                  # 0x500
```

## What it does not do

softrt is a library of Python functions only. It has no command-line
tool, does not produce object code or symbols for linking, and does not
touch real memory or hardware: atomic operations act on a `WordMemory`
and memory helpers on Python buffers. Only single and double precision
are provided; there is no half, extended or quadruple precision, and no
complex arithmetic.

## Running the tests

```
pytest
```