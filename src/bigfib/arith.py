# src/bigfib/arith.py
"""
Arithmetic on fixed-capacity LimbVectors.

Every operation writes into an explicit destination. Results wider than the
destination are truncated: carries out of the top limb are dropped, so all
operations behave as arithmetic modulo 2**(32 * capacity).

Aliasing:
  add, subtract  destination may be either source
  multiply       destination may be either source (the product is built in
                 a scratch list and stored at the end)
  left_shift     works in place on its single operand
"""

from __future__ import annotations

from bigfib.bignum import LIMB_BITS, LIMB_MASK, LimbVector
from bigfib.utility import InvalidArgumentError, SizeMismatchError, typename


def _check_same_capacity(op: str, *vectors: LimbVector) -> int:
    for v in vectors:
        if not isinstance(v, LimbVector):
            raise InvalidArgumentError(f"{op}: operand must be LimbVector, got {typename(v)}")
    cap = vectors[0].capacity
    for v in vectors[1:]:
        if v.capacity != cap:
            sizes = ", ".join(str(x.capacity) for x in vectors)
            raise SizeMismatchError(f"{op}: operand capacities differ ({sizes})")
    return cap


def _add_limbs(out: list[int], a: list[int], b: list[int]) -> None:
    """Ripple-carry a + b into out (all the same length); final carry is lost."""
    carry = 0
    for i in range(len(out)):
        tmp = a[i] + b[i] + carry
        carry = 1 if tmp > LIMB_MASK else 0
        out[i] = tmp & LIMB_MASK


def add(s: LimbVector, a: LimbVector, b: LimbVector) -> None:
    """s = a + b (mod 2**(32 * capacity))."""
    _check_same_capacity("add", s, a, b)
    # every limb of s is assigned, so no separate zeroing pass is needed
    _add_limbs(s.limbs, a.limbs, b.limbs)


def twos_complement(b: LimbVector) -> list[int]:
    """Two's complement of b as a fresh limb list; b itself is untouched."""
    neg = [0] * b.capacity
    carry = 1
    for i, limb in enumerate(b.limbs):
        tmp = (~limb & LIMB_MASK) + carry
        carry = 1 if tmp > LIMB_MASK else 0
        neg[i] = tmp & LIMB_MASK
    return neg


def subtract(d: LimbVector, a: LimbVector, b: LimbVector) -> None:
    """d = a - b, computed as a + (two's complement of b)."""
    _check_same_capacity("subtract", d, a, b)
    neg_b = twos_complement(b)
    _add_limbs(d.limbs, a.limbs, neg_b)


def left_shift(v: LimbVector, shift: int) -> None:
    """
    Shift v left in place by `shift % 32` bits.

    Only shifts inside one limb width are supported: a multiple of 32 is a
    no-op. Bits pushed out of the top limb are lost.
    """
    _check_same_capacity("left_shift", v)
    if not isinstance(shift, int) or shift < 0:
        raise InvalidArgumentError(f"left_shift: shift must be a non-negative int, got {shift!r}")
    shift %= LIMB_BITS
    if not shift:
        return

    limbs = v.limbs
    back = LIMB_BITS - shift
    for i in range(v.capacity - 1, 0, -1):
        limbs[i] = ((limbs[i] << shift) & LIMB_MASK) | (limbs[i - 1] >> back)
    limbs[0] = (limbs[0] << shift) & LIMB_MASK


def _mult_add(acc: list[int], offset: int, x: int) -> None:
    """Accumulate the 64-bit partial product x into acc starting at limb `offset`."""
    carry = 0
    for i in range(offset, len(acc)):
        carry += acc[i] + (x & LIMB_MASK)
        acc[i] = carry & LIMB_MASK
        carry >>= LIMB_BITS
        x >>= LIMB_BITS
        if not x and not carry:
            return
    # ran off the top: remaining carry is truncated


def multiply(p: LimbVector, a: LimbVector, b: LimbVector) -> None:
    """p = a * b (schoolbook, truncated to p's capacity)."""
    cap = _check_same_capacity("multiply", p, a, b)
    acc = [0] * cap
    a_limbs, b_limbs = a.limbs, b.limbs
    for i in range(cap):
        ai = a_limbs[i]
        if not ai:
            continue
        # partial products landing at offset >= cap are truncated anyway
        for j in range(cap - i):
            bj = b_limbs[j]
            if bj:
                _mult_add(acc, i + j, ai * bj)
    p.limbs[:] = acc
