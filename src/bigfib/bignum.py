# src/bigfib/bignum.py
"""
Fixed-capacity multi-limb integers.

A LimbVector stores an unsigned integer as `capacity` 32-bit limbs, least
significant limb first. The capacity never changes after construction;
anything that does not fit is truncated by the arithmetic in `arith`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bigfib.utility import InvalidArgumentError, OutOfMemoryError, SizeMismatchError, typename

LIMB_BITS = 32
LIMB_MASK = 0xFFFFFFFF


@dataclass(eq=False)
class LimbVector:
    capacity: int
    limbs: list[int] = field(repr=False)
    sign: int = 0  # reserved, not interpreted by the arithmetic

    def __post_init__(self) -> None:
        if len(self.limbs) != self.capacity:
            raise SizeMismatchError(
                f"limb list has {len(self.limbs)} entries, capacity is {self.capacity}"
            )

    def __len__(self) -> int:
        return self.capacity

    def __getitem__(self, i: int) -> int:
        return self.limbs[i]

    def __setitem__(self, i: int, value: int) -> None:
        self.limbs[i] = value & LIMB_MASK

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LimbVector):
            return NotImplemented
        return self.capacity == other.capacity and self.limbs == other.limbs

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"LimbVector(capacity={self.capacity}, value=0x{self.to_int():X})"

    def zero(self) -> None:
        self.limbs[:] = [0] * self.capacity

    def is_zero(self) -> bool:
        return not any(self.limbs)

    def to_int(self) -> int:
        """Numeric value as a Python int (unsigned)."""
        v = 0
        for limb in reversed(self.limbs):
            v = (v << LIMB_BITS) | limb
        return v

    @classmethod
    def from_int(cls, value: int, capacity: int) -> LimbVector:
        """Build a vector holding `value`, truncated to `capacity` limbs."""
        if not isinstance(value, int) or value < 0:
            raise InvalidArgumentError(f"value must be a non-negative int, got {value!r}")
        v = create(capacity)
        for i in range(capacity):
            v.limbs[i] = value & LIMB_MASK
            value >>= LIMB_BITS
        return v


def create(capacity: int) -> LimbVector:
    """New all-zero vector of `capacity` limbs."""
    if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity <= 0:
        raise InvalidArgumentError(f"capacity must be a positive int, got {capacity!r}")
    try:
        limbs = [0] * capacity
    except (MemoryError, OverflowError) as e:
        raise OutOfMemoryError(f"cannot allocate {capacity} limbs") from e
    return LimbVector(capacity=capacity, limbs=limbs)


def copy(dst: LimbVector | None, src: LimbVector | None) -> None:
    """
    Copy src into dst (limbs and sign).

    dst may be wider than src; its extra high limbs are cleared so that both
    hold the same value afterwards.
    """
    if dst is None or src is None:
        raise InvalidArgumentError("copy needs both a destination and a source")
    if not isinstance(dst, LimbVector) or not isinstance(src, LimbVector):
        raise InvalidArgumentError(
            f"copy operands must be LimbVector, got {typename(dst)} and {typename(src)}"
        )
    if dst.capacity < src.capacity:
        raise SizeMismatchError(
            f"destination capacity {dst.capacity} is smaller than source capacity {src.capacity}"
        )
    if dst is src:
        return
    dst.limbs[:src.capacity] = src.limbs
    if dst.capacity > src.capacity:
        dst.limbs[src.capacity:] = [0] * (dst.capacity - src.capacity)
    dst.sign = src.sign


def clone(src: LimbVector) -> LimbVector:
    """Independent copy of `src` with the same capacity."""
    if src is None:
        raise InvalidArgumentError("clone needs a source")
    out = create(src.capacity)
    copy(out, src)
    return out
