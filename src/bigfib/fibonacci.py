# src/bigfib/fibonacci.py
"""
Fibonacci numbers on fixed-capacity LimbVectors.

Two algorithms produce the same value modulo 2**(32 * capacity):

  fast-doubling  one doubling step per bit of k, MSB first, using
                 F(2n)   = F(n) * (2*F(n+1) - F(n))
                 F(2n+1) = F(n)**2 + F(n+1)**2
  iteration      F(i) = F(i-1) + F(i-2), used as a cross-check

Each call allocates its own working vectors; nothing is shared across calls.
"""

from __future__ import annotations

import math
from enum import Enum

from bigfib import arith
from bigfib.bignum import LIMB_BITS, LimbVector, copy, create
from bigfib.utility import InvalidArgumentError

# log2 of the golden ratio; F(k) ~ phi**k / sqrt(5)
_LOG2_PHI = math.log2((1 + math.sqrt(5)) / 2)


class Algorithm(str, Enum):
    FAST_DOUBLING = "fast-doubling"
    ITERATION = "iteration"

    @classmethod
    def parse(cls, name: str | Algorithm | None) -> Algorithm:
        """Resolve an algorithm name; anything unrecognised means fast-doubling."""
        if isinstance(name, Algorithm):
            return name
        key = str(name or "").strip().lower()
        for algo in cls:
            if algo.value == key:
                return algo
        return cls.FAST_DOUBLING

    @classmethod
    def names(cls) -> list[str]:
        return [a.value for a in cls]


def _check_index(k: int) -> None:
    if not isinstance(k, int) or isinstance(k, bool) or k < 0:
        raise InvalidArgumentError(f"Invalid input: index must be a non-negative int, got {k!r}")


def limbs_needed(k: int) -> int:
    """Smallest capacity that holds F(k) without truncation."""
    _check_index(k)
    if k < 2:
        return 1
    # bit length of F(k) is below k*log2(phi) + 1; one spare limb covers rounding
    bits = int(k * _LOG2_PHI) + 1
    return bits // LIMB_BITS + 1


def fib_fast_doubling(k: int, capacity: int) -> LimbVector:
    """F(k) by fast doubling, truncated to `capacity` limbs."""
    _check_index(k)
    a = create(capacity)
    if k == 0:
        return a
    if k == 1:
        a.limbs[0] = 1
        return a

    b = create(capacity)
    c = create(capacity)
    d = create(capacity)
    t1 = create(capacity)
    t2 = create(capacity)

    b.limbs[0] = 1  # (a, b) = (F(0), F(1))

    for j in range(k.bit_length() - 1, -1, -1):
        copy(t1, b)
        arith.left_shift(t1, 1)       # t1 = 2 * F(n+1)
        arith.subtract(t1, t1, a)     # t1 = 2 * F(n+1) - F(n)
        arith.multiply(c, a, t1)      # c  = F(2n)

        arith.multiply(t1, a, a)
        arith.multiply(t2, b, b)
        arith.add(d, t1, t2)          # d  = F(2n+1)

        if (k >> j) & 1:
            copy(a, d)
            arith.add(b, c, d)
        else:
            copy(a, c)
            copy(b, d)

    return a


def fib_iteration(k: int, capacity: int) -> LimbVector:
    """F(k) by the linear recurrence, truncated to `capacity` limbs."""
    _check_index(k)
    fk = create(capacity)
    if k < 2:
        fk.limbs[0] = k
        return fk

    fk1 = create(capacity)  # F(i-1)
    fk2 = create(capacity)  # F(i-2)
    fk1.limbs[0] = 1

    for _ in range(2, k + 1):
        arith.add(fk, fk1, fk2)
        copy(fk2, fk1)
        copy(fk1, fk)

    return fk


def compute(k: int, algorithm: Algorithm | str, capacity: int) -> LimbVector:
    """Single dispatch point over the closed set of algorithms."""
    algo = Algorithm.parse(algorithm)
    if algo is Algorithm.ITERATION:
        return fib_iteration(k, capacity)
    return fib_fast_doubling(k, capacity)
