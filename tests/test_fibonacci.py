# tests/test_fibonacci.py
"""
Fibonacci engine: known values, agreement of both algorithms and the
truncation contract. sympy.fibonacci is the independent reference.

Run: pytest -v
"""

from __future__ import annotations

import pytest
from sympy import fibonacci

from bigfib.fibonacci import Algorithm, compute, fib_fast_doubling, fib_iteration, limbs_needed
from bigfib.fmt import to_hex
from bigfib.utility import InvalidArgumentError

CAP = 8  # 256 bits: holds F(0) .. F(370)
K_MAX = 370

KNOWN = [
    (0, 0),
    (1, 1),
    (2, 1),
    (3, 2),
    (10, 55),
    (20, 6765),
    (50, 12586269025),
    (93, 12200160415121876738),
    (94, 19740274219868223167),
]

# ---------- known values ------------------------------------------------------


@pytest.mark.parametrize("algo", [fib_fast_doubling, fib_iteration], ids=["fast-doubling", "iteration"])
@pytest.mark.parametrize("k,expected", KNOWN, ids=[f"F({k})" for k, _ in KNOWN])
def test_known_values(algo, k, expected):
    v = algo(k, CAP)
    assert v.to_int() == expected
    assert to_hex(v) == f"{expected:0{8 * CAP}X}"


def test_f50_rendering():
    assert to_hex(fib_fast_doubling(50, 4)) == "00000000" "00000000" "00000002" "EE333961"


# ---------- algorithm agreement -----------------------------------------------


def test_algorithms_agree_up_to_k_max():
    for k in range(K_MAX + 1):
        assert to_hex(fib_fast_doubling(k, CAP)) == to_hex(fib_iteration(k, CAP)), f"k={k}"


@pytest.mark.parametrize("k", [100, 255, 256, 257, 1000, 4095])
def test_fast_doubling_matches_reference(k):
    cap = limbs_needed(k)
    assert fib_fast_doubling(k, cap).to_int() == int(fibonacci(k))


# ---------- truncation --------------------------------------------------------


@pytest.mark.parametrize("cap", [1, 2, 3])
@pytest.mark.parametrize("k", [48, 100, 187, 500])
def test_truncation_is_reduction_mod_capacity(k, cap):
    expected = int(fibonacci(k)) % (1 << (32 * cap))
    fd = fib_fast_doubling(k, cap)
    it = fib_iteration(k, cap)
    assert fd.to_int() == expected
    assert it.to_int() == expected
    assert len(to_hex(fd)) == 8 * cap


def test_truncated_result_is_reproducible():
    assert to_hex(fib_fast_doubling(300, 2)) == to_hex(fib_fast_doubling(300, 2))


# ---------- sizing ------------------------------------------------------------


@pytest.mark.parametrize("k", [0, 1, 2, 46, 47, 93, 94, 370, 371, 1000, 23000])
def test_limbs_needed_is_sufficient(k):
    cap = limbs_needed(k)
    assert int(fibonacci(k)).bit_length() <= 32 * cap
    # never more than one spare limb
    assert 32 * (cap - 2) < max(int(fibonacci(k)).bit_length(), 1)


# ---------- dispatch ----------------------------------------------------------


def test_algorithm_parse_and_fallback():
    assert Algorithm.parse("iteration") is Algorithm.ITERATION
    assert Algorithm.parse(" Fast-Doubling ") is Algorithm.FAST_DOUBLING
    assert Algorithm.parse("bogus") is Algorithm.FAST_DOUBLING
    assert Algorithm.parse(None) is Algorithm.FAST_DOUBLING
    assert Algorithm.names() == ["fast-doubling", "iteration"]


@pytest.mark.parametrize("name", ["fast-doubling", "iteration", "unknown"])
def test_compute_dispatch(name):
    assert compute(20, name, 2).to_int() == 6765


@pytest.mark.parametrize("k", [-1, 2.5, "10", True])
def test_bad_index(k):
    with pytest.raises(InvalidArgumentError):
        fib_fast_doubling(k, 2)
    with pytest.raises(InvalidArgumentError):
        fib_iteration(k, 2)
