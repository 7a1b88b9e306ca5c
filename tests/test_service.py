# tests/test_service.py
from __future__ import annotations

import threading

import pytest

import bigfib.service as service_mod
from bigfib.fibonacci import Algorithm, fib_fast_doubling, fib_iteration
from bigfib.fmt import to_hex
from bigfib.runtime import APPLY
from bigfib.service import FibService
from bigfib.utility import InvalidArgumentError

CAP = 4


@pytest.fixture
def svc():
    return FibService(capacity=CAP)


def test_defaults_come_from_runtime_settings():
    APPLY({"ENGINE": {"CAPACITY": 3, "ALGORITHM": "iteration"}})
    s = FibService()
    assert s.capacity == 3
    assert s.algorithm() == "iteration"


def test_builtin_defaults():
    s = FibService()
    assert s.capacity == 500
    assert s.algorithm() == "fast-doubling"


@pytest.mark.parametrize("capacity", [0, -2, "8"])
def test_bad_capacity(capacity):
    with pytest.raises(InvalidArgumentError):
        FibService(capacity=capacity)


def test_result_before_any_index_is_f0(svc):
    assert svc.result() == "0" * (8 * CAP)
    assert svc.index() == 0
    assert svc.elapsed_ns() >= 0


def test_set_index_publishes_result(svc):
    assert svc.set_index("50\n") == 50
    assert svc.index() == 50
    assert svc.result() == to_hex(fib_fast_doubling(50, CAP))
    assert isinstance(svc.elapsed_ns(), int)


@pytest.mark.parametrize("text", ["", "-5", "ten", "3.0"])
def test_invalid_index_keeps_previous_state(svc, text):
    svc.set_index("20")
    before = svc.snapshot()
    with pytest.raises(InvalidArgumentError):
        svc.set_index(text)
    assert svc.snapshot() == before
    assert int(svc.result(), 16) == 6765


def test_failed_computation_is_not_published(svc, monkeypatch):
    svc.set_index("10")

    def boom(k, algorithm, capacity):
        raise MemoryError("simulated")

    monkeypatch.setattr(service_mod, "compute", boom)
    with pytest.raises(MemoryError):
        svc.set_index("30")
    assert svc.index() == 10
    assert int(svc.result(), 16) == 55


def test_select_algorithm(svc):
    assert svc.select_algorithm("iteration") is Algorithm.ITERATION
    assert svc.algorithm() == "iteration"
    svc.set_index("60")
    assert svc.snapshot().algorithm is Algorithm.ITERATION
    assert svc.result() == to_hex(fib_iteration(60, CAP))


@pytest.mark.parametrize("name", ["bogus", "", "FAST", "recursive"])
def test_unknown_algorithm_falls_back_to_fast_doubling(svc, name):
    svc.select_algorithm("iteration")
    assert svc.select_algorithm(name) is Algorithm.FAST_DOUBLING
    assert svc.algorithm() == "fast-doubling"
    svc.set_index("77")
    assert svc.snapshot().algorithm is Algorithm.FAST_DOUBLING
    assert svc.result() == to_hex(fib_fast_doubling(77, CAP))


# ---------- attribute interface -----------------------------------------------


def test_attribute_round_trip(svc):
    assert svc.write_attribute("input", "255\n") == 4
    assert svc.read_attribute("input") == "FF\n"
    out = svc.read_attribute("output")
    assert out.endswith("\n") and len(out) == 8 * CAP + 1
    assert int(svc.read_attribute("time")) >= 0
    svc.write_attribute("algorithm", "iteration\n")
    assert svc.read_attribute("algorithm") == "iteration\n"


@pytest.mark.parametrize("name", ["output", "time"])
def test_read_only_attributes(svc, name):
    with pytest.raises(InvalidArgumentError):
        svc.write_attribute(name, "1")


def test_unknown_attribute(svc):
    with pytest.raises(InvalidArgumentError):
        svc.read_attribute("nope")
    with pytest.raises(InvalidArgumentError):
        svc.write_attribute("nope", "1")


# ---------- concurrency -------------------------------------------------------


def test_concurrent_writers_and_readers_see_consistent_state():
    s = FibService(capacity=CAP)
    expected = {k: to_hex(fib_fast_doubling(k, CAP)) for k in range(0, 120)}
    errors: list[str] = []

    def writer(start: int):
        for k in range(start, 120, 4):
            s.set_index(str(k))

    def reader():
        for _ in range(200):
            st = s.snapshot()
            if st.result != expected[st.index]:
                errors.append(f"index {st.index} published {st.result}")

    threads = [threading.Thread(target=writer, args=(i,)) for i in range(4)]
    threads += [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert s.result() == expected[s.index()]
