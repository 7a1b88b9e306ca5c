# src/bigfib/service.py
"""
Attribute-style front end for the Fibonacci engine.

Mirrors a small text interface:

    input      write: decimal index (starts a computation)   read: index in hex
    output     read:  hex rendering of F(index)
    time       read:  nanoseconds spent in the last computation
    algorithm  write: "fast-doubling" | "iteration"           read: active name

One lock guards {accept index -> compute -> publish}. Results are computed
into local buffers and published only after the computation finished, so a
reader never sees a partial or stale-for-the-index result.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass

from bigfib.fibonacci import Algorithm, compute
from bigfib.fmt import to_hex
from bigfib.runtime import CFG, DEFAULT_ALGORITHM, DEFAULT_CAPACITY, debug
from bigfib.utility import InvalidArgumentError, parse_index


@dataclass(frozen=True)
class FibState:
    index: int
    result: str
    elapsed_ns: int
    algorithm: Algorithm


class FibService:
    ATTRIBUTES = ("input", "output", "time", "algorithm")

    def __init__(self, capacity: int | None = None, algorithm: Algorithm | str | None = None):
        if capacity is None:
            capacity = int(CFG("ENGINE.CAPACITY", DEFAULT_CAPACITY))
        if algorithm is None:
            algorithm = CFG("ENGINE.ALGORITHM", DEFAULT_ALGORITHM)
        if not isinstance(capacity, int) or capacity <= 0:
            raise InvalidArgumentError(f"capacity must be a positive int, got {capacity!r}")
        self.capacity = capacity
        self._lock = threading.Lock()
        self._algorithm = Algorithm.parse(algorithm)
        self._index = 0
        self._state: FibState | None = None

    # --- internals (caller holds the lock) ----------------------------------

    def _run(self, k: int) -> FibState:
        algo = self._algorithm
        t0 = time.perf_counter_ns()
        value = compute(k, algo, self.capacity)
        elapsed = time.perf_counter_ns() - t0
        state = FibState(index=k, result=to_hex(value), elapsed_ns=elapsed, algorithm=algo)
        debug(f"{algo.value} k={k} capacity={self.capacity} elapsed={elapsed} ns")
        return state

    def _ensure_state(self) -> FibState:
        if self._state is None:
            self._state = self._run(self._index)
        return self._state

    # --- operations ----------------------------------------------------------

    def set_index(self, text: str) -> int:
        """Accept a decimal index, compute F(index) and publish it."""
        k = parse_index(text)  # raises before anything is touched
        with self._lock:
            state = self._run(k)
            self._index = k
            self._state = state
        return k

    def index(self) -> int:
        with self._lock:
            return self._index

    def result(self) -> str:
        """Hex rendering of F(current index); computes F(0) if nothing was set yet."""
        with self._lock:
            return self._ensure_state().result

    def elapsed_ns(self) -> int:
        with self._lock:
            return self._ensure_state().elapsed_ns

    def snapshot(self) -> FibState:
        """Index, result and elapsed time of one completed computation."""
        with self._lock:
            return self._ensure_state()

    def select_algorithm(self, name: str) -> Algorithm:
        """Switch algorithm; unknown names select fast-doubling."""
        algo = Algorithm.parse(name)
        if algo.value != str(name).strip().lower():
            debug(f"unknown algorithm {name!r}, using {algo.value}")
        with self._lock:
            self._algorithm = algo
        return algo

    def algorithm(self) -> str:
        with self._lock:
            return self._algorithm.value

    # --- text attributes -----------------------------------------------------

    def read_attribute(self, name: str) -> str:
        if name == "input":
            return f"{self.index():X}\n"
        if name == "output":
            return self.result() + "\n"
        if name == "time":
            return f"{self.elapsed_ns()}\n"
        if name == "algorithm":
            return self.algorithm() + "\n"
        raise InvalidArgumentError(f"Invalid input: unknown attribute '{name}'")

    def write_attribute(self, name: str, text: str) -> int:
        """Write text to an attribute; returns the number of characters consumed."""
        if name == "input":
            self.set_index(text)
        elif name == "algorithm":
            self.select_algorithm(text)
        elif name in self.ATTRIBUTES:
            raise InvalidArgumentError(f"Invalid input: attribute '{name}' is read-only")
        else:
            raise InvalidArgumentError(f"Invalid input: unknown attribute '{name}'")
        return len(text)
