# src/bigfib/bench.py
"""
Benchmark client: drive a FibService over a range of indices.

For every k the index is written, the result is read while the wall time of
the read is measured, and the engine's own elapsed time is read back. The
time attribute is used as text, exactly as an external client would see it.
"""

from __future__ import annotations

import csv
import time
from collections.abc import Iterator
from pathlib import Path
from typing import NamedTuple

from bigfib.progress import Progress
from bigfib.service import FibService
from bigfib.utility import UserInputError

CSV_HEADER = ("k", "engine_ns", "read_ns")


class BenchRow(NamedTuple):
    k: int
    engine_ns: int
    read_ns: int


def run_bench(service: FibService, lower: int, upper: int, *, progress: bool = False) -> Iterator[BenchRow]:
    """Yield one BenchRow per index in [lower, upper]."""
    if lower < 0 or upper < lower:
        raise UserInputError(f"bad bench range [{lower}, {upper}]")

    with Progress(upper - lower + 1, enabled=progress) as bar:
        for k in range(lower, upper + 1):
            service.write_attribute("input", f"{k}\n")
            t1 = time.perf_counter_ns()
            service.read_attribute("output")
            t2 = time.perf_counter_ns()
            engine_ns = int(service.read_attribute("time"))
            bar.update(k - lower + 1, f"k={k}")
            yield BenchRow(k=k, engine_ns=engine_ns, read_ns=t2 - t1)


def write_csv(rows: Iterator[BenchRow], path: str | Path) -> int:
    """Write rows to `path` (parent folders created); returns the row count."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    n = 0
    with p.open("w", encoding="utf-8", newline="") as fh:
        w = csv.writer(fh)
        w.writerow(CSV_HEADER)
        for row in rows:
            w.writerow(row)
            n += 1
    return n
