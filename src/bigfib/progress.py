# src/bigfib/progress.py
from __future__ import annotations

import sys
import time

THROTTLE = 0.05
BAR_LEN = 24


class Progress:
    """One-line progress bar with rate and ETA, drawn on stdout."""

    def __init__(self, total: int, *, enabled: bool = True):
        self.total = max(1, int(total))
        self.enabled = enabled
        self.start = time.perf_counter()
        self.last_draw = 0.0
        self.spin = "|/-\\"
        self.i = 0

    def __enter__(self) -> Progress:
        return self

    def __exit__(self, *exc) -> None:
        self.done()

    def _eta(self, done: int, elapsed: float) -> str:
        if done <= 0:
            return "--"
        remaining = elapsed / done * (self.total - done)
        return f"{remaining:5.1f}s"

    def update(self, done: int, label: str = "") -> None:
        if not self.enabled:
            return
        now = time.perf_counter()
        if now - self.last_draw < THROTTLE and done < self.total:
            return
        self.last_draw = now
        self.i = (self.i + 1) % len(self.spin)
        frac = min(max(done / self.total, 0.0), 1.0)
        fill = int(frac * BAR_LEN)
        bar = "#" * fill + "-" * (BAR_LEN - fill)
        elapsed = now - self.start
        rate = done / elapsed if elapsed > 0 else 0.0
        sys.stdout.write(
            f"\r[{self.spin[self.i]}] [{bar}] {int(frac * 100):3d}%  "
            f"{rate:8.1f}/s  eta {self._eta(done, elapsed)}  {label[:24]}"
        )
        sys.stdout.flush()

    def done(self) -> None:
        if not self.enabled:
            return
        sys.stdout.write("\r" + " " * 80 + "\r")
        sys.stdout.flush()
