# src/bigfib/fmt.py
from __future__ import annotations

import re

from colorama import Fore, Style

from bigfib.bignum import LimbVector
from bigfib.runtime import CFG

HEX_DIGITS_PER_LIMB = 8

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def to_hex(v: LimbVector) -> str:
    """
    Fixed-width rendering: every limb as 8 uppercase hex digits, most
    significant limb first. Length is always 8 * capacity.
    """
    return "".join(f"{limb:08X}" for limb in reversed(v.limbs))


def trim_hex(s: str) -> str:
    """Drop leading zero digits (display only); keeps at least one digit."""
    return s.lstrip("0") or "0"


def abbr_hex(s: str, head: int = 16, tail: int = 16, threshold: int = 48, ellipsis: str = "…") -> str:
    """Abbreviate a long hex string as first<head>…last<tail>."""
    if len(s) <= threshold or head + tail >= len(s):
        return s
    return f"{s[:head]}{ellipsis}{s[-tail:]}"


def format_result(hex_text: str, *, abbreviate: bool | None = None) -> str:
    """Hex result for the screen: leading zeros trimmed, optionally abbreviated."""
    if abbreviate is None:
        abbreviate = bool(CFG("DISPLAY.ABBREVIATE", False))
    s = trim_hex(hex_text)
    if abbreviate:
        s = abbr_hex(
            s,
            int(CFG("DISPLAY.ABBR_HEAD", 16)),
            int(CFG("DISPLAY.ABBR_TAIL", 16)),
            int(CFG("DISPLAY.ABBR_THRESHOLD", 48)),
        )
    return f"0x{s}"


def format_elapsed(ns: int) -> str:
    """Human-readable elapsed time, e.g. '1.234 ms (1234000 ns)'."""
    if ns >= 1_000_000_000:
        human = f"{ns / 1e9:.3f} s"
    elif ns >= 1_000_000:
        human = f"{ns / 1e6:.3f} ms"
    elif ns >= 1_000:
        human = f"{ns / 1e3:.3f} µs"
    else:
        human = f"{ns} ns"
    return f"{human} ({ns} ns)"


def colour_label(label: str, ok: bool = True) -> str:
    colour = Fore.GREEN if ok else Fore.RED
    return f"{colour}{Style.BRIGHT}{label}{Style.RESET_ALL}"


def strip_ansi(s: str) -> str:
    return ANSI_RE.sub("", s)
