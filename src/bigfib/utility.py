# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from typing import Any

_INDEX_RE = re.compile(r"\+?[0-9]+")


class UserInputError(Exception):
    pass


class BignumError(Exception):
    """Base class for failures raised by the bignum core."""


class OutOfMemoryError(BignumError, MemoryError):
    pass


class SizeMismatchError(BignumError, ValueError):
    pass


class InvalidArgumentError(UserInputError, BignumError):
    pass


def parse_index(text: str) -> int:
    """
    Parse a Fibonacci index given as decimal text.

    Surrounding whitespace (e.g. the newline from `echo`) and a leading '+'
    are accepted; anything else, including negative numbers, is rejected.
    """
    if not isinstance(text, str):
        raise InvalidArgumentError(f"Invalid input: index must be text, got {typename(text)}")
    s = text.strip()
    if not _INDEX_RE.fullmatch(s):
        raise InvalidArgumentError(f"Invalid input: '{s}' is not a non-negative decimal integer")
    return int(s)


def typename(v: Any) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, Any]:
    """Flatten nested dicts into {'A.B.C': value}."""
    out: dict[str, Any] = {}
    for k, v in d.items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out

