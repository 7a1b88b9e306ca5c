from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("bigfib")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .arith import add, left_shift, multiply, subtract
from .bignum import LimbVector, copy, create
from .fibonacci import Algorithm, compute, fib_fast_doubling, fib_iteration, limbs_needed
from .fmt import to_hex
from .runtime import APPLY, CFG
from .service import FibService
from .utility import (
    BignumError,
    InvalidArgumentError,
    OutOfMemoryError,
    SizeMismatchError,
    UserInputError,
)

__all__ = [
    "APPLY",
    "CFG",
    "Algorithm",
    "BignumError",
    "FibService",
    "InvalidArgumentError",
    "LimbVector",
    "OutOfMemoryError",
    "SizeMismatchError",
    "UserInputError",
    "__version__",
    "add",
    "compute",
    "copy",
    "create",
    "fib_fast_doubling",
    "fib_iteration",
    "left_shift",
    "limbs_needed",
    "multiply",
    "subtract",
    "to_hex",
]
