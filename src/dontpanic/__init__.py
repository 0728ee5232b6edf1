"""Fuzzing demonstration target: warns when handed the input ``fuzz``."""

from __future__ import annotations

from .checker import (
    TARGET,
    TARGET_BYTES,
    WARNING_MESSAGE,
    RaisingSink,
    WarningSink,
    WrongInputError,
    dont_panic,
)

__version__ = "0.1.0"

__all__ = [
    "TARGET",
    "TARGET_BYTES",
    "WARNING_MESSAGE",
    "RaisingSink",
    "WarningSink",
    "WrongInputError",
    "dont_panic",
    "__version__",
]
