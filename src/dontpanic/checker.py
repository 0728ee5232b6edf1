from __future__ import annotations

import logging
from typing import Protocol, Union

LOGGER = logging.getLogger("dontpanic")

TARGET = "fuzz"
TARGET_BYTES = TARGET.encode("ascii")
WARNING_MESSAGE = "[WARNING] error: wrong input"

Input = Union[str, bytes, bytearray, memoryview]


class WarningSink(Protocol):
    def __call__(self, message: str) -> None: ...


class WrongInputError(RuntimeError):
    """Raised by :class:`RaisingSink` when the target input is seen."""


class RaisingSink:
    """Sink that turns the warning into a crash the fuzzer can report."""

    def __call__(self, message: str) -> None:
        raise WrongInputError(message)


def _matches(data: Input) -> bool:
    if isinstance(data, str):
        return data == TARGET
    # memoryview of a non-byte format compares by element, so flatten first
    if isinstance(data, memoryview):
        data = data.tobytes()
    return data == TARGET_BYTES


def dont_panic(data: Input, warn: WarningSink | None = None) -> None:
    """Log a warning if ``data`` is exactly ``fuzz``; do nothing otherwise.

    Accepts text or any bytes-like value of any length. Never raises on its
    own; only a sink that raises (see :class:`RaisingSink`) can fault.
    """
    if len(data) == len(TARGET) and _matches(data):
        if warn is None:
            warn = LOGGER.warning
        warn(WARNING_MESSAGE)
