"""
Coverage-guided fuzz harness around :func:`dontpanic.checker.dont_panic`.

atheris is imported lazily so the rest of the package works without it.
Install with ``pip install dontpanic[fuzz]``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List

from . import checker
from .config import FuzzSettings

LOGGER = logging.getLogger("dontpanic.harness")

_sink: checker.WarningSink | None = None


class HarnessUnavailable(RuntimeError):
    """atheris could not be imported."""


def configure(settings: FuzzSettings) -> None:
    global _sink
    _sink = checker.RaisingSink() if settings.panic_on_match else None


def test_one_input(data: bytes) -> None:
    checker.dont_panic(data, _sink)


def libfuzzer_args(settings: FuzzSettings, argv0: str = "dontpanic") -> List[str]:
    args = [argv0]
    if settings.runs > 0:
        args.append(f"-runs={settings.runs}")
    args.append(f"-max_len={settings.max_len}")
    if settings.seed is not None:
        args.append(f"-seed={settings.seed}")
    if settings.corpus_dir:
        args.append(settings.corpus_dir)
    return args


def run(settings: FuzzSettings) -> None:
    """Fuzz the checker until libFuzzer stops (run limit, crash or Ctrl-C)."""
    try:
        import atheris
    except ModuleNotFoundError as exc:
        raise HarnessUnavailable(
            "atheris is not installed; run `pip install dontpanic[fuzz]`"
        ) from exc

    configure(settings)
    if settings.corpus_dir:
        Path(settings.corpus_dir).mkdir(parents=True, exist_ok=True)

    atheris.instrument_all()
    argv = libfuzzer_args(settings, argv0=sys.argv[0] or "dontpanic")
    LOGGER.info("Starting fuzzer: %s", " ".join(argv[1:]))
    atheris.Setup(argv, test_one_input)
    atheris.Fuzz()
