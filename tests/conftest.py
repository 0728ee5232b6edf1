import textwrap
from pathlib import Path
from typing import Callable, List

import pytest

from dontpanic import harness
from dontpanic.config import CONFIG_ENV, FuzzSettings


class RecordingSink:
    """Collects warning lines instead of writing them anywhere."""

    def __init__(self) -> None:
        self.messages: List[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(CONFIG_ENV, raising=False)
    yield
    harness.configure(FuzzSettings())


@pytest.fixture
def dontpanic_config(tmp_path: Path) -> Callable[[str], Path]:
    """
    Fixture to help tests write a temporary TOML config.

    Usage:
        def test_runs(dontpanic_config):
            path = dontpanic_config("[fuzz]\\nruns = 10")
    """

    def writer(source: str, filename: str = "config/dontpanic.toml") -> Path:
        target = tmp_path / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        if not source.endswith("\n"):
            source = source + "\n"
        target.write_text(textwrap.dedent(source), encoding="utf-8")
        return target

    return writer
