from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

try:  # Python 3.11+
    import tomllib  # type: ignore[import]
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11
    import tomli as tomllib  # type: ignore[import,no-redef]

LOGGER = logging.getLogger("dontpanic.config")

CONFIG_ENV = "DONTPANIC_CONFIG"
DEFAULT_CONFIG = Path("config") / "dontpanic.toml"


class ConfigError(ValueError):
    """A settings value has the wrong type or is out of range."""


@dataclass(frozen=True)
class FuzzSettings:
    runs: int = 0
    max_len: int = 8
    seed: int | None = None
    corpus_dir: str | None = None
    panic_on_match: bool = False
    source: str | None = None


_INT_KEYS = ("runs", "max_len", "seed")
_STR_KEYS = ("corpus_dir",)
_BOOL_KEYS = ("panic_on_match",)


def _resolve_path(root: Path, value: str | None) -> Path | None:
    if not value:
        return None
    candidate = Path(value)
    if not candidate.is_absolute():
        candidate = root / candidate
    return candidate.resolve()


def _load_toml(path: Path) -> dict:
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError:
        return {}
    except tomllib.TOMLDecodeError as exc:
        LOGGER.warning("Failed to parse config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _config_path(root: Path, path: str | os.PathLike[str] | None) -> Path | None:
    if path is not None:
        return _resolve_path(root, os.fspath(path))
    if os.environ.get(CONFIG_ENV):
        return _resolve_path(root, os.environ[CONFIG_ENV])
    default = root / DEFAULT_CONFIG
    return default.resolve() if default.exists() else None


def _validate(values: Mapping[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(FuzzSettings)} - {"source"}
    clean: dict[str, Any] = {}
    for key, value in values.items():
        if key not in known:
            continue
        if key in _INT_KEYS:
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{key} must be an integer, got {value!r}")
        elif key in _STR_KEYS:
            if not isinstance(value, (str, os.PathLike)):
                raise ConfigError(f"{key} must be a string, got {value!r}")
            value = os.fspath(value)
        elif key in _BOOL_KEYS and not isinstance(value, bool):
            raise ConfigError(f"{key} must be true or false, got {value!r}")
        clean[key] = value

    if clean.get("runs", 0) < 0:
        raise ConfigError("runs must be >= 0")
    if clean.get("seed", 0) < 0:
        raise ConfigError("seed must be >= 0")
    if clean.get("max_len", 1) < 1:
        raise ConfigError("max_len must be >= 1")
    return clean


def load_settings(
    path: str | os.PathLike[str] | None = None,
    overrides: Mapping[str, Any] | None = None,
    root: Path | None = None,
) -> FuzzSettings:
    """Build fuzz settings from TOML plus explicit overrides.

    Lookup order: ``path``, then ``$DONTPANIC_CONFIG``, then
    ``config/dontpanic.toml`` under ``root`` (the working directory by
    default). Only the ``[fuzz]`` table is read. ``None`` overrides are
    skipped so CLI options left unset keep the file value.
    """
    root = root or Path.cwd()
    settings = FuzzSettings()

    config_path = _config_path(root, path)
    if config_path is not None and config_path.exists():
        table = _load_toml(config_path).get("fuzz", {})
        if not isinstance(table, dict):
            raise ConfigError(f"[fuzz] in {config_path} must be a table")
        settings = replace(settings, source=str(config_path), **_validate(table))
    elif config_path is not None:
        LOGGER.warning("Config file %s not found; using defaults", config_path)

    if overrides:
        given = {k: v for k, v in overrides.items() if v is not None}
        settings = replace(settings, **_validate(given))
    return settings
