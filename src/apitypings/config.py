"""Run configuration: a JSON file plus environment overrides."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .tstype import TypescriptType

LOG_LEVEL_ENV = "APITYPINGS_LOG_LEVEL"


@dataclass(frozen=True)
class RunConfig:
    scopes: list[Path] = field(default_factory=list)
    externals: list[Path] = field(default_factory=list)
    # Package names emitted without a package prefix. Empty: the primary scopes' names.
    base_packages: list[str] = field(default_factory=list)
    # package path -> names
    ignore: dict[str, list[str]] = field(default_factory=dict)
    generate: dict[str, list[str]] = field(default_factory=dict)
    # qualified Go name -> TypeScript type
    well_known: dict[str, TypescriptType] = field(default_factory=dict)
    # qualified generic wrapper names that marshal as their type argument
    unwrap: list[str] = field(default_factory=list)


def _str_list(obj: Any, what: str) -> list[str]:
    if not isinstance(obj, list) or not all(isinstance(x, str) for x in obj):
        raise ConfigError(f"{what} must be list[str]")
    return list(obj)


def _names_by_pkg(obj: Any, what: str) -> dict[str, list[str]]:
    if not isinstance(obj, dict):
        raise ConfigError(f"{what} must map package paths to name lists")
    return {str(pkg): _str_list(names, f"{what}[{pkg!r}]") for pkg, names in obj.items()}


def load_config(path: Path) -> RunConfig:
    """Load a run configuration. Dump paths are relative to the config file."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"config not found: {path}")
    try:
        obj = json.loads(path.read_text(encoding="utf-8"))
    except Exception as e:  # noqa: BLE001
        raise ConfigError(f"failed to parse config JSON: {e}") from e
    if not isinstance(obj, dict):
        raise ConfigError("config must be a JSON object")

    root = path.parent
    well_known: dict[str, TypescriptType] = {}
    raw_known = obj.get("well_known", {})
    if not isinstance(raw_known, dict):
        raise ConfigError("well_known must be an object")
    for name, entry in raw_known.items():
        if isinstance(entry, str):
            entry = {"type": entry}
        if not isinstance(entry, dict) or not isinstance(entry.get("type"), str) or not entry["type"]:
            raise ConfigError(f"well_known[{name!r}] must include a non-empty 'type' string")
        optional = entry.get("optional", False)
        if not isinstance(optional, bool):
            raise ConfigError(f"well_known[{name!r}].optional must be a bool")
        well_known[name] = TypescriptType(value_type=entry["type"], optional=optional)

    return RunConfig(
        scopes=[root / p for p in _str_list(obj.get("scopes", []), "scopes")],
        externals=[root / p for p in _str_list(obj.get("externals", []), "externals")],
        base_packages=_str_list(obj.get("base_packages", []), "base_packages"),
        ignore=_names_by_pkg(obj.get("ignore", {}), "ignore"),
        generate=_names_by_pkg(obj.get("generate", {}), "generate"),
        well_known=well_known,
        unwrap=_str_list(obj.get("unwrap", []), "unwrap"),
    )


def default_log_level() -> int:
    """Log level from `APITYPINGS_LOG_LEVEL` (name or number); WARNING otherwise."""
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip()
    if not raw:
        return logging.WARNING
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        raise ConfigError(f"{LOG_LEVEL_ENV}: unknown log level {raw!r}")
    return level
