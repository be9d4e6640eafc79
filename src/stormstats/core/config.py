"""Configuration loading and resolution."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml

from stormstats.core.types import WindThresholds


class ConfigError(ValueError):
    """Raised when configuration is invalid."""


DEFAULT_CONFIG: dict[str, Any] = {
    "loader": {
        "skip_units_row": True,
    },
    "cleaner": {
        "min_season": 1970,
        "time_format": "%Y-%m-%d %H:%M:%S",
    },
    "thresholds": {
        "named_storm": 33.89,
        "hurricane": 64.30,
        "major_hurricane": 96.46,
    },
    "queries": {
        "group_by": "name",
    },
}

GROUP_KEYS = {"name", "sid"}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries and return a new dictionary."""

    out = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping at root: {p}")
    return data


def resolve_config(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Resolve run configuration from defaults, an optional user file, and overrides."""

    resolved = deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        resolved = deep_merge(resolved, load_yaml(config_path))
    if overrides:
        resolved = deep_merge(resolved, overrides)
    _validate(resolved)
    return resolved


def thresholds_from_config(cfg: dict[str, Any]) -> WindThresholds:
    th = cfg.get("thresholds", {})
    return WindThresholds(
        named_storm=float(th["named_storm"]),
        hurricane=float(th["hurricane"]),
        major_hurricane=float(th["major_hurricane"]),
    )


def dump_yaml_text(data: dict[str, Any]) -> str:
    return yaml.safe_dump(data, sort_keys=False)


def _validate(cfg: dict[str, Any]) -> None:
    th = cfg.get("thresholds", {})
    try:
        values = [float(th[k]) for k in ("named_storm", "hurricane", "major_hurricane")]
    except KeyError as exc:
        raise ConfigError(f"Missing thresholds.{exc.args[0]}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Thresholds must be numeric: {th}") from exc
    if values[0] <= 0.0 or not (values[0] < values[1] < values[2]):
        raise ConfigError(
            "Thresholds must be positive and strictly increasing: "
            f"named_storm={values[0]}, hurricane={values[1]}, major_hurricane={values[2]}"
        )

    group_by = cfg.get("queries", {}).get("group_by")
    if group_by not in GROUP_KEYS:
        raise ConfigError(f"Unsupported queries.group_by '{group_by}'. Supported: name|sid")

    min_season = cfg.get("cleaner", {}).get("min_season")
    if isinstance(min_season, bool) or not isinstance(min_season, int):
        raise ConfigError(f"cleaner.min_season must be an integer year, got {min_season!r}")

    time_format = cfg.get("cleaner", {}).get("time_format")
    if not isinstance(time_format, str) or not time_format:
        raise ConfigError("cleaner.time_format must be a non-empty strftime pattern")
