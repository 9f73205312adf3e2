"""Configuration loading (YAML or JSON)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

import pandas as pd
import yaml

from scale_scheduler.domain.entities import VOCAL_ROLE


@dataclass(frozen=True)
class AlertConfig:
    """Tunables of the scale alert engine."""
    window_size: int = 8
    overload_threshold: float = 1.5
    consecutive_threshold: int = 2
    inactive_weeks: int = 4
    vocal_role: str = VOCAL_ROLE
    timezone: str = "America/Sao_Paulo"  # calendar used to place tz-aware unavailability on a day


@dataclass(frozen=True)
class SchedulerConfig:
    db_url: str = "sqlite:///scales.db"
    alerts: AlertConfig = field(default_factory=AlertConfig)


DEFAULT_CONFIG = SchedulerConfig()


def _build(cls, data: Dict[str, Any], section: str):
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown keys in {section}: {sorted(unknown)}")
    return cls(**data)


def _check_int(cfg: AlertConfig, name: str, minimum: int) -> None:
    value = getattr(cfg, name)
    # bool is an int subclass; YAML "yes" must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"alerts.{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"alerts.{name} must be >= {minimum}, got {value}")


def _validate_alerts(cfg: AlertConfig) -> None:
    _check_int(cfg, "window_size", 1)
    _check_int(cfg, "consecutive_threshold", 1)
    _check_int(cfg, "inactive_weeks", 0)

    threshold = cfg.overload_threshold
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise ValueError(f"alerts.overload_threshold must be a number, got {threshold!r}")
    if threshold <= 0:
        raise ValueError(f"alerts.overload_threshold must be > 0, got {threshold}")

    if not isinstance(cfg.vocal_role, str) or not cfg.vocal_role.strip():
        raise ValueError("alerts.vocal_role must not be empty")

    try:
        pd.Timestamp.now(tz=cfg.timezone)
    except (KeyError, ValueError, TypeError) as e:
        raise ValueError(f"alerts.timezone is not a known time zone: {cfg.timezone!r}") from e


def config_from_dict(data: Dict[str, Any] | None) -> SchedulerConfig:
    """Build and validate a SchedulerConfig from a plain mapping."""
    data = dict(data or {})
    alerts = _build(AlertConfig, dict(data.pop("alerts", None) or {}), "alerts")
    _validate_alerts(alerts)
    return _build(SchedulerConfig, {**data, "alerts": alerts}, "config")


def load_config(path: str | Path) -> SchedulerConfig:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: Path to a .yaml/.yml or .json file

    Returns:
        Validated SchedulerConfig

    Raises:
        ValueError: If the file has unknown keys or out-of-range values
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Configuration root must be a mapping: {path}")
    return config_from_dict(data)
