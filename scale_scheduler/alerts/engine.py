"""Scale analysis - runs every check against the scale being edited."""

from __future__ import annotations

import dataclasses
from datetime import date
from typing import List, Optional, Sequence

import pandas as pd

from scale_scheduler.config import AlertConfig
from scale_scheduler.domain.entities import Member, ScaleEntry, normalize_date
from scale_scheduler.log import get_logger

from .checks import (
    check_consecutive,
    check_inactive_members,
    check_missing_vocal,
    check_open_slots,
    check_overload_by_role,
    check_overload_total,
    check_unavailability,
)
from .models import Alert

WINDOW_SIZE = 8
OVERLOAD_THRESHOLD = 1.5
CONSECUTIVE_THRESHOLD = 2
INACTIVE_WEEKS = 4

DEFAULT_ALERT_CONFIG = AlertConfig(
    window_size=WINDOW_SIZE,
    overload_threshold=OVERLOAD_THRESHOLD,
    consecutive_threshold=CONSECUTIVE_THRESHOLD,
    inactive_weeks=INACTIVE_WEEKS,
)

logger = get_logger(__name__)


def sorted_history(editing_scale: ScaleEntry, all_scales: Sequence[ScaleEntry]) -> List[ScaleEntry]:
    """
    Other scales with normalized dates, most recent first.

    The scale being edited is excluded by id and scales whose date cannot be
    parsed are dropped.
    """
    history: List[ScaleEntry] = []
    for scale in all_scales:
        if editing_scale.id is not None and scale.id == editing_scale.id:
            continue
        day = normalize_date(scale.date)
        if day is None:
            logger.debug("Ignoring scale %s with invalid date %r", scale.id, scale.date)
            continue
        history.append(scale if scale.date == day else dataclasses.replace(scale, date=day))
    history.sort(key=lambda s: s.date, reverse=True)
    return history


def analyze_scale(
    editing_scale: ScaleEntry,
    all_scales: Sequence[ScaleEntry],
    all_members: Sequence[Member],
    cfg: Optional[AlertConfig] = None,
    today: Optional[date] = None,
) -> List[Alert]:
    """
    Analyze the scale being edited against scheduling history.

    Args:
        editing_scale: Scale being drafted; id, date and service may be missing
        all_scales: Every stored scale (may include the one being edited)
        all_members: Full member directory, including unavailability
        cfg: Alert tunables (defaults to module constants)
        today: Reference day for the inactivity check (defaults to today in cfg.timezone)

    Returns:
        Alerts in check order: role overload, total overload, consecutive,
        missing vocal, inactive members, open slots, unavailability
    """
    cfg = cfg or DEFAULT_ALERT_CONFIG
    if today is None:
        today = pd.Timestamp.now(tz=cfg.timezone).date()

    slots = tuple(editing_scale.slots or ())
    scale_date = normalize_date(editing_scale.date)
    history = sorted_history(editing_scale, all_scales)
    recent = history[: cfg.window_size]

    alerts: List[Alert] = []
    alerts.extend(check_overload_by_role(slots, recent, cfg.overload_threshold))
    alerts.extend(check_overload_total(slots, recent, cfg.overload_threshold))
    alerts.extend(check_consecutive(slots, history, scale_date, cfg.consecutive_threshold))
    alerts.extend(check_missing_vocal(slots, cfg.vocal_role))
    alerts.extend(check_inactive_members(slots, all_members, history, today, cfg.inactive_weeks))
    alerts.extend(check_open_slots(slots, editing_scale.id))
    if scale_date is not None:
        alerts.extend(check_unavailability(slots, all_members, scale_date, cfg.timezone))

    logger.debug(
        "Scale %s analyzed against %d scales (%d in window): %d alerts",
        editing_scale.id, len(history), len(recent), len(alerts),
    )
    return alerts
