"""Pre-creation of empty scales from weekly templates."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

import pandas as pd
from sqlalchemy.orm import Session

from scale_scheduler.domain.entities import ScaleEntry, ServiceType, VacantSlot
from scale_scheduler.domain.repositories import (
    MONTH_PATTERN,
    ScaleRepository,
    ScaleTemplateRepository,
    scale_to_entity,
)
from scale_scheduler.log import get_logger

logger = get_logger(__name__)


def month_days(month: Optional[str] = None, today: Optional[date] = None) -> pd.DatetimeIndex:
    """
    All days of a month.

    Args:
        month: Month as YYYY-MM; defaults to the month after ``today``
        today: Reference day when no month is given (defaults to date.today())

    Returns:
        Daily DatetimeIndex from the first to the last day of the month
    """
    if month is None:
        start = pd.Timestamp(today or date.today()).normalize() + pd.offsets.MonthBegin(1)
    else:
        if not MONTH_PATTERN.match(month):
            raise ValueError(f"Month must be formatted YYYY-MM, got {month!r}")
        start = pd.Timestamp(f"{month}-01")
    return pd.date_range(start, start + pd.offsets.MonthEnd(0), freq="D")


def generate_month_scales(
    session: Session,
    month: Optional[str] = None,
    today: Optional[date] = None,
) -> List[ScaleEntry]:
    """
    Create open scales for every active template occurrence in a month.

    A day matches a template when its weekday (0=Sunday) equals the template's.
    Scales that already exist for the same date and service are left alone, so
    running this twice creates nothing new.

    Args:
        session: Database session
        month: Target month as YYYY-MM (default: next month)
        today: Reference day used when month is omitted

    Returns:
        The scales created, with one vacant slot per template instrument
    """
    templates = ScaleTemplateRepository.get_active(session)
    if not templates:
        logger.info("No active templates, nothing to generate")
        return []

    days = month_days(month, today)
    month_str = days[0].strftime("%Y-%m")
    existing = {
        (scale.date, scale.service) for scale in ScaleRepository.get_by_month(session, month_str)
    }

    created: List[ScaleEntry] = []
    for day in days:
        day_str = day.strftime("%Y-%m-%d")
        day_of_week = (day.dayofweek + 1) % 7
        for template in templates:
            if template.day_of_week != day_of_week:
                continue
            key = (day_str, template.service)
            if key in existing:
                continue

            scale = ScaleEntry(
                date=day_str,
                service=ServiceType(template.service),
                slots=tuple(VacantSlot(role=instrument) for instrument in template.instrument_list),
            )
            record = ScaleRepository.save(session, scale)
            existing.add(key)
            created.append(scale_to_entity(record))

    logger.info("Generated %d scales for %s", len(created), month_str)
    return created
