"""
Individual scale checks.

Each check is a pure function returning zero or more alerts. History passed in
is already filtered, date-normalized and sorted most recent first by the
engine, so dates compare correctly as ``YYYY-MM-DD`` strings.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from scale_scheduler.domain.entities import (
    AssignedSlot,
    Member,
    ScaleEntry,
    Slot,
    VacantSlot,
    normalize_date,
    weekday_sunday_first,
)
from scale_scheduler.log import get_logger

from .models import Alert, AlertSeverity

logger = get_logger(__name__)

WEEKDAY_NAMES = (
    "domingo",
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
)

DAY_END_OFFSET = pd.Timedelta(days=1) - pd.Timedelta(milliseconds=1)


def _assigned(slots: Sequence[Slot]) -> List[AssignedSlot]:
    return [slot for slot in slots if isinstance(slot, AssignedSlot)]


def _distinct_members(slots: Sequence[Slot]) -> Dict[str, Member]:
    """Members of the slots keyed by id, in order of first appearance."""
    members: Dict[str, Member] = {}
    for slot in _assigned(slots):
        members.setdefault(slot.member.id, slot.member)
    return members


def _mean(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


def format_date_br(day: str) -> str:
    year, month, dom = day.split("-")
    return f"{dom}/{month}/{year}"


def check_overload_by_role(
    current_slots: Sequence[Slot],
    recent_scales: Sequence[ScaleEntry],
    threshold: float = 1.5,
) -> List[Alert]:
    """
    Flag members who play a role much more often than their peers.

    Args:
        current_slots: Slots of the scale being edited
        recent_scales: The recent window of other scales
        threshold: Multiple of the role average at which a member is flagged

    Returns:
        One warning per (member, role) pair at or above the threshold
    """
    role_counts: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for scale in recent_scales:
        for slot in scale.assigned():
            role_counts[slot.role][slot.member.id] += 1

    alerts: List[Alert] = []
    seen = set()
    for slot in _assigned(current_slots):
        key = (slot.member.id, slot.role)
        if key in seen:
            continue
        seen.add(key)

        counts = role_counts.get(slot.role)
        if not counts or len(counts) < 2:
            # No baseline to compare against
            continue

        average = _mean(counts.values())
        count = counts.get(slot.member.id, 0)
        if average > 0 and count >= average * threshold:
            alerts.append(
                Alert(
                    id=f"overload-instrument-{slot.member.id}-{slot.role}",
                    severity=AlertSeverity.WARNING,
                    member_id=slot.member.id,
                    message=(
                        f"{slot.member.name} tocou {slot.role} {count}× nas últimas "
                        f"{len(recent_scales)} escalas (média: {average:.1f}×)."
                    ),
                )
            )
    return alerts


def check_overload_total(
    current_slots: Sequence[Slot],
    recent_scales: Sequence[ScaleEntry],
    threshold: float = 1.5,
) -> List[Alert]:
    """Flag members who appear in many more scales than average, whatever the role."""
    scale_counts: Dict[str, int] = defaultdict(int)
    for scale in recent_scales:
        for member_id in scale.member_ids():
            scale_counts[member_id] += 1

    if len(scale_counts) < 2:
        return []

    average = _mean(scale_counts.values())
    alerts: List[Alert] = []
    for member_id, member in _distinct_members(current_slots).items():
        count = scale_counts.get(member_id, 0)
        if average > 0 and count >= average * threshold:
            alerts.append(
                Alert(
                    id=f"overload-total-{member_id}",
                    severity=AlertSeverity.WARNING,
                    member_id=member_id,
                    message=(
                        f"{member.name} participou de {count} das últimas "
                        f"{len(recent_scales)} escalas (média: {average:.1f})."
                    ),
                )
            )
    return alerts


def check_consecutive(
    current_slots: Sequence[Slot],
    sorted_scales: Sequence[ScaleEntry],
    current_date: Optional[str] = None,
    threshold: int = 2,
) -> List[Alert]:
    """
    Flag members who served in each of the last ``threshold`` scales.

    Only scales strictly before ``current_date`` count; without a date the
    whole history is used.
    """
    if current_date:
        prior = [scale for scale in sorted_scales if scale.date < current_date]
    else:
        prior = list(sorted_scales)

    latest = prior[:threshold]
    if len(latest) < threshold:
        return []

    alerts: List[Alert] = []
    for member_id, member in _distinct_members(current_slots).items():
        if all(member_id in scale.member_ids() for scale in latest):
            alerts.append(
                Alert(
                    id=f"consecutive-{member_id}",
                    severity=AlertSeverity.WARNING,
                    member_id=member_id,
                    message=f"{member.name} foi escalado(a) nas últimas {threshold} escalas consecutivas.",
                )
            )
    return alerts


def check_missing_vocal(current_slots: Sequence[Slot], vocal_role: str = "Voz") -> List[Alert]:
    """Warn when a non-empty scale has no vocal slot at all."""
    if not current_slots:
        return []
    if any(slot.role == vocal_role for slot in current_slots):
        return []
    return [
        Alert(
            id="no-vocalist",
            severity=AlertSeverity.WARNING,
            message=f"Nenhum integrante com a função {vocal_role} foi adicionado à escala.",
        )
    ]


def check_inactive_members(
    current_slots: Sequence[Slot],
    all_members: Sequence[Member],
    sorted_scales: Sequence[ScaleEntry],
    today: date,
    inactive_weeks: int = 4,
) -> List[Alert]:
    """
    Suggest members outside the scale who have not served recently.

    A member is inactive when they never appear in the history or their last
    scale is strictly before ``today - inactive_weeks``.
    """
    in_scale = set(_distinct_members(current_slots))
    cutoff = normalize_date(pd.Timestamp(today).normalize() - pd.Timedelta(weeks=inactive_weeks))

    alerts: List[Alert] = []
    for member in all_members:
        if member.id in in_scale:
            continue

        last_scale = next(
            (scale for scale in sorted_scales if member.id in scale.member_ids()),
            None,
        )
        if last_scale is not None and last_scale.date >= cutoff:
            continue

        if last_scale is None:
            message = f"{member.name} nunca foi escalado(a)."
        else:
            message = f"{member.name} não é escalado(a) desde {format_date_br(last_scale.date)}."
        alerts.append(
            Alert(
                id=f"inactive-{member.id}",
                severity=AlertSeverity.INFO,
                member_id=member.id,
                message=message,
            )
        )
    return alerts


def check_open_slots(current_slots: Sequence[Slot], scale_id: Optional[str] = None) -> List[Alert]:
    """One critical alert per slot without a member."""
    prefix = f"open-slot-{scale_id}" if scale_id else "open-slot"
    return [
        Alert(
            id=f"{prefix}-{index}-{slot.role}",
            severity=AlertSeverity.CRITICAL,
            message=f"Vaga em aberto: {slot.role}",
        )
        for index, slot in enumerate(current_slots)
        if isinstance(slot, VacantSlot)
    ]


def day_bounds(value, timezone: str) -> Optional[Tuple[pd.Timestamp, pd.Timestamp]]:
    """
    Whole-day window containing ``value``: midnight to 23:59:59.999.

    Timezone-aware values are first moved to ``timezone`` so the calendar day
    is the local one. Returns None for unparseable values.
    """
    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(timezone).tz_localize(None)
    start = ts.normalize()
    return start, start + DAY_END_OFFSET


def check_unavailability(
    current_slots: Sequence[Slot],
    all_members: Sequence[Member],
    scale_date: str,
    timezone: str = "America/Sao_Paulo",
) -> List[Alert]:
    """
    Flag members scheduled on a day they declared themselves unavailable.

    Members in slots may be thin projections, so unavailability is read from
    the directory entry with the same id. Each member gets at most one alert
    for one-off periods and one for recurring weekdays.
    """
    bounds = day_bounds(scale_date, timezone)
    if bounds is None:
        logger.debug("Skipping unavailability check, invalid scale date %r", scale_date)
        return []
    scale_start, scale_end = bounds
    weekday = weekday_sunday_first(scale_date)

    directory = {member.id: member for member in all_members}
    alerts: List[Alert] = []
    for member_id, slot_member in _distinct_members(current_slots).items():
        member = directory.get(member_id, slot_member)

        for period in member.unavailabilities:
            period_start = day_bounds(period.start, timezone)
            period_end = day_bounds(period.end, timezone)
            if period_start is None or period_end is None:
                logger.debug("Skipping unparseable unavailability %r of member %s", period, member_id)
                continue
            if scale_start <= period_end[1] and scale_end >= period_start[0]:
                alerts.append(
                    Alert(
                        id=f"unavailable-{member_id}",
                        severity=AlertSeverity.CRITICAL,
                        member_id=member_id,
                        message=f"{member.name} declarou indisponibilidade neste período.",
                    )
                )
                break

        for day_of_week in member.recurring_unavailabilities:
            if day_of_week == weekday:
                alerts.append(
                    Alert(
                        id=f"unavailable-recurring-{member_id}",
                        severity=AlertSeverity.CRITICAL,
                        member_id=member_id,
                        message=(
                            f"{member.name} tem indisponibilidade recorrente neste dia "
                            f"da semana ({WEEKDAY_NAMES[weekday]})."
                        ),
                    )
                )
                break

    return alerts
