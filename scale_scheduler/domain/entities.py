"""Plain domain values consumed by the alert engine and services.

These are detached snapshots: repositories map ORM records into them and the
engine only ever reads them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterator, Optional, Tuple, Union

import pandas as pd


VOCAL_ROLE = "Voz"


class ServiceType(str, Enum):
    """Kinds of worship service a scale can be drawn up for."""
    MORNING = "Manhã"
    EVENING = "Noite"
    SPECIAL = "Especial"


def normalize_date(value) -> Optional[str]:
    """
    Normalize a calendar date to a zero-padded ``YYYY-MM-DD`` string.

    Scale ordering relies on comparing these strings, so every date entering
    the system should pass through here.

    Args:
        value: date, datetime, pandas Timestamp or date-like string

    Returns:
        Normalized string, or None when the value is empty or unparseable
    """
    # NaT is a datetime subclass but has no strftime
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str) and not value.strip():
        return None
    try:
        ts = pd.to_datetime(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts.strftime("%Y-%m-%d")


def weekday_sunday_first(day: str) -> int:
    """Day of week for a ``YYYY-MM-DD`` date, 0=Sunday .. 6=Saturday."""
    return (pd.Timestamp(day).dayofweek + 1) % 7


@dataclass(frozen=True)
class Unavailability:
    """One-off period a member declared they cannot serve."""
    start: Union[datetime, str]
    end: Union[datetime, str]
    id: Optional[str] = None


@dataclass(frozen=True)
class Member:
    """A volunteer and the instruments they can play."""
    id: str
    name: str
    instruments: Tuple[str, ...] = ()
    unavailabilities: Tuple[Unavailability, ...] = ()
    recurring_unavailabilities: Tuple[int, ...] = ()  # days of week, 0=Sunday


@dataclass(frozen=True)
class AssignedSlot:
    role: str
    member: Member


@dataclass(frozen=True)
class VacantSlot:
    role: str


Slot = Union[AssignedSlot, VacantSlot]


@dataclass(frozen=True)
class ScaleEntry:
    """
    One scheduled service with its slots.

    Every field except ``slots`` may be missing while a scale is still being
    drafted.
    """
    id: Optional[str] = None
    date: Optional[str] = None
    service: Optional[ServiceType] = None
    slots: Tuple[Slot, ...] = ()

    def assigned(self) -> Iterator[AssignedSlot]:
        for slot in self.slots:
            if isinstance(slot, AssignedSlot):
                yield slot

    def member_ids(self) -> set:
        return {slot.member.id for slot in self.assigned()}


@dataclass(frozen=True)
class ScaleTemplate:
    """Weekly pattern used to pre-create empty scales for a month."""
    id: str
    description: str
    day_of_week: int
    service: ServiceType
    instruments: Tuple[str, ...] = ()
    requires_confirmation: bool = False
    active: bool = True
