"""Domain values, models and data access layer."""

from .entities import (
    VOCAL_ROLE,
    AssignedSlot,
    Member,
    ScaleEntry,
    ScaleTemplate,
    ServiceType,
    Slot,
    Unavailability,
    VacantSlot,
    normalize_date,
)
from .models import (
    Base,
    MemberRecord,
    RecurringUnavailabilityRecord,
    ScaleRecord,
    ScaleSlotRecord,
    ScaleTemplateRecord,
    UnavailabilityRecord,
)
from .repositories import MemberRepository, ScaleRepository, ScaleTemplateRepository

__all__ = [
    "VOCAL_ROLE",
    "AssignedSlot",
    "Member",
    "ScaleEntry",
    "ScaleTemplate",
    "ServiceType",
    "Slot",
    "Unavailability",
    "VacantSlot",
    "normalize_date",
    "Base",
    "MemberRecord",
    "RecurringUnavailabilityRecord",
    "ScaleRecord",
    "ScaleSlotRecord",
    "ScaleTemplateRecord",
    "UnavailabilityRecord",
    "MemberRepository",
    "ScaleRepository",
    "ScaleTemplateRepository",
]
