"""Repository classes for data access."""

from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from .entities import (
    AssignedSlot,
    Member,
    ScaleEntry,
    ScaleTemplate,
    ServiceType,
    Unavailability,
    VacantSlot,
    normalize_date,
)
from .models import (
    MemberRecord,
    RecurringUnavailabilityRecord,
    ScaleRecord,
    ScaleSlotRecord,
    ScaleTemplateRecord,
    UnavailabilityRecord,
    join_instruments,
)

MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def _check_day_of_week(day_of_week: int) -> int:
    day_of_week = int(day_of_week)
    if not 0 <= day_of_week <= 6:
        raise ValueError(f"Day of week must be between 0 (Sunday) and 6 (Saturday), got {day_of_week}")
    return day_of_week


def member_to_entity(record: MemberRecord) -> Member:
    """Full member snapshot, including unavailability."""
    return Member(
        id=record.id,
        name=record.name,
        instruments=tuple(record.instrument_list),
        unavailabilities=tuple(
            Unavailability(id=u.id, start=u.start, end=u.end) for u in record.unavailabilities
        ),
        recurring_unavailabilities=tuple(r.day_of_week for r in record.recurring_unavailabilities),
    )


def scale_to_entity(record: ScaleRecord) -> ScaleEntry:
    """
    Scale snapshot.

    Members embedded in slots are thin projections (id, name, instruments);
    their unavailability must be read from the member directory.
    """
    slots = []
    for slot in record.slots:
        if slot.member is None:
            slots.append(VacantSlot(role=slot.instrument))
        else:
            thin = Member(
                id=slot.member.id,
                name=slot.member.name,
                instruments=tuple(slot.member.instrument_list),
            )
            slots.append(AssignedSlot(role=slot.instrument, member=thin))
    return ScaleEntry(
        id=record.id,
        date=record.date,
        service=ServiceType(record.service),
        slots=tuple(slots),
    )


def template_to_entity(record: ScaleTemplateRecord) -> ScaleTemplate:
    return ScaleTemplate(
        id=record.id,
        description=record.description,
        day_of_week=record.day_of_week,
        service=ServiceType(record.service),
        instruments=tuple(record.instrument_list),
        requires_confirmation=bool(record.requires_confirmation),
        active=bool(record.active),
    )


class MemberRepository:
    """Repository for the member directory."""

    @staticmethod
    def get_all(session: Session) -> List[MemberRecord]:
        """Get all members ordered by name."""
        return session.query(MemberRecord).order_by(MemberRecord.name).all()

    @staticmethod
    def get_by_id(session: Session, member_id: str) -> Optional[MemberRecord]:
        """Get member by ID."""
        return session.query(MemberRecord).filter(MemberRecord.id == member_id).first()

    @staticmethod
    def get_by_name(session: Session, name: str) -> Optional[MemberRecord]:
        """Get member by exact display name."""
        return session.query(MemberRecord).filter(MemberRecord.name == name).first()

    @staticmethod
    def create(
        session: Session,
        name: str,
        instruments: Sequence[str] = (),
        member_id: Optional[str] = None,
    ) -> MemberRecord:
        """Create a new member."""
        member = MemberRecord(name=name, instruments=join_instruments(instruments))
        if member_id:
            member.id = member_id
        session.add(member)
        session.commit()
        session.refresh(member)
        return member

    @staticmethod
    def update(
        session: Session,
        member_id: str,
        name: Optional[str] = None,
        instruments: Optional[Sequence[str]] = None,
    ) -> MemberRecord:
        """Update name and/or instruments of an existing member."""
        member = MemberRepository.get_by_id(session, member_id)
        if member is None:
            raise ValueError(f"Member not found: {member_id}")
        if name is not None:
            member.name = name
        if instruments is not None:
            member.instruments = join_instruments(instruments)
        session.commit()
        return member

    @staticmethod
    def delete(session: Session, member_id: str) -> bool:
        """
        Delete a member and their unavailability records.

        Slots the member occupied become open slots.
        """
        member = MemberRepository.get_by_id(session, member_id)
        if member is None:
            return False
        (
            session.query(ScaleSlotRecord)
            .filter(ScaleSlotRecord.member_id == member_id)
            .update({ScaleSlotRecord.member_id: None}, synchronize_session="fetch")
        )
        session.delete(member)
        session.commit()
        return True

    @staticmethod
    def add_unavailability(
        session: Session, member_id: str, start: datetime, end: datetime
    ) -> UnavailabilityRecord:
        """Declare a one-off unavailability period for a member."""
        if MemberRepository.get_by_id(session, member_id) is None:
            raise ValueError(f"Member not found: {member_id}")
        if end < start:
            raise ValueError(f"Unavailability ends before it starts: {start} > {end}")
        record = UnavailabilityRecord(member_id=member_id, start=start, end=end)
        session.add(record)
        session.commit()
        session.refresh(record)
        return record

    @staticmethod
    def remove_unavailability(session: Session, unavailability_id: str) -> bool:
        deleted = (
            session.query(UnavailabilityRecord)
            .filter(UnavailabilityRecord.id == unavailability_id)
            .delete(synchronize_session="fetch")
        )
        session.commit()
        return deleted > 0

    @staticmethod
    def add_recurring_unavailability(
        session: Session, member_id: str, day_of_week: int
    ) -> RecurringUnavailabilityRecord:
        """Declare a weekday (0=Sunday) on which the member never serves."""
        day_of_week = _check_day_of_week(day_of_week)
        if MemberRepository.get_by_id(session, member_id) is None:
            raise ValueError(f"Member not found: {member_id}")
        record = RecurringUnavailabilityRecord(member_id=member_id, day_of_week=day_of_week)
        session.add(record)
        session.commit()
        session.refresh(record)
        return record

    @staticmethod
    def remove_recurring_unavailability(session: Session, recurring_id: str) -> bool:
        deleted = (
            session.query(RecurringUnavailabilityRecord)
            .filter(RecurringUnavailabilityRecord.id == recurring_id)
            .delete(synchronize_session="fetch")
        )
        session.commit()
        return deleted > 0

    @staticmethod
    def snapshot(session: Session) -> List[Member]:
        """Directory snapshot for the alert engine."""
        return [member_to_entity(m) for m in MemberRepository.get_all(session)]


class ScaleRepository:
    """Repository for scales and their slots."""

    @staticmethod
    def get_all(session: Session) -> List[ScaleRecord]:
        """Get all scales, most recent first."""
        return session.query(ScaleRecord).order_by(ScaleRecord.date.desc()).all()

    @staticmethod
    def get_by_id(session: Session, scale_id: str) -> Optional[ScaleRecord]:
        """Get scale by ID."""
        return session.query(ScaleRecord).filter(ScaleRecord.id == scale_id).first()

    @staticmethod
    def get_by_month(session: Session, month: str) -> List[ScaleRecord]:
        """Get all scales of a month given as YYYY-MM."""
        if not MONTH_PATTERN.match(month or ""):
            raise ValueError(f"Month must be formatted YYYY-MM, got {month!r}")
        return (
            session.query(ScaleRecord)
            .filter(ScaleRecord.date.startswith(month))
            .order_by(ScaleRecord.date)
            .all()
        )

    @staticmethod
    def save(session: Session, scale: ScaleEntry) -> ScaleRecord:
        """
        Create or update a scale.

        Existing slots are replaced by the ones in ``scale``, in order.

        Args:
            session: Database session
            scale: Scale to persist; an empty id creates a new record

        Returns:
            The persisted record
        """
        day = normalize_date(scale.date)
        if day is None:
            raise ValueError(f"Scale date is missing or invalid: {scale.date!r}")
        if scale.service is None:
            raise ValueError("Scale service type is required")

        record = ScaleRepository.get_by_id(session, scale.id) if scale.id else None
        if record is None:
            record = ScaleRecord(date=day, service=ServiceType(scale.service).value)
            if scale.id:
                record.id = scale.id
            session.add(record)
        else:
            record.date = day
            record.service = ServiceType(scale.service).value
            record.slots.clear()

        for position, slot in enumerate(scale.slots):
            member_id = slot.member.id if isinstance(slot, AssignedSlot) else None
            record.slots.append(
                ScaleSlotRecord(instrument=slot.role, member_id=member_id, position=position)
            )

        session.commit()
        session.refresh(record)
        return record

    @staticmethod
    def delete(session: Session, scale_id: str) -> bool:
        """Delete a scale and its slots."""
        record = ScaleRepository.get_by_id(session, scale_id)
        if record is None:
            return False
        session.delete(record)
        session.commit()
        return True

    @staticmethod
    def snapshot(session: Session) -> List[ScaleEntry]:
        """History snapshot for the alert engine."""
        return [scale_to_entity(s) for s in ScaleRepository.get_all(session)]


class ScaleTemplateRepository:
    """Repository for weekly scale templates."""

    @staticmethod
    def get_all(session: Session) -> List[ScaleTemplateRecord]:
        return session.query(ScaleTemplateRecord).order_by(ScaleTemplateRecord.day_of_week).all()

    @staticmethod
    def get_active(session: Session) -> List[ScaleTemplateRecord]:
        return (
            session.query(ScaleTemplateRecord)
            .filter(ScaleTemplateRecord.active.is_(True))
            .order_by(ScaleTemplateRecord.day_of_week)
            .all()
        )

    @staticmethod
    def get_by_id(session: Session, template_id: str) -> Optional[ScaleTemplateRecord]:
        return session.query(ScaleTemplateRecord).filter(ScaleTemplateRecord.id == template_id).first()

    @staticmethod
    def save(session: Session, template: ScaleTemplate) -> ScaleTemplateRecord:
        """Create or update a template."""
        day_of_week = _check_day_of_week(template.day_of_week)
        record = ScaleTemplateRepository.get_by_id(session, template.id) if template.id else None
        if record is None:
            record = ScaleTemplateRecord()
            if template.id:
                record.id = template.id
            session.add(record)
        record.description = template.description
        record.day_of_week = day_of_week
        record.service = ServiceType(template.service).value
        record.requires_confirmation = template.requires_confirmation
        record.instruments = join_instruments(template.instruments)
        record.active = template.active
        session.commit()
        session.refresh(record)
        return record

    @staticmethod
    def delete(session: Session, template_id: str) -> bool:
        record = ScaleTemplateRepository.get_by_id(session, template_id)
        if record is None:
            return False
        session.delete(record)
        session.commit()
        return True
