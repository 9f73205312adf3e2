"""CSV import utilities to load data into database."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd
from sqlalchemy.orm import Session

from scale_scheduler.domain.entities import (
    AssignedSlot,
    Member,
    ScaleEntry,
    ServiceType,
    VacantSlot,
    normalize_date,
)
from scale_scheduler.domain.models import (
    MemberRecord,
    RecurringUnavailabilityRecord,
    UnavailabilityRecord,
    join_instruments,
    split_instruments,
)
from scale_scheduler.domain.repositories import MemberRepository, ScaleRepository
from scale_scheduler.log import get_logger

logger = get_logger(__name__)


def _read(csv_path: str | Path) -> pd.DataFrame:
    df = pd.read_csv(csv_path, dtype=str)
    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()
    return df


def _cell(row: pd.Series, column: str) -> Optional[str]:
    value = row.get(column)
    if value is None or pd.isna(value):
        return None
    value = str(value).strip()
    return value or None


def _resolve_member(session: Session, row: pd.Series) -> Optional[MemberRecord]:
    member_id = _cell(row, "member_id")
    if member_id:
        member = MemberRepository.get_by_id(session, member_id)
        if member is None:
            raise ValueError(f"Unknown member id: {member_id}")
        return member
    name = _cell(row, "member")
    if name:
        member = MemberRepository.get_by_name(session, name)
        if member is None:
            raise ValueError(f"Unknown member: {name}")
        return member
    return None


def import_members_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import members from CSV into database.

    Expected columns: name, instruments (semicolon-separated), optional id.

    Args:
        session: Database session
        csv_path: Path to members CSV

    Returns:
        Number of members imported
    """
    df = _read(csv_path)

    members = []
    for _, row in df.iterrows():
        name = _cell(row, "name")
        if not name:
            continue
        member = MemberRecord(
            name=name,
            instruments=join_instruments(split_instruments(_cell(row, "instruments"))),
        )
        member_id = _cell(row, "id")
        if member_id:
            member.id = member_id
        members.append(member)

    session.add_all(members)
    session.commit()

    logger.info("Imported %d members from %s", len(members), csv_path)
    return len(members)


def import_unavailability_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import member unavailability from CSV.

    Each row names a member (``member`` or ``member_id``) and either a
    ``day_of_week`` (0=Sunday, recurring) or a ``start``/``end`` period.

    Returns:
        Number of records imported
    """
    df = _read(csv_path)

    records = []
    for _, row in df.iterrows():
        member = _resolve_member(session, row)
        if member is None:
            raise ValueError(f"Unavailability row without member: {row.to_dict()}")

        day_of_week = _cell(row, "day_of_week")
        if day_of_week is not None:
            day = int(day_of_week)
            if not 0 <= day <= 6:
                raise ValueError(f"Day of week must be between 0 and 6, got {day}")
            records.append(RecurringUnavailabilityRecord(member_id=member.id, day_of_week=day))
            continue

        start = pd.to_datetime(_cell(row, "start"))
        end = pd.to_datetime(_cell(row, "end"))
        if pd.isna(start) or pd.isna(end):
            raise ValueError(f"Unavailability row needs start and end: {row.to_dict()}")
        records.append(
            UnavailabilityRecord(
                member_id=member.id,
                start=start.to_pydatetime(),
                end=end.to_pydatetime(),
            )
        )

    session.add_all(records)
    session.commit()

    logger.info("Imported %d unavailability records from %s", len(records), csv_path)
    return len(records)


def import_scales_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import scales from CSV, one row per slot.

    Expected columns: scale_id, date, service, instrument and an optional
    member (name) or member_id; a blank member means an open slot. Scales with
    an unparseable date are skipped.

    Returns:
        Number of scales imported
    """
    df = _read(csv_path)

    imported = 0
    for scale_id, group in df.groupby("scale_id", sort=False):
        first = group.iloc[0]
        day = normalize_date(_cell(first, "date"))
        if day is None:
            logger.warning("Skipping scale %s with invalid date %r", scale_id, _cell(first, "date"))
            continue

        slots = []
        for _, row in group.iterrows():
            instrument = _cell(row, "instrument")
            if not instrument:
                raise ValueError(f"Slot without instrument in scale {scale_id}")
            member = _resolve_member(session, row)
            if member is None:
                slots.append(VacantSlot(role=instrument))
            else:
                slots.append(AssignedSlot(role=instrument, member=Member(id=member.id, name=member.name)))

        scale = ScaleEntry(
            id=str(scale_id),
            date=day,
            service=ServiceType(_cell(first, "service")),
            slots=tuple(slots),
        )
        ScaleRepository.save(session, scale)
        imported += 1

    logger.info("Imported %d scales from %s", imported, csv_path)
    return imported
