"""SQLAlchemy models for the worship scale scheduler."""

from __future__ import annotations

import uuid
from typing import List

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, relationship


def _new_id() -> str:
    return uuid.uuid4().hex


def split_instruments(value: str | None) -> List[str]:
    """Split a semicolon-separated instrument column into a list."""
    if not value:
        return []
    return [part.strip() for part in value.split(";") if part.strip()]


def join_instruments(instruments) -> str:
    return ";".join(instruments or [])


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class MemberRecord(Base):
    """Volunteer with the instruments they play."""

    __tablename__ = "members"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    instruments = Column(String(500), nullable=False, default="")  # Semicolon-separated

    # Relationships
    unavailabilities = relationship(
        "UnavailabilityRecord", back_populates="member", cascade="all, delete-orphan"
    )
    recurring_unavailabilities = relationship(
        "RecurringUnavailabilityRecord", back_populates="member", cascade="all, delete-orphan"
    )
    slots = relationship("ScaleSlotRecord", back_populates="member")

    @property
    def instrument_list(self) -> List[str]:
        return split_instruments(self.instruments)

    def __repr__(self) -> str:
        return f"<MemberRecord(id={self.id}, name='{self.name}', instruments='{self.instruments}')>"


class UnavailabilityRecord(Base):
    """One-off period in which a member cannot serve."""

    __tablename__ = "member_unavailabilities"

    id = Column(String(36), primary_key=True, default=_new_id)
    member_id = Column(String(36), ForeignKey("members.id", ondelete="CASCADE"), nullable=False)
    start = Column(DateTime, nullable=False)
    end = Column(DateTime, nullable=False)

    member = relationship("MemberRecord", back_populates="unavailabilities")

    def __repr__(self) -> str:
        return f"<UnavailabilityRecord(member={self.member_id}, start={self.start}, end={self.end})>"


class RecurringUnavailabilityRecord(Base):
    """Weekday on which a member never serves."""

    __tablename__ = "recurring_unavailabilities"

    id = Column(String(36), primary_key=True, default=_new_id)
    member_id = Column(String(36), ForeignKey("members.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0=Sunday .. 6=Saturday

    member = relationship("MemberRecord", back_populates="recurring_unavailabilities")

    def __repr__(self) -> str:
        return f"<RecurringUnavailabilityRecord(member={self.member_id}, day={self.day_of_week})>"


class ScaleRecord(Base):
    """A scheduled service on a given date."""

    __tablename__ = "scales"

    id = Column(String(36), primary_key=True, default=_new_id)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    service = Column(String(20), nullable=False)

    slots = relationship(
        "ScaleSlotRecord",
        back_populates="scale",
        cascade="all, delete-orphan",
        order_by="ScaleSlotRecord.position",
    )

    def __repr__(self) -> str:
        return f"<ScaleRecord(id={self.id}, date={self.date}, service='{self.service}')>"


class ScaleSlotRecord(Base):
    """Instrument slot in a scale; member_id is NULL while the slot is open."""

    __tablename__ = "scale_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    scale_id = Column(String(36), ForeignKey("scales.id", ondelete="CASCADE"), nullable=False)
    member_id = Column(String(36), ForeignKey("members.id", ondelete="SET NULL"), nullable=True)
    instrument = Column(String(50), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    scale = relationship("ScaleRecord", back_populates="slots")
    member = relationship("MemberRecord", back_populates="slots")

    def __repr__(self) -> str:
        return f"<ScaleSlotRecord(scale={self.scale_id}, instrument='{self.instrument}', member={self.member_id})>"


class ScaleTemplateRecord(Base):
    """Weekly template used to pre-create empty scales."""

    __tablename__ = "scale_templates"

    id = Column(String(36), primary_key=True, default=_new_id)
    description = Column(String(200), nullable=False, default="")
    day_of_week = Column(Integer, nullable=False)
    service = Column(String(20), nullable=False)
    requires_confirmation = Column(Boolean, nullable=False, default=False)
    instruments = Column(String(500), nullable=False, default="")
    active = Column(Boolean, nullable=False, default=True)

    @property
    def instrument_list(self) -> List[str]:
        return split_instruments(self.instruments)

    def __repr__(self) -> str:
        return f"<ScaleTemplateRecord(id={self.id}, day={self.day_of_week}, service='{self.service}')>"
