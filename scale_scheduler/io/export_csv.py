"""CSV export utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd
from sqlalchemy.orm import Session

from scale_scheduler.domain.repositories import MemberRepository, ScaleRepository
from scale_scheduler.log import get_logger

logger = get_logger(__name__)

SCALE_COLUMNS = ["scale_id", "date", "service", "position", "instrument", "member_id", "member"]
MEMBER_COLUMNS = ["id", "name", "instruments"]


def export_scales_csv(session: Session, csv_path: str | Path, month: Optional[str] = None) -> int:
    """
    Export scales to CSV, one row per slot (open slots have no member).

    Args:
        session: Database session
        csv_path: Output path
        month: Optional YYYY-MM filter

    Returns:
        Number of slot rows written
    """
    scales = ScaleRepository.get_by_month(session, month) if month else ScaleRepository.get_all(session)

    rows = []
    for scale in sorted(scales, key=lambda s: (s.date, s.service)):
        for slot in scale.slots:
            rows.append(
                {
                    "scale_id": scale.id,
                    "date": scale.date,
                    "service": scale.service,
                    "position": slot.position,
                    "instrument": slot.instrument,
                    "member_id": slot.member.id if slot.member else None,
                    "member": slot.member.name if slot.member else None,
                }
            )

    pd.DataFrame(rows, columns=SCALE_COLUMNS).to_csv(csv_path, index=False)
    logger.info("Exported %d slots to %s", len(rows), csv_path)
    return len(rows)


def export_members_csv(session: Session, csv_path: str | Path) -> int:
    """Export the member directory to CSV."""
    members = MemberRepository.get_all(session)
    rows = [{"id": m.id, "name": m.name, "instruments": m.instruments} for m in members]
    pd.DataFrame(rows, columns=MEMBER_COLUMNS).to_csv(csv_path, index=False)
    logger.info("Exported %d members to %s", len(rows), csv_path)
    return len(rows)
