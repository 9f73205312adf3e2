"""Alert value returned by the scale analysis."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class AlertSeverity(str, Enum):
    """Alert severity levels"""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Alert:
    """
    A problem (or suggestion) found in the scale being edited.

    ``member_id`` is None for scale-wide alerts such as a missing vocalist.
    Ids are deterministic so callers can de-duplicate by them.
    """
    id: str
    severity: AlertSeverity
    message: str
    member_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.member_id is not None:
            data["member_id"] = self.member_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Alert":
        return cls(
            id=data["id"],
            severity=AlertSeverity(data["severity"]),
            message=data["message"],
            member_id=data.get("member_id"),
        )
