"""Scale alert analysis."""

from .engine import (
    CONSECUTIVE_THRESHOLD,
    INACTIVE_WEEKS,
    OVERLOAD_THRESHOLD,
    WINDOW_SIZE,
    analyze_scale,
)
from .models import Alert, AlertSeverity
from .panel import AlertPanel, alerts_for_member, build_alert_panel, member_alert_level, render_report

__all__ = [
    "CONSECUTIVE_THRESHOLD",
    "INACTIVE_WEEKS",
    "OVERLOAD_THRESHOLD",
    "WINDOW_SIZE",
    "analyze_scale",
    "Alert",
    "AlertSeverity",
    "AlertPanel",
    "alerts_for_member",
    "build_alert_panel",
    "member_alert_level",
    "render_report",
]
