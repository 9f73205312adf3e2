"""Grouping and text rendering of alerts for display."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .models import Alert, AlertSeverity


@dataclass
class AlertPanel:
    """Alerts shown in the scale editor panel, warnings first then suggestions."""
    warnings: List[Alert] = field(default_factory=list)
    infos: List[Alert] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.warnings and not self.infos


def alerts_for_member(alerts: Sequence[Alert], member_id: str) -> List[Alert]:
    return [alert for alert in alerts if alert.member_id == member_id]


def member_alert_level(alerts: Sequence[Alert]) -> Optional[AlertSeverity]:
    """
    Icon level shown next to a member: warning if any warning, else info.

    Critical alerts get no icon of their own; a member with only critical
    alerts is shown with the info icon.
    """
    if not alerts:
        return None
    if any(alert.severity == AlertSeverity.WARNING for alert in alerts):
        return AlertSeverity.WARNING
    return AlertSeverity.INFO


def build_alert_panel(alerts: Sequence[Alert]) -> AlertPanel:
    """
    Split alerts into the panel's warning and suggestion groups.

    Scale-wide alerts come before member alerts in each group. Member alerts
    are de-duplicated by id; critical alerts are not part of the panel.
    """
    general = [alert for alert in alerts if alert.member_id is None]

    member_alerts: List[Alert] = []
    seen_ids = set()
    for alert in alerts:
        if alert.member_id is None or alert.id in seen_ids:
            continue
        seen_ids.add(alert.id)
        member_alerts.append(alert)

    panel = AlertPanel()
    for group in (general, member_alerts):
        for alert in group:
            if alert.severity == AlertSeverity.WARNING:
                panel.warnings.append(alert)
            elif alert.severity == AlertSeverity.INFO:
                panel.infos.append(alert)
    return panel


def render_report(alerts: Sequence[Alert]) -> str:
    """Plain-text report: blocking problems, then warnings and suggestions."""
    if not alerts:
        return "Nenhum alerta para esta escala."

    lines: List[str] = []
    critical = [alert for alert in alerts if alert.severity == AlertSeverity.CRITICAL]
    if critical:
        lines.append(f"Bloqueios ({len(critical)}):")
        lines.extend(f"  ✗ {alert.message}" for alert in critical)

    panel = build_alert_panel(alerts)
    if panel.warnings:
        if lines:
            lines.append("")
        lines.append(f"Atenção ({len(panel.warnings)}):")
        lines.extend(f"  ⚠ {alert.message}" for alert in panel.warnings)
    if panel.infos:
        if lines:
            lines.append("")
        lines.append(f"Sugestões ({len(panel.infos)}):")
        lines.extend(f"  • {alert.message}" for alert in panel.infos)
    return "\n".join(lines)
