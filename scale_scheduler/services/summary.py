"""Per-member participation summary."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from scale_scheduler.domain.entities import Member, ScaleEntry

UNKNOWN_MEMBER = "Desconhecido"


def count_member_appearances(scales: Sequence[ScaleEntry], members: Sequence[Member]) -> pd.DataFrame:
    """
    Count how many slots each member filled in the given scales.

    Args:
        scales: Scales to count (e.g. one month)
        members: Member directory used for display names

    Returns:
        DataFrame with columns member_id, name, count sorted by count descending
    """
    rows = [
        {"member_id": slot.member.id}
        for scale in scales
        for slot in scale.assigned()
    ]
    if not rows:
        return pd.DataFrame(columns=["member_id", "name", "count"])

    df = pd.DataFrame(rows)
    counts = df.groupby("member_id", sort=False).size().reset_index(name="count")
    names = {member.id: member.name for member in members}
    counts["name"] = counts["member_id"].map(names).fillna(UNKNOWN_MEMBER)
    counts = counts.sort_values("count", ascending=False, kind="stable").reset_index(drop=True)
    return counts[["member_id", "name", "count"]]


def render_summary(counts: pd.DataFrame) -> str:
    if counts.empty:
        return "No assignments."
    width = max(len(str(name)) for name in counts["name"])
    lines = ["Scales per member:"]
    for name, count in zip(counts["name"], counts["count"]):
        lines.append(f"  {str(name):<{width}}  {int(count)}")
    return "\n".join(lines)
