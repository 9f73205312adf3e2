"""Services built on top of the domain layer."""

from .summary import count_member_appearances, render_summary
from .templates import generate_month_scales, month_days

__all__ = [
    "count_member_appearances",
    "render_summary",
    "generate_month_scales",
    "month_days",
]
