"""I/O utilities for CSV import/export."""

from .export_csv import export_members_csv, export_scales_csv
from .import_csv import import_members_csv, import_scales_csv, import_unavailability_csv

__all__ = [
    "import_members_csv",
    "import_scales_csv",
    "import_unavailability_csv",
    "export_members_csv",
    "export_scales_csv",
]
