"""Command-line interface for the worship scale scheduler."""

from __future__ import annotations

import argparse
import json
from datetime import date

from scale_scheduler.alerts import analyze_scale, render_report
from scale_scheduler.config import DEFAULT_CONFIG, SchedulerConfig, load_config
from scale_scheduler.domain.db import get_session, init_database, reset_database
from scale_scheduler.domain.repositories import (
    MemberRepository,
    ScaleRepository,
    scale_to_entity,
)
from scale_scheduler.io.export_csv import export_members_csv, export_scales_csv
from scale_scheduler.io.import_csv import (
    import_members_csv,
    import_scales_csv,
    import_unavailability_csv,
)
from scale_scheduler.log import set_level
from scale_scheduler.services.summary import count_member_appearances, render_summary
from scale_scheduler.services.templates import generate_month_scales


def _config(args: argparse.Namespace) -> SchedulerConfig:
    return load_config(args.config) if args.config else DEFAULT_CONFIG


def _db_url(args: argparse.Namespace) -> str:
    return args.db or _config(args).db_url


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    db_url = _db_url(args)
    if args.reset:
        reset_database(db_url)
        print(f"[OK] Database reset: {db_url}")
        return
    init_database(db_url)
    print(f"[OK] Database initialized: {db_url}")


def _cmd_import_csv(args: argparse.Namespace) -> None:
    """Import CSV data into database."""
    session = get_session(_db_url(args))

    try:
        if args.members:
            count = import_members_csv(session, args.members)
            print(f"[OK] Imported {count} members")

        if args.unavailability:
            count = import_unavailability_csv(session, args.unavailability)
            print(f"[OK] Imported {count} unavailability records")

        if args.scales:
            count = import_scales_csv(session, args.scales)
            print(f"[OK] Imported {count} scales")

        session.close()
        print("[OK] CSV import complete")

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Import failed: {e}")
        raise


def _cmd_generate_month(args: argparse.Namespace) -> None:
    """Create empty scales for a month from the active templates."""
    session = get_session(_db_url(args))

    try:
        created = generate_month_scales(session, args.month)
        session.close()
        print(f"[OK] Generated {len(created)} scales")

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Generation failed: {e}")
        raise


def _cmd_analyze(args: argparse.Namespace) -> None:
    """Print the alerts for a stored scale."""
    cfg = _config(args)
    session = get_session(args.db or cfg.db_url)

    try:
        record = ScaleRepository.get_by_id(session, args.scale)
        if record is None:
            raise SystemExit(f"Scale not found: {args.scale}")

        today = date.fromisoformat(args.today) if args.today else None
        alerts = analyze_scale(
            scale_to_entity(record),
            ScaleRepository.snapshot(session),
            MemberRepository.snapshot(session),
            cfg=cfg.alerts,
            today=today,
        )
        session.close()

        if args.json:
            print(json.dumps([alert.to_dict() for alert in alerts], ensure_ascii=False, indent=2))
        else:
            print(f"Scale {record.id} ({record.date}, {record.service})")
            print(render_report(alerts))

    except SystemExit:
        session.close()
        raise
    except Exception as e:
        session.close()
        print(f"[ERROR] Analysis failed: {e}")
        raise


def _cmd_summary(args: argparse.Namespace) -> None:
    """Print how many slots each member filled."""
    session = get_session(_db_url(args))

    try:
        records = (
            ScaleRepository.get_by_month(session, args.month) if args.month
            else ScaleRepository.get_all(session)
        )
        scales = [scale_to_entity(record) for record in records]
        counts = count_member_appearances(scales, MemberRepository.snapshot(session))
        session.close()
        print(render_summary(counts))

    except Exception as e:
        session.close()
        print(f"[ERROR] Summary failed: {e}")
        raise


def _cmd_export(args: argparse.Namespace) -> None:
    """Export data from database to CSV."""
    session = get_session(_db_url(args))

    try:
        if args.scales:
            count = export_scales_csv(session, args.scales, month=args.month)
            print(f"[OK] Exported {count} slots to {args.scales}")

        if args.members:
            count = export_members_csv(session, args.members)
            print(f"[OK] Exported {count} members to {args.members}")

        session.close()

    except Exception as e:
        session.close()
        print(f"[ERROR] Export failed: {e}")
        raise


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="scale-scheduler",
        description="Worship service scale scheduling with roster alerts",
    )

    # Global options
    parser.add_argument("--db", help="Database URL (default: from config, sqlite:///scales.db)")
    parser.add_argument("--config", help="Path to config YAML or JSON")
    parser.add_argument("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING)")

    sub = parser.add_subparsers(dest="command", required=True)

    # init-db command
    init = sub.add_parser("init-db", help="Initialize database")
    init.add_argument("--reset", action="store_true", help="Drop all tables first (deletes all data)")
    init.set_defaults(func=_cmd_init_db)

    # import-csv command
    imp = sub.add_parser("import-csv", help="Import CSV data into database")
    imp.add_argument("--members", help="Path to members CSV")
    imp.add_argument("--unavailability", help="Path to unavailability CSV")
    imp.add_argument("--scales", help="Path to scales CSV")
    imp.set_defaults(func=_cmd_import_csv)

    # generate-month command
    gen = sub.add_parser("generate-month", help="Create empty scales from templates")
    gen.add_argument("--month", help="Month as YYYY-MM (default: next month)")
    gen.set_defaults(func=_cmd_generate_month)

    # analyze command
    ana = sub.add_parser("analyze", help="Show alerts for a scale")
    ana.add_argument("--scale", required=True, help="Scale ID")
    ana.add_argument("--today", help="Reference day YYYY-MM-DD for the inactivity check")
    ana.add_argument("--json", action="store_true", help="Print alerts as JSON")
    ana.set_defaults(func=_cmd_analyze)

    # summary command
    summ = sub.add_parser("summary", help="Slots filled per member")
    summ.add_argument("--month", help="Month as YYYY-MM (default: all scales)")
    summ.set_defaults(func=_cmd_summary)

    # export command
    exp = sub.add_parser("export", help="Export data from database to CSV")
    exp.add_argument("--scales", help="Path to export scales CSV")
    exp.add_argument("--members", help="Path to export members CSV")
    exp.add_argument("--month", help="Month to filter scales (optional)")
    exp.set_defaults(func=_cmd_export)

    args = parser.parse_args(argv)
    if args.log_level:
        set_level(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
