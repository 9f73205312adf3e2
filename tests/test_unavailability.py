"""Tests for the unavailability conflict check."""

from datetime import datetime

import pandas as pd

from factories import make_member, make_scale, play
from scale_scheduler.alerts import analyze_scale
from scale_scheduler.alerts.checks import check_unavailability, day_bounds
from scale_scheduler.alerts.models import AlertSeverity
from scale_scheduler.domain.entities import Member, ServiceType, Unavailability, weekday_sunday_first

TZ = "America/Sao_Paulo"

WEDNESDAY = "2026-03-25"
THURSDAY = "2026-03-26"


def _member_with_period(start, end, member_id="ana"):
    return make_member(member_id, unavailabilities=(Unavailability(start=start, end=end),))


def test_weekday_numbering_starts_on_sunday():
    assert weekday_sunday_first("2026-03-01") == 0
    assert weekday_sunday_first(WEDNESDAY) == 3
    assert weekday_sunday_first("2026-03-28") == 6


def test_day_bounds_floor_and_ceil():
    start, end = day_bounds("2026-03-25T12:59", TZ)

    assert start == pd.Timestamp("2026-03-25 00:00:00")
    assert end == pd.Timestamp("2026-03-25 23:59:59.999")


def test_day_bounds_invalid_value():
    assert day_bounds("not a date", TZ) is None
    assert day_bounds(None, TZ) is None


def test_one_off_period_same_day_ignores_clock_time():
    """A morning-only period still blocks an evening service that day."""
    ana = _member_with_period(datetime(2026, 3, 25, 0, 59), datetime(2026, 3, 25, 12, 59))

    alerts = check_unavailability([play("Voz", ana)], [ana], WEDNESDAY, TZ)

    assert len(alerts) == 1
    assert alerts[0].id == "unavailable-ana"
    assert alerts[0].severity == AlertSeverity.CRITICAL
    assert alerts[0].member_id == "ana"
    assert "indisponibilidade" in alerts[0].message


def test_one_off_period_iso_strings():
    ana = _member_with_period("2026-03-25T00:59", "2026-03-25T12:59")

    assert len(check_unavailability([play("Voz", ana)], [ana], WEDNESDAY, TZ)) == 1


def test_one_off_period_other_day():
    ana = _member_with_period(datetime(2026, 3, 25, 0, 59), datetime(2026, 3, 25, 12, 59))

    assert check_unavailability([play("Voz", ana)], [ana], THURSDAY, TZ) == []


def test_one_off_period_spanning_days_is_inclusive():
    ana = _member_with_period(datetime(2026, 3, 20, 18, 0), datetime(2026, 3, 22, 9, 0))

    for day in ("2026-03-20", "2026-03-21", "2026-03-22"):
        assert len(check_unavailability([play("Voz", ana)], [ana], day, TZ)) == 1
    assert check_unavailability([play("Voz", ana)], [ana], "2026-03-19", TZ) == []
    assert check_unavailability([play("Voz", ana)], [ana], "2026-03-23", TZ) == []


def test_timezone_aware_period_uses_local_calendar():
    """02:00 UTC on the 25th is still the 24th in Sao Paulo."""
    ana = _member_with_period("2026-03-25T02:00:00Z", "2026-03-25T02:30:00Z")

    assert len(check_unavailability([play("Voz", ana)], [ana], "2026-03-24", TZ)) == 1
    assert check_unavailability([play("Voz", ana)], [ana], WEDNESDAY, TZ) == []


def test_overlapping_periods_produce_single_alert():
    ana = make_member(
        "ana",
        unavailabilities=(
            Unavailability(start=datetime(2026, 3, 24), end=datetime(2026, 3, 26)),
            Unavailability(start=datetime(2026, 3, 25, 8), end=datetime(2026, 3, 25, 10)),
        ),
    )

    alerts = check_unavailability([play("Voz", ana), play("Violão", ana)], [ana], WEDNESDAY, TZ)

    assert [a.id for a in alerts] == ["unavailable-ana"]


def test_unparseable_period_is_skipped():
    ana = make_member(
        "ana",
        unavailabilities=(
            Unavailability(start="someday", end="later"),
            Unavailability(start=datetime(2026, 3, 25, 8), end=datetime(2026, 3, 25, 10)),
        ),
    )

    assert len(check_unavailability([play("Voz", ana)], [ana], WEDNESDAY, TZ)) == 1


def test_recurring_weekday_match():
    ana = make_member("ana", recurring_unavailabilities=(3,))

    alerts = check_unavailability([play("Voz", ana)], [ana], WEDNESDAY, TZ)

    assert len(alerts) == 1
    assert alerts[0].id == "unavailable-recurring-ana"
    assert alerts[0].severity == AlertSeverity.CRITICAL
    assert "quarta-feira" in alerts[0].message


def test_recurring_other_weekday():
    ana = make_member("ana", recurring_unavailabilities=(3,))

    assert check_unavailability([play("Voz", ana)], [ana], THURSDAY, TZ) == []


def test_one_off_and_recurring_are_reported_separately():
    ana = make_member(
        "ana",
        unavailabilities=(Unavailability(start=datetime(2026, 3, 25), end=datetime(2026, 3, 25)),),
        recurring_unavailabilities=(3, 3),
    )

    alerts = check_unavailability([play("Voz", ana)], [ana], WEDNESDAY, TZ)

    assert [a.id for a in alerts] == ["unavailable-ana", "unavailable-recurring-ana"]


def test_unavailability_read_from_directory_not_slot():
    """Slots carry thin member projections without unavailability data."""
    thin = Member(id="ana", name="Ana", instruments=("Voz",))
    full = make_member("ana", name="Ana", recurring_unavailabilities=(3,))

    alerts = check_unavailability([play("Voz", thin)], [full], WEDNESDAY, TZ)

    assert [a.member_id for a in alerts] == ["ana"]


def test_member_missing_from_directory_falls_back_to_slot():
    ana = make_member("ana", recurring_unavailabilities=(3,))

    assert len(check_unavailability([play("Voz", ana)], [], WEDNESDAY, TZ)) == 1


def test_service_type_does_not_matter():
    """Conflicts are decided per calendar day, whatever the service time."""
    ana = _member_with_period(datetime(2026, 3, 25, 7, 0), datetime(2026, 3, 25, 9, 0))
    for service in ServiceType:
        editing = make_scale("edit", WEDNESDAY, play("Voz", ana), service=service)
        alerts = analyze_scale(editing, [], [ana])
        assert [a.id for a in alerts if a.severity == AlertSeverity.CRITICAL] == ["unavailable-ana"]
