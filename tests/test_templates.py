"""Tests for month generation from weekly templates."""

from datetime import date

import pytest

from scale_scheduler.domain import (
    ScaleEntry,
    ScaleRepository,
    ScaleTemplate,
    ScaleTemplateRepository,
    ServiceType,
    VacantSlot,
)
from scale_scheduler.services import generate_month_scales, month_days


@pytest.fixture
def weekly_templates(db_session):
    """Sunday morning and Wednesday evening services."""
    ScaleTemplateRepository.save(
        db_session,
        ScaleTemplate(
            id="sun",
            description="Culto de domingo",
            day_of_week=0,
            service=ServiceType.MORNING,
            instruments=("Voz", "Violão", "Bateria"),
        ),
    )
    ScaleTemplateRepository.save(
        db_session,
        ScaleTemplate(
            id="wed",
            description="Culto de quarta",
            day_of_week=3,
            service=ServiceType.EVENING,
            instruments=("Voz", "Teclado"),
        ),
    )
    return db_session


def test_month_days_explicit_month():
    days = month_days("2026-02")

    assert len(days) == 28
    assert days[0].strftime("%Y-%m-%d") == "2026-02-01"
    assert days[-1].strftime("%Y-%m-%d") == "2026-02-28"


def test_month_days_defaults_to_next_month():
    days = month_days(today=date(2026, 2, 10))

    assert days[0].strftime("%Y-%m-%d") == "2026-03-01"
    assert len(days) == 31


def test_month_days_december_rolls_over_year():
    assert month_days(today=date(2026, 12, 31))[0].strftime("%Y-%m") == "2027-01"


def test_month_days_invalid_month():
    with pytest.raises(ValueError, match="YYYY-MM"):
        month_days("2026/03")


def test_generate_creates_one_scale_per_template_occurrence(weekly_templates):
    created = generate_month_scales(weekly_templates, "2026-03")

    # March 2026: five Sundays, four Wednesdays
    assert len(created) == 9
    sundays = [s.date for s in created if s.service == ServiceType.MORNING]
    wednesdays = [s.date for s in created if s.service == ServiceType.EVENING]
    assert sundays == ["2026-03-01", "2026-03-08", "2026-03-15", "2026-03-22", "2026-03-29"]
    assert wednesdays == ["2026-03-04", "2026-03-11", "2026-03-18", "2026-03-25"]


def test_generated_scales_have_open_slots_per_instrument(weekly_templates):
    created = generate_month_scales(weekly_templates, "2026-03")

    first = created[0]
    assert first.id
    assert first.slots == (VacantSlot("Voz"), VacantSlot("Violão"), VacantSlot("Bateria"))
    assert len(ScaleRepository.get_by_month(weekly_templates, "2026-03")) == 9


def test_generate_is_idempotent(weekly_templates):
    generate_month_scales(weekly_templates, "2026-03")

    assert generate_month_scales(weekly_templates, "2026-03") == []
    assert len(ScaleRepository.get_all(weekly_templates)) == 9


def test_generate_skips_existing_date_and_service(weekly_templates):
    ScaleRepository.save(
        weekly_templates,
        ScaleEntry(id="manual", date="2026-03-01", service=ServiceType.MORNING),
    )

    created = generate_month_scales(weekly_templates, "2026-03")

    assert len(created) == 8
    assert "2026-03-01" not in [s.date for s in created]


def test_generate_same_date_other_service_is_created(weekly_templates):
    ScaleRepository.save(
        weekly_templates,
        ScaleEntry(id="special", date="2026-03-01", service=ServiceType.SPECIAL),
    )

    assert len(generate_month_scales(weekly_templates, "2026-03")) == 9


def test_generate_ignores_inactive_templates(weekly_templates):
    ScaleTemplateRepository.save(
        weekly_templates,
        ScaleTemplate(
            id="wed",
            description="Culto de quarta",
            day_of_week=3,
            service=ServiceType.EVENING,
            instruments=("Voz", "Teclado"),
            active=False,
        ),
    )

    created = generate_month_scales(weekly_templates, "2026-03")

    assert {s.service for s in created} == {ServiceType.MORNING}
    assert len(created) == 5


def test_generate_defaults_to_next_month(weekly_templates):
    created = generate_month_scales(weekly_templates, today=date(2026, 2, 10))

    assert all(s.date.startswith("2026-03") for s in created)
    assert len(created) == 9


def test_generate_without_templates(db_session):
    assert generate_month_scales(db_session, "2026-03") == []
