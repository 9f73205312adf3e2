"""End-to-end tests of the command-line interface."""

import json

import pytest

from scale_scheduler.cli import main
from scale_scheduler.domain import ScaleTemplate, ScaleTemplateRepository, ServiceType
from scale_scheduler.domain.db import get_session

MEMBERS_CSV = """id,name,instruments
ana,Ana,Voz
bia,Bia,Bateria
caio,Caio,Baixo
"""

SCALES_CSV = """scale_id,date,service,instrument,member_id
s1,2026-02-22,Manhã,Voz,ana
s2,2026-03-01,Manhã,Voz,ana
s2,2026-03-01,Manhã,Bateria,
"""


@pytest.fixture
def db_url(tmp_path, capsys):
    """File database with members and two scales loaded through the CLI."""
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    members = tmp_path / "members.csv"
    members.write_text(MEMBERS_CSV, encoding="utf-8")
    scales = tmp_path / "scales.csv"
    scales.write_text(SCALES_CSV, encoding="utf-8")

    main(["--db", url, "init-db"])
    main(["--db", url, "import-csv", "--members", str(members), "--scales", str(scales)])

    out = capsys.readouterr().out
    assert "[OK] Imported 3 members" in out
    assert "[OK] Imported 2 scales" in out
    return url


@pytest.mark.integration
def test_analyze_json(db_url, capsys):
    main(["--db", db_url, "analyze", "--scale", "s2", "--today", "2026-03-01", "--json"])

    alerts = json.loads(capsys.readouterr().out)
    assert [a["id"] for a in alerts] == ["inactive-bia", "inactive-caio", "open-slot-s2-1-Bateria"]
    assert alerts[2] == {
        "id": "open-slot-s2-1-Bateria",
        "severity": "critical",
        "message": "Vaga em aberto: Bateria",
    }
    assert alerts[0]["member_id"] == "bia"


@pytest.mark.integration
def test_analyze_text_report(db_url, capsys):
    main(["--db", db_url, "analyze", "--scale", "s2", "--today", "2026-03-01"])

    out = capsys.readouterr().out
    assert out.startswith("Scale s2 (2026-03-01, Manhã)")
    assert "Bloqueios (1):" in out
    assert "Sugestões (2):" in out
    assert "Bia nunca foi escalado(a)." in out


@pytest.mark.integration
def test_analyze_unknown_scale(db_url):
    with pytest.raises(SystemExit, match="Scale not found"):
        main(["--db", db_url, "analyze", "--scale", "nope"])


@pytest.mark.integration
def test_summary(db_url, capsys):
    main(["--db", db_url, "summary", "--month", "2026-03"])

    assert capsys.readouterr().out.splitlines() == ["Scales per member:", "  Ana  1"]


@pytest.mark.integration
def test_generate_month(db_url, capsys):
    session = get_session(db_url)
    ScaleTemplateRepository.save(
        session,
        ScaleTemplate(
            id="sun",
            description="Culto de domingo",
            day_of_week=0,
            service=ServiceType.MORNING,
            instruments=("Voz", "Bateria"),
        ),
    )
    session.close()

    main(["--db", db_url, "generate-month", "--month", "2026-03"])

    # 2026-03-01 already exists, four Sundays remain
    assert "[OK] Generated 4 scales" in capsys.readouterr().out


@pytest.mark.integration
def test_export(db_url, tmp_path, capsys):
    out_file = tmp_path / "out.csv"

    main(["--db", db_url, "export", "--scales", str(out_file), "--month", "2026-02"])

    assert "[OK] Exported 1 slots" in capsys.readouterr().out
    assert out_file.exists()


@pytest.mark.integration
def test_import_error_is_reported(db_url, tmp_path, capsys):
    bad = tmp_path / "bad.csv"
    bad.write_text("member,day_of_week\nZé,1\n", encoding="utf-8")

    with pytest.raises(ValueError):
        main(["--db", db_url, "import-csv", "--unavailability", str(bad)])

    assert "[ERROR] Import failed" in capsys.readouterr().out


def test_config_file_sets_database(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'from_config.db'}"
    config = tmp_path / "config.yaml"
    config.write_text(f"db_url: {url}\n", encoding="utf-8")

    main(["--config", str(config), "init-db"])

    assert f"[OK] Database initialized: {url}" in capsys.readouterr().out
    assert (tmp_path / "from_config.db").exists()


@pytest.mark.integration
def test_init_db_reset_drops_data(db_url, capsys):
    main(["--db", db_url, "init-db", "--reset"])
    assert f"[OK] Database reset: {db_url}" in capsys.readouterr().out

    main(["--db", db_url, "summary"])

    assert capsys.readouterr().out.strip() == "No assignments."
