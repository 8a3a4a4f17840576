from dataclasses import replace

from quote_tool.data.seed_schedules import seed_schedules, load_seed_schedules
from quote_tool.services.schedule_service import ScheduleService


def test_seed_file_parses(settings):
    schedules = load_seed_schedules(settings.seed_path)
    assert {s.id for s in schedules} == {"standard-2025", "growth-2025", "enterprise-2025"}


def test_seed_schedules_report(settings):
    report = seed_schedules(settings, verbose=False)

    assert report["status"] == "success"
    assert report["seeded"] == 3
    assert report["errors"] == []
    assert len(ScheduleService(settings.schedules_path).list_schedules()) == 3


def test_seed_is_repeatable(settings):
    seed_schedules(settings, verbose=False)
    seed_schedules(settings, verbose=False)
    assert len(ScheduleService(settings.schedules_path).list_schedules()) == 3


def test_missing_seed_file_fails(settings, tmp_path):
    report = seed_schedules(replace(settings, seed_path=tmp_path / "missing.json"), verbose=False)
    assert report["status"] == "failed"
    assert "Seed file not found" in report["errors"][0]


def test_malformed_seed_file_fails(settings, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text('[{"id": "x"}]', encoding="utf-8")
    report = seed_schedules(replace(settings, seed_path=bad), verbose=False)
    assert report["status"] == "failed"
    assert report["seeded"] == 0
