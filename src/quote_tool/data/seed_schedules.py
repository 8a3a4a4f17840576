"""
Schedule Seeder - loads the packaged default rate cards into the store.

Returns a report in the same shape as other build steps: status, counts,
warnings and errors.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config.settings import get_settings, Settings
from ..engine.models import PriceSchedule
from ..services.schedule_service import ScheduleService

logger = logging.getLogger(__name__)


def load_seed_schedules(seed_path: Path) -> list[PriceSchedule]:
    """Parse a seed file into schedules."""
    with open(seed_path, 'r', encoding='utf-8') as f:
        return [PriceSchedule.from_dict(doc) for doc in json.load(f)]


def seed_schedules(settings: Optional[Settings] = None, verbose: bool = True) -> dict:
    """
    Upsert the seed rate cards into the schedule store.

    Args:
        settings: Optional settings override
        verbose: Print progress messages

    Returns:
        Seed report dictionary
    """
    settings = settings or get_settings()

    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "seed_file": str(settings.seed_path),
        "store": str(settings.schedules_path),
        "seeded": 0,
        "warnings": [],
        "errors": [],
    }

    if not settings.seed_path.exists():
        msg = f"Seed file not found: {settings.seed_path}"
        report["errors"].append(msg)
        report["status"] = "failed"
        logger.error(msg)
        return report

    try:
        schedules = load_seed_schedules(settings.seed_path)
    except (ValueError, KeyError, TypeError) as e:
        msg = f"Failed to parse {settings.seed_path}: {e}"
        report["errors"].append(msg)
        report["status"] = "failed"
        logger.error(msg)
        return report

    service = ScheduleService(settings.schedules_path)
    for schedule in schedules:
        if schedule.monthly_minimum_cents == 0:
            report["warnings"].append(f"{schedule.id} has no monthly minimum")

    report["seeded"] = service.seed(schedules)
    report["status"] = "success"

    if verbose:
        print(f"Seeded {report['seeded']} rate cards into {settings.schedules_path}")
    return report
