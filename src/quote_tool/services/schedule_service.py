"""
Schedule Service - CRUD operations for rate cards.
Handles reading/writing rate_cards.json and version increments on edit.
"""
import json
import logging
import re
from pathlib import Path
from typing import Optional

from ..engine.models import PriceSchedule, SchedulePrices

logger = logging.getLogger(__name__)

_VERSION_PART = re.compile(r"\d+")


class ScheduleNotFoundError(ValueError):
    """No rate card with the requested id."""


class ScheduleConflictError(ValueError):
    """The operation would clash with an existing rate card or its quotes."""


def next_patch_version(version: str) -> str:
    """
    Increment the patch level of a 'vMAJOR.MINOR.PATCH' version tag.

    Missing or non-numeric parts default to 1.0.0-style values, so 'v2' becomes
    'v2.0.1' and an empty tag becomes 'v1.0.1'.
    """
    parts = version.strip().lstrip('vV').split('.')

    def _part(index: int, default: int) -> int:
        if index >= len(parts):
            return default
        match = _VERSION_PART.match(parts[index])
        return int(match.group()) if match else default

    major = _part(0, 1)
    minor = _part(1, 0)
    patch = _part(2, 0) + 1
    return f"v{major}.{minor}.{patch}"


class ScheduleService:
    """Service for managing versioned rate cards."""

    def __init__(self, schedules_path: Path):
        self.schedules_path = schedules_path

    def _read(self) -> list[dict]:
        if not self.schedules_path.exists():
            return []
        with open(self.schedules_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _write_schedules(self, schedules: list[PriceSchedule]):
        """Write rate cards back to JSON."""
        self.schedules_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.schedules_path, 'w', encoding='utf-8') as f:
            json.dump([s.to_dict() for s in schedules], f, indent=2)

    def list_schedules(self) -> list[PriceSchedule]:
        """List all rate cards ordered by name."""
        schedules = [PriceSchedule.from_dict(doc) for doc in self._read()]
        schedules.sort(key=lambda s: s.name)
        return schedules

    def get_schedule(self, schedule_id: str) -> PriceSchedule:
        """Get a single rate card by ID."""
        for schedule in self.list_schedules():
            if schedule.id == schedule_id:
                return schedule
        raise ScheduleNotFoundError(f"Rate card '{schedule_id}' not found")

    def exists(self, schedule_id: str) -> bool:
        return any(s.id == schedule_id for s in self.list_schedules())

    def create_schedule(self, schedule: PriceSchedule, version_notes: Optional[str] = None) -> PriceSchedule:
        """Create a new rate card."""
        if self.exists(schedule.id):
            raise ScheduleConflictError(f"Rate card with ID '{schedule.id}' already exists")

        if version_notes:
            schedule = schedule.with_changes(version_notes=version_notes)

        schedules = self.list_schedules()
        schedules.append(schedule)
        self._write_schedules(schedules)

        logger.info("Rate card created: %s %s (%s)", schedule.id, schedule.version, schedule.version_notes or "no notes")
        return schedule

    def update_schedule(
        self,
        schedule_id: str,
        version_notes: str,
        name: Optional[str] = None,
        monthly_minimum_cents: Optional[int] = None,
        prices: Optional[SchedulePrices] = None,
    ) -> tuple[PriceSchedule, str]:
        """
        Update a rate card, bumping its patch version.

        Returns (updated_schedule, previous_version).
        """
        if not version_notes or not version_notes.strip():
            raise ValueError("Version notes are required when updating a rate card")

        schedules = self.list_schedules()
        for i, existing in enumerate(schedules):
            if existing.id == schedule_id:
                break
        else:
            raise ScheduleNotFoundError(f"Rate card '{schedule_id}' not found")

        changes = {
            'version': next_patch_version(existing.version),
            'version_notes': version_notes.strip(),
        }
        if name is not None:
            changes['name'] = name
        if monthly_minimum_cents is not None:
            changes['monthly_minimum_cents'] = monthly_minimum_cents
        if prices is not None:
            changes['prices'] = prices

        updated = existing.with_changes(**changes)
        schedules[i] = updated
        self._write_schedules(schedules)

        logger.info(
            "Rate card updated: %s %s -> %s (%s)",
            schedule_id, existing.version, updated.version, updated.version_notes,
        )
        return updated, existing.version

    def delete_schedule(self, schedule_id: str, referenced_by: int = 0) -> bool:
        """Delete a rate card unless saved quotes still reference it."""
        schedules = self.list_schedules()
        remaining = [s for s in schedules if s.id != schedule_id]

        if len(remaining) == len(schedules):
            raise ScheduleNotFoundError(f"Rate card '{schedule_id}' not found")

        if referenced_by > 0:
            logger.warning("Refusing to delete rate card %s: %d quotes reference it", schedule_id, referenced_by)
            raise ScheduleConflictError(
                f"Cannot delete rate card '{schedule_id}': referenced by {referenced_by} existing quotes"
            )

        self._write_schedules(remaining)
        logger.info("Rate card deleted: %s", schedule_id)
        return True

    def seed(self, schedules: list[PriceSchedule]) -> int:
        """Insert or replace rate cards by ID. Returns the number written."""
        by_id = {s.id: s for s in self.list_schedules()}
        for schedule in schedules:
            by_id[schedule.id] = schedule
        self._write_schedules(list(by_id.values()))
        logger.info("Seeded %d rate cards", len(schedules))
        return len(schedules)
