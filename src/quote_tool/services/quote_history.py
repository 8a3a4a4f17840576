"""
Quote History - saved quotes, persisted to quotes.json.

A saved quote pins the rate card id and version it was computed with, so
later edits to the rate card never change what the client was quoted.
"""
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..engine.models import PriceSchedule, UsageProfile, QuoteBreakdown

logger = logging.getLogger(__name__)


class QuoteNotFoundError(ValueError):
    """No saved quote with the requested id."""


@dataclass
class QuoteRecord:
    """A quote as saved by the user."""
    id: str
    created_at: str
    schedule_id: str
    schedule_version: str
    profile: dict
    breakdown: dict
    client_name: Optional[str] = None

    @property
    def final_monthly_cost_cents(self) -> int:
        return self.breakdown.get('finalMonthlyCostCents', 0)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'clientName': self.client_name,
            'createdAt': self.created_at,
            'rateCardId': self.schedule_id,
            'rateCardVersion': self.schedule_version,
            'scopeInput': self.profile,
            'calculation': self.breakdown,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'QuoteRecord':
        return cls(
            id=data['id'],
            client_name=data.get('clientName'),
            created_at=data['createdAt'],
            schedule_id=data['rateCardId'],
            schedule_version=data['rateCardVersion'],
            profile=data['scopeInput'],
            breakdown=data['calculation'],
        )


class QuoteHistoryService:
    """Service for saving and listing quotes."""

    def __init__(self, quotes_path: Path):
        self.quotes_path = quotes_path

    def _write_quotes(self, records: list[QuoteRecord]):
        self.quotes_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.quotes_path, 'w', encoding='utf-8') as f:
            json.dump([r.to_dict() for r in records], f, indent=2)

    def list_quotes(self) -> list[QuoteRecord]:
        """List saved quotes, newest first."""
        if not self.quotes_path.exists():
            return []
        with open(self.quotes_path, 'r', encoding='utf-8') as f:
            records = [QuoteRecord.from_dict(doc) for doc in json.load(f)]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    def get_quote(self, quote_id: str) -> QuoteRecord:
        for record in self.list_quotes():
            if record.id == quote_id:
                return record
        raise QuoteNotFoundError(f"Quote '{quote_id}' not found")

    def save_quote(
        self,
        schedule: PriceSchedule,
        profile: UsageProfile,
        breakdown: QuoteBreakdown,
        client_name: Optional[str] = None,
    ) -> QuoteRecord:
        """Persist a computed quote."""
        record = QuoteRecord(
            id=uuid.uuid4().hex,
            client_name=client_name or None,
            created_at=datetime.now(timezone.utc).isoformat(),
            schedule_id=schedule.id,
            schedule_version=schedule.version,
            profile=profile.to_dict(),
            breakdown=breakdown.to_dict(),
        )
        records = self.list_quotes()
        records.append(record)
        self._write_quotes(records)

        logger.info("Quote saved: %s for %s (%s %s)", record.id, client_name or "Prospect", schedule.id, schedule.version)
        return record

    def count_for_schedule(self, schedule_id: str) -> int:
        """Number of saved quotes computed with a rate card."""
        return sum(1 for r in self.list_quotes() if r.schedule_id == schedule_id)
