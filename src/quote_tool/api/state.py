"""
Shared API state - settings and the collaborator stores.

Routes receive the state through FastAPI dependencies so tests can swap in
stores rooted in a temporary directory.
"""
from dataclasses import dataclass
from typing import Optional

from ..config.settings import get_settings, Settings
from ..services.quote_history import QuoteHistoryService
from ..services.schedule_service import ScheduleService


@dataclass
class AppState:
    settings: Settings
    schedules: ScheduleService
    quotes: QuoteHistoryService

    @classmethod
    def from_settings(cls, settings: Settings) -> 'AppState':
        return cls(
            settings=settings,
            schedules=ScheduleService(settings.schedules_path),
            quotes=QuoteHistoryService(settings.quotes_path),
        )


_state: Optional[AppState] = None


def get_state() -> AppState:
    """Get the process-wide API state."""
    global _state
    if _state is None:
        _state = AppState.from_settings(get_settings())
    return _state
