"""
Rate Cards API - FastAPI router for rate card management.
"""
from fastapi import APIRouter, Depends, HTTPException

from ..services.schedule_service import ScheduleNotFoundError, ScheduleConflictError
from .schemas import RateCardCreate, RateCardUpdate
from .state import AppState, get_state

router = APIRouter(prefix="/api/rate-cards", tags=["rate-cards"])


@router.get("")
async def list_rate_cards(state: AppState = Depends(get_state)):
    """List all rate cards."""
    return {"rateCards": [s.to_dict() for s in state.schedules.list_schedules()]}


@router.get("/{rate_card_id}")
async def get_rate_card(rate_card_id: str, state: AppState = Depends(get_state)):
    """Get a single rate card by ID."""
    try:
        schedule = state.schedules.get_schedule(rate_card_id)
    except ScheduleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"rateCard": schedule.to_dict()}


@router.post("", status_code=201)
async def create_rate_card(body: RateCardCreate, state: AppState = Depends(get_state)):
    """Create a new rate card."""
    try:
        created = state.schedules.create_schedule(body.to_schedule(), version_notes=body.version_notes)
    except ScheduleConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"rateCard": created.to_dict()}


@router.put("/{rate_card_id}")
async def update_rate_card(rate_card_id: str, body: RateCardUpdate, state: AppState = Depends(get_state)):
    """Update an existing rate card; the patch version is incremented."""
    try:
        updated, previous_version = state.schedules.update_schedule(
            rate_card_id,
            version_notes=body.version_notes,
            name=body.name,
            monthly_minimum_cents=body.monthly_minimum_cents,
            prices=body.prices.to_prices() if body.prices else None,
        )
    except ScheduleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"rateCard": updated.to_dict(), "previousVersion": previous_version}


@router.delete("/{rate_card_id}")
async def delete_rate_card(rate_card_id: str, state: AppState = Depends(get_state)):
    """Delete a rate card that no saved quote references."""
    try:
        state.schedules.delete_schedule(
            rate_card_id,
            referenced_by=state.quotes.count_for_schedule(rate_card_id),
        )
    except ScheduleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ScheduleConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"success": True, "message": f"Rate card '{rate_card_id}' deleted"}
