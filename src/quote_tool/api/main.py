import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .. import __version__
from ..config.settings import get_settings
from ..data.exports import saved_breakdown_frame, to_csv
from ..engine import QuoteEngine, DiscountThresholds, analyze_target_price, compare_schedules
from ..services.quote_history import QuoteNotFoundError
from ..services.schedule_service import ScheduleNotFoundError, ScheduleConflictError
from .schedules_api import router as rate_cards_router
from .schemas import (
    QuotePreviewRequest,
    QuoteSaveRequest,
    TargetHarmonizationRequest,
    CompareHarmonizationRequest,
    ProposalSaveRequest,
    ThresholdsIn,
)
from .state import AppState, get_state

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Quote Tool API",
    description="Monthly fulfillment quotes and pricing harmonization",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include rate card management API
app.include_router(rate_cards_router)


def _include_storage(requested: Optional[bool], state: AppState) -> bool:
    return state.settings.include_storage if requested is None else requested


def _thresholds(requested: Optional[ThresholdsIn], state: AppState) -> DiscountThresholds:
    if requested is not None:
        return requested.to_thresholds()
    return DiscountThresholds.from_dict(state.settings.discount_thresholds)


def _schedule_or_404(state: AppState, rate_card_id: str):
    try:
        return state.schedules.get_schedule(rate_card_id)
    except ScheduleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/")
async def root():
    return {"status": "online", "message": "Quote Tool API Active"}


@app.get("/health")
async def health():
    return {"ok": True, "version": __version__}


# ============================================================================
# QUOTES
# ============================================================================

@app.post("/api/quotes/preview")
async def preview_quote(req: QuotePreviewRequest, state: AppState = Depends(get_state)):
    schedule = _schedule_or_404(state, req.rate_card_id)
    engine = QuoteEngine(include_storage=_include_storage(req.include_storage, state))
    try:
        breakdown = engine.assemble(schedule, req.scope.to_profile())
    except Exception as e:
        logger.exception("Quote preview failed for %s", schedule.id)
        raise HTTPException(status_code=500, detail=str(e))
    return {
        "rateCardId": schedule.id,
        "version": schedule.version,
        "appVersion": __version__,
        "breakdown": breakdown.to_dict(),
    }


@app.post("/api/quotes", status_code=201)
async def save_quote(req: QuoteSaveRequest, state: AppState = Depends(get_state)):
    schedule = _schedule_or_404(state, req.rate_card_id)
    profile = req.scope.to_profile()
    engine = QuoteEngine(include_storage=_include_storage(req.include_storage, state))
    breakdown = engine.assemble(schedule, profile)
    record = state.quotes.save_quote(schedule, profile, breakdown, client_name=req.client_name)
    return {"quote": record.to_dict()}


@app.get("/api/quotes")
async def list_quotes(state: AppState = Depends(get_state)):
    return {"quotes": [r.to_dict() for r in state.quotes.list_quotes()]}


@app.get("/api/quotes/{quote_id}")
async def get_quote(quote_id: str, state: AppState = Depends(get_state)):
    try:
        return {"quote": state.quotes.get_quote(quote_id).to_dict()}
    except QuoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/api/quotes/{quote_id}/export", response_class=PlainTextResponse)
async def export_quote(quote_id: str, state: AppState = Depends(get_state)):
    """Return a saved quote's line items, as quoted, in CSV."""
    try:
        record = state.quotes.get_quote(quote_id)
    except QuoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return PlainTextResponse(
        to_csv(saved_breakdown_frame(record.breakdown)),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="quote-{quote_id}.csv"'},
    )


# ============================================================================
# HARMONIZATION
# ============================================================================

@app.post("/api/harmonization/target")
async def harmonize_target(req: TargetHarmonizationRequest, state: AppState = Depends(get_state)):
    schedule = _schedule_or_404(state, req.rate_card_id)
    try:
        result = analyze_target_price(
            schedule,
            req.scope.to_profile(),
            req.target_price_cents,
            thresholds=_thresholds(req.thresholds, state),
            include_storage=_include_storage(req.include_storage, state),
            basis=req.basis,
            strategy=req.strategy,
        )
    except Exception as e:
        logger.exception("Target harmonization failed for %s", schedule.id)
        raise HTTPException(status_code=500, detail=str(e))
    return result.to_dict()


@app.post("/api/harmonization/compare")
async def harmonize_compare(req: CompareHarmonizationRequest, state: AppState = Depends(get_state)):
    source = _schedule_or_404(state, req.source_rate_card_id)
    target = _schedule_or_404(state, req.target_rate_card_id)
    try:
        result = compare_schedules(
            source,
            target,
            req.scope.to_profile(),
            thresholds=_thresholds(req.thresholds, state),
            include_storage=_include_storage(req.include_storage, state),
            basis=req.basis,
        )
    except Exception as e:
        logger.exception("Rate card comparison failed for %s vs %s", source.id, target.id)
        raise HTTPException(status_code=500, detail=str(e))
    return result.to_dict()


@app.post("/api/harmonization/proposals", status_code=201)
async def save_proposal(req: ProposalSaveRequest, state: AppState = Depends(get_state)):
    """Persist a harmonized rate card the caller has explicitly confirmed."""
    if not req.confirmed:
        raise HTTPException(status_code=400, detail="Proposal must be confirmed before it is saved")
    try:
        created = state.schedules.create_schedule(
            req.rate_card.to_schedule(),
            version_notes=req.rate_card.version_notes,
        )
    except ScheduleConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"rateCard": created.to_dict()}
