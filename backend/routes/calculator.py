"""
Covered Call Calculator Routes

- POST /calculate: run the calculator for one form submission
- GET  /snapshot:  hydrate the form (stored snapshot, or defaults)
- PUT  /snapshot:  save the form (debounced unless flush=true)
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional
import logging

from models.schemas import (
    TradeInputs,
    CoveredCallAnalysisResponse,
    SnapshotResponse,
    SnapshotSaveResponse,
    default_trade_inputs,
)
from services.covered_call_service import analyze_covered_call
from services.snapshot_store import (
    SnapshotStore,
    DebouncedSnapshotWriter,
    get_snapshot_store,
    get_snapshot_writer,
)

logger = logging.getLogger(__name__)

calculator_router = APIRouter(tags=["Covered Call"])


@calculator_router.post("/calculate", response_model=CoveredCallAnalysisResponse)
async def calculate_covered_call(
    inputs: TradeInputs,
    previous_annualized_yield: Optional[float] = Query(None, description="Annualized premium yield of the last submitted plan"),
    prefers_reduced_motion: bool = Query(False)
):
    """
    Derive covered call metrics, trade quality and technical score.

    Never fails on bad numbers: unparsable fields fall back to defaults.
    technical_score is null when RSI, ADX or every moving average is missing.
    """
    analysis = analyze_covered_call(
        inputs,
        previous_annualized_yield=previous_annualized_yield,
        prefers_reduced_motion=prefers_reduced_motion
    )
    return analysis.to_dict()


@calculator_router.get("/snapshot", response_model=SnapshotResponse)
async def get_form_snapshot(store: SnapshotStore = Depends(get_snapshot_store)):
    """Last saved form inputs, or the planner defaults when nothing usable is stored."""
    try:
        stored = await store.load()
    except Exception as e:
        logger.error(f"Snapshot load failed, using defaults: {e}")
        stored = None

    if stored is None:
        return {"source": "defaults", "inputs": default_trade_inputs()}
    return {"source": "stored", "inputs": stored}


@calculator_router.put(
    "/snapshot",
    response_model=SnapshotSaveResponse,
    status_code=status.HTTP_202_ACCEPTED
)
async def save_form_snapshot(
    inputs: TradeInputs,
    flush: bool = Query(False, description="Write immediately instead of debouncing"),
    writer: DebouncedSnapshotWriter = Depends(get_snapshot_writer)
):
    """
    Save the current form.

    Saves are coalesced: while the user keeps typing only the last snapshot
    within the debounce window is written. flush=true writes right away
    (e.g. on page unload).
    """
    writer.save(inputs)
    if flush:
        await writer.flush()
        return {"status": "saved"}
    return {"status": "scheduled"}
