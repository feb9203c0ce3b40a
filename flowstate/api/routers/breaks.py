"""
/breaks — micro-break countdown and break history.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...analytics.metrics import breaks_on
from ...api.schemas import BreakStartIn, BreakStateOut
from ...storage.log_store import BREAK_HISTORY
from ...storage.records import parse_breaks

router = APIRouter(prefix="/breaks", tags=["breaks"])


def _get_services(request: Request):
    return request.app.state.services


def _state_out(services) -> BreakStateOut:
    breaks = services["breaks"]
    history = parse_breaks(services["store"].get(BREAK_HISTORY))
    return BreakStateOut(
        active=breaks.state.active,
        type=breaks.state.break_type,
        remaining_seconds=breaks.state.remaining_seconds,
        duration_seconds=breaks.state.duration_seconds,
        minutes_since_last_break=breaks.minutes_since_last_break(),
        breaks_today=breaks_on(history),
    )


@router.get("", response_model=BreakStateOut)
def get_break(services=Depends(_get_services)):
    return _state_out(services)


@router.post("/start", response_model=BreakStateOut)
async def start_break(req: BreakStartIn, services=Depends(_get_services)):
    services["breaks"].start(req.type, req.duration_seconds)
    services["tickers"]["breaks"].start()
    return _state_out(services)


@router.post("/complete", response_model=BreakStateOut)
async def complete_break(services=Depends(_get_services)):
    """Mark the active break done now and log it."""
    services["tickers"]["breaks"].stop()
    services["breaks"].complete()
    return _state_out(services)


@router.post("/cancel", response_model=BreakStateOut)
async def cancel_break(services=Depends(_get_services)):
    services["tickers"]["breaks"].stop()
    services["breaks"].cancel()
    return _state_out(services)
