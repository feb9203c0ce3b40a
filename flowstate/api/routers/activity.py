"""
/activity — activity-monitoring window, input counts and visibility events.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from ...api.schemas import (
    ActivitySampleOut,
    ActivitySessionOut,
    ActivityStateOut,
    InputCountsIn,
    VisibilityIn,
)
from ...inference.focus_score import focus_status

router = APIRouter(prefix="/activity", tags=["activity"])


def _get_monitor(request: Request):
    return request.app.state.services["monitor"]


def _get_ticker(request: Request):
    return request.app.state.services["tickers"]["monitor"]


def _state_out(monitor) -> ActivityStateOut:
    return ActivityStateOut(
        monitoring=monitor.active,
        focus_score=monitor.state.focus_score,
        status=focus_status(monitor.state.focus_score),
        distractions=monitor.state.distraction_count,
        session_seconds=monitor.session_duration_seconds(),
        recent=[ActivitySampleOut(**s.__dict__) for s in monitor.recent()],
    )


@router.get("", response_model=ActivityStateOut)
def get_activity(monitor=Depends(_get_monitor)):
    return _state_out(monitor)


@router.post("/start", response_model=ActivityStateOut)
async def start_monitoring(monitor=Depends(_get_monitor), ticker=Depends(_get_ticker)):
    """Open a fresh monitoring window (score 100, no distractions)."""
    monitor.start()
    ticker.start()
    return _state_out(monitor)


@router.post("/stop", response_model=ActivitySessionOut)
async def stop_monitoring(monitor=Depends(_get_monitor), ticker=Depends(_get_ticker)):
    """Close the window and log it as an activity session."""
    ticker.stop()
    record = monitor.stop()
    if record is None:
        raise HTTPException(status_code=409, detail="Monitoring is not active")
    return ActivitySessionOut(**record.to_dict())


@router.post("/input", response_model=ActivityStateOut)
async def report_input(counts: InputCountsIn, monitor=Depends(_get_monitor)):
    """Add mouse-move / key-press counts observed since the last report."""
    monitor.record_input(mouse=counts.mouse, keys=counts.keys)
    return _state_out(monitor)


@router.post("/visibility", response_model=ActivityStateOut)
async def report_visibility(event: VisibilityIn, monitor=Depends(_get_monitor)):
    """A hidden window/tab counts as a distraction; becoming visible is ignored."""
    if event.hidden:
        monitor.visibility_lost()
    return _state_out(monitor)
