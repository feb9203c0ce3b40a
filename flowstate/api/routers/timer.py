"""
/timer — Pomodoro countdown controls and timer settings.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request

from ...actions.pomodoro import format_clock
from ...api.schemas import ModeSwitchIn, TimerSettingsOut, TimerStateOut

router = APIRouter(prefix="/timer", tags=["timer"])


def _get_services(request: Request):
    return request.app.state.services


def _state_out(timer) -> TimerStateOut:
    state = timer.state
    return TimerStateOut(
        mode=state.mode,
        remaining_seconds=state.remaining_seconds,
        clock=format_clock(state.remaining_seconds),
        running=state.running,
        completed_sessions=state.completed_sessions,
        progress=timer.progress(),
        settings=TimerSettingsOut(**timer.settings.to_dict()),
    )


@router.get("", response_model=TimerStateOut)
def get_timer(services=Depends(_get_services)):
    return _state_out(services["timer"])


@router.post("/start", response_model=TimerStateOut)
async def start_timer(services=Depends(_get_services)):
    """Start (or resume) the countdown in the current mode."""
    services["timer"].start()
    services["tickers"]["timer"].start()
    return _state_out(services["timer"])


@router.post("/pause", response_model=TimerStateOut)
async def pause_timer(services=Depends(_get_services)):
    services["tickers"]["timer"].stop()
    services["timer"].pause()
    return _state_out(services["timer"])


@router.post("/reset", response_model=TimerStateOut)
async def reset_timer(services=Depends(_get_services)):
    """Stop and restore the current mode's full duration."""
    services["tickers"]["timer"].stop()
    services["timer"].reset()
    return _state_out(services["timer"])


@router.post("/mode", response_model=TimerStateOut)
async def switch_mode(req: ModeSwitchIn, services=Depends(_get_services)):
    """Manually switch mode; never counted as a completed session."""
    services["tickers"]["timer"].stop()
    services["timer"].switch_mode(req.mode)
    return _state_out(services["timer"])


@router.get("/settings", response_model=TimerSettingsOut)
def read_settings(services=Depends(_get_services)):
    return TimerSettingsOut(**services["timer"].settings.to_dict())


@router.put("/settings", response_model=TimerSettingsOut)
def write_settings(
    patch: Dict[str, Any] = Body(default={}),
    services=Depends(_get_services),
):
    """
    Replace timer settings. Missing, non-numeric or non-positive fields fall
    back to their defaults. The running countdown is not adjusted.
    """
    settings = services["timer"].update_settings(patch)
    return TimerSettingsOut(**settings.to_dict())
