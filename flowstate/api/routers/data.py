"""
/profile and /data — user profile, full export/import, and clear-all.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from ...api.schemas import ImportResultOut, ProfileOut
from ...settings import load_profile, load_timer_settings, update_profile
from ...storage.errors import DataImportError

router = APIRouter(tags=["data"])


def _get_services(request: Request):
    return request.app.state.services


def _reload_settings(services) -> None:
    # settings are re-read after anything that replaces them wholesale
    services["timer"].settings = load_timer_settings(services["store"])


@router.get("/profile", response_model=ProfileOut)
def read_profile(services=Depends(_get_services)):
    return ProfileOut(**load_profile(services["store"]))


@router.put("/profile", response_model=ProfileOut)
def write_profile(
    patch: Dict[str, Any] = Body(default={}),
    services=Depends(_get_services),
):
    """Apply a partial update; unknown keys are ignored, bad values keep the old ones."""
    return ProfileOut(**update_profile(services["store"], patch))


@router.get("/data/export")
def export_data(services=Depends(_get_services)):
    """Every category as one JSON document."""
    return JSONResponse(services["store"].export_data())


@router.post("/data/import", response_model=ImportResultOut)
async def import_data(request: Request, services=Depends(_get_services)):
    """
    Replace each category present in the uploaded document. A document that
    is not a JSON object is rejected with 400 and nothing is changed.
    """
    body = await request.body()
    try:
        imported = services["store"].import_data(body)
    except DataImportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    _reload_settings(services)
    return ImportResultOut(imported=imported)


@router.delete("/data")
async def clear_data(services=Depends(_get_services)):
    services["store"].clear()
    _reload_settings(services)
    return {"status": "cleared"}
