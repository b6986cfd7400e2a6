"""
Data API Endpoints
REST API for export, import, reset, storage info and settings.
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
import logging

from vocabpro.core.dependencies import get_settings_manager, get_store
from vocabpro.managers.settings_manager import SettingsManager
from vocabpro.models.state import UserSettings
from vocabpro.schemas.progress import ImportRequest, ResetRequest, SettingsUpdateRequest
from vocabpro.services.storage_service import AppStateStore, ImportResult, StorageInfo


logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== STATE ENDPOINTS ====================

@router.get("/export", response_class=PlainTextResponse)
async def export_state(store: AppStateStore = Depends(get_store)):
    """Full state as a JSON document with export metadata."""
    return PlainTextResponse(store.export_json(), media_type="application/json")


@router.post("/import", response_model=ImportResult)
async def import_state(
    request: ImportRequest,
    store: AppStateStore = Depends(get_store)
):
    """
    Replace the state with an exported document.

    Nothing is changed when the document is rejected.
    """
    result = store.import_json(request.data)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return result


@router.post("/reset")
async def reset_state(
    request: ResetRequest,
    store: AppStateStore = Depends(get_store)
):
    """Restore defaults. Requires confirm=true."""
    if not request.confirm:
        raise HTTPException(status_code=400, detail="Reset requires confirm=true")
    store.reset(confirm=True)
    return {"status": "reset"}


@router.get("/info", response_model=StorageInfo)
async def get_storage_info(store: AppStateStore = Depends(get_store)):
    return store.get_storage_info()


@router.post("/flush")
async def flush_state(store: AppStateStore = Depends(get_store)):
    """Write pending changes now."""
    return {"written": store.flush(), "memory_only": store.memory_only}


# ==================== SETTINGS ENDPOINTS ====================

@router.get("/settings", response_model=UserSettings)
async def get_user_settings(manager: SettingsManager = Depends(get_settings_manager)):
    return manager.get_settings()


@router.patch("/settings", response_model=UserSettings)
async def update_user_settings(
    request: SettingsUpdateRequest,
    manager: SettingsManager = Depends(get_settings_manager)
):
    try:
        return manager.set_many(request.updates)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/settings", response_model=UserSettings)
async def reset_user_settings(manager: SettingsManager = Depends(get_settings_manager)):
    return manager.reset()
