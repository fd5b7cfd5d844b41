"""FastAPI router for dashboard settings."""

import logging
from typing import List

from fastapi import APIRouter, Depends

from app.core.dependencies import get_settings_store

from ..models.setting import Setting, SettingCreate, SettingsReset
from ..services.settings_store import SettingsStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Settings"])


@router.get("/settings", response_model=List[Setting])
async def list_settings(store: SettingsStore = Depends(get_settings_store)):
    return store.list_settings()


@router.post("/settings", response_model=Setting)
async def save_setting(request: SettingCreate, store: SettingsStore = Depends(get_settings_store)):
    """Create or overwrite one setting by key."""
    return store.set_setting(request)


@router.post("/settings/reset", response_model=SettingsReset)
async def reset_settings(store: SettingsStore = Depends(get_settings_store)):
    """Restore the default printer and audio settings."""
    settings = store.reset()
    return SettingsReset(message="Settings reset successfully", settings=settings)
