# gamenight/routers/me_routes.py
from fastapi import APIRouter, Body, Depends
from typing import Any, Dict

from gamenight.core.storage import KeyValueStore, get_store
from gamenight.services.user import get_settings, get_user_stats, save_settings

router = APIRouter(prefix="/me", tags=["Me"])


@router.get("/stats")
async def my_stats(store: KeyValueStore = Depends(get_store)):
    return await get_user_stats(store)


@router.get("/settings")
async def my_settings(store: KeyValueStore = Depends(get_store)):
    return {"settings": await get_settings(store)}


@router.put("/settings")
async def update_settings(
    updates: Dict[str, Any] = Body(...),
    store: KeyValueStore = Depends(get_store),
):
    return {"settings": await save_settings(store, updates)}
