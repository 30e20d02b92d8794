# gamenight/services/user.py
from __future__ import annotations

from typing import Any, Dict

from gamenight.core.storage import SETTINGS_KEY, STATS_KEY, KeyValueStore, load_json, save_json

DEFAULT_STATS = {"points": 0, "streak": 0, "accuracy": 0}

DEFAULT_SETTINGS = {
    "bettingSignals": False,
    "notifications": True,
    "emailAlerts": False,
    "premium": False,
}


async def get_user_stats(store: KeyValueStore) -> Dict[str, Any]:
    stats = await load_json(store, STATS_KEY, DEFAULT_STATS)
    settings = await get_settings(store)
    return {"stats": stats, "isPremium": bool(settings["premium"])}


async def get_settings(store: KeyValueStore) -> Dict[str, Any]:
    return await load_json(store, SETTINGS_KEY, DEFAULT_SETTINGS)


async def save_settings(store: KeyValueStore, updates: Dict[str, Any]) -> Dict[str, Any]:
    """Merge known boolean flags into the stored settings; unknown keys are ignored."""
    settings = await get_settings(store)
    for key, value in (updates or {}).items():
        if key in DEFAULT_SETTINGS and isinstance(value, bool):
            settings[key] = value
    await save_json(store, SETTINGS_KEY, settings)
    return settings
