"""
Leaderboard endpoint
"""
from fastapi import APIRouter, Depends

from tippy.api.dependencies import get_settings, get_store
from tippy.core.store import Store
from tippy.models import Settings
from tippy.services.leaderboard import get_leaderboard_data


router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard")
async def leaderboard(store: Store = Depends(get_store), settings: Settings = Depends(get_settings)):
    """
    Current standings

    Scoring runs on a snapshot after the session is released, so other
    requests are not blocked while totals are computed.
    """
    async with store.session() as s:
        snapshot = s.snapshot()
    return get_leaderboard_data(snapshot, settings.scoring)
