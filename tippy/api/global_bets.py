"""
Global bet endpoints
"""
from fastapi import APIRouter, Depends, HTTPException

from tippy.api.dependencies import get_store
from tippy.core.store import Store
from tippy.errors import StoreError
from tippy.models import GlobalBetCreate, TeamChoice


router = APIRouter(prefix="/global-bets", tags=["global-bets"])


@router.get("")
async def list_global_bets(open_only: bool = False, store: Store = Depends(get_store)):
    async with store.session() as s:
        global_bets = s.list_global_bets(open_only=open_only)
    return {"global_bets": global_bets}


@router.post("", status_code=201)
async def add_global_bet(payload: GlobalBetCreate, store: Store = Depends(get_store)):
    """
    Admin: create a global bet

    Request:
        {"name": "World champion", "short": "WC", "points": 5, "start_time": "2024 06 14 21:00"}
    """
    try:
        async with store.session() as s:
            global_bet = s.add_global_bet(payload.name, payload.short, payload.points, payload.start_time)
    except StoreError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return global_bet


@router.put("/{short}/predictions/{user}")
async def place_prediction(short: str, user: str, payload: TeamChoice, store: Store = Depends(get_store)):
    try:
        async with store.session() as s:
            s.upsert_global_bet_prediction(short, user, payload.team_iso)
    except StoreError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return {
        "success": True,
        "global_bet": short,
        "team_iso": payload.team_iso,
        "message": f"Prediction saved: {short} -> {payload.team_iso}"
    }


@router.post("/{short}/result")
async def set_global_bet_result(short: str, payload: TeamChoice, store: Store = Depends(get_store)):
    """Admin: record the winning team"""
    try:
        async with store.session() as s:
            global_bet = s.set_global_bet_result(short, payload.team_iso)
    except StoreError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return global_bet
