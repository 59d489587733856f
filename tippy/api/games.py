"""
Game and game bet endpoints
"""
from fastapi import APIRouter, Depends, HTTPException

from tippy.api.dependencies import get_store
from tippy.core.store import Store
from tippy.errors import StoreError
from tippy.models import BetSubmission, GameCreate, ResultSubmission


router = APIRouter(tags=["games"])


@router.get("/games")
async def list_games(open_only: bool = False, store: Store = Depends(get_store)):
    """
    Games ordered by start time

    Query:
        open_only: Only games that still accept bets
    """
    async with store.session() as s:
        games = s.list_games(open_only=open_only)
    return {"games": games}


@router.post("/games", status_code=201)
async def add_game(payload: GameCreate, store: Store = Depends(get_store)):
    """
    Admin: create a game

    Request:
        {
            "name": "Opening match",
            "short": "GER-SCO",
            "team1_iso": "GER",
            "team2_iso": "SCO",
            "start_time": "2024 06 14 21:00"
        }
    """
    try:
        async with store.session() as s:
            game = s.add_game(
                name=payload.name,
                short=payload.short,
                team1_iso=payload.team1_iso,
                team2_iso=payload.team2_iso,
                start_time=payload.start_time,
            )
    except StoreError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return game


@router.post("/games/{short}/result")
async def set_result(short: str, payload: ResultSubmission, store: Store = Depends(get_store)):
    """Admin: record the final score (may be corrected later)"""
    try:
        async with store.session() as s:
            game = s.set_result(short, payload.team1_score, payload.team2_score, payload.note)
    except StoreError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return game


@router.put("/games/{short}/bets/{user}")
async def place_bet(short: str, user: str, payload: BetSubmission, store: Store = Depends(get_store)):
    """Place or replace a user's bet, only before kick-off"""
    try:
        async with store.session() as s:
            bet = s.upsert_bet(short, user, payload.team1_score, payload.team2_score)
    except StoreError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return {
        "success": True,
        "game": short,
        "bet": bet,
        "message": f"Bet saved: {short} {bet.team1_score}:{bet.team2_score}"
    }


@router.get("/users/{user}/bets")
async def list_user_bets(user: str, store: Store = Depends(get_store)):
    """A user's game bets and global bet predictions"""
    async with store.session() as s:
        bets = s.list_user_bets(user)
        global_bets = s.list_user_global_bets(user)
    return {
        "user": user,
        "bets": bets,
        "global_bets": global_bets,
    }
