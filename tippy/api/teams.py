"""
Team endpoints
"""
from fastapi import APIRouter, Depends, HTTPException

from tippy.api.dependencies import get_store
from tippy.core.store import Store
from tippy.errors import StoreError
from tippy.models import Team


router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("")
async def list_teams(store: Store = Depends(get_store)):
    """All teams in the order they were added"""
    async with store.session() as s:
        teams = s.list_teams()
    return {"teams": teams}


@router.post("", status_code=201)
async def add_team(team: Team, store: Store = Depends(get_store)):
    """Admin: register a team"""
    try:
        async with store.session() as s:
            created = s.add_team(team)
    except StoreError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return created
