"""
Health check endpoint
"""
from fastapi import APIRouter, Depends

from tippy.api.dependencies import get_store
from tippy.core.store import Store


router = APIRouter(tags=["health"])


@router.get("/")
async def health_check(store: Store = Depends(get_store)):
    """Health check endpoint"""
    return {
        "status": "ok",
        "message": "Tippy prediction store",
        "version": "1.0.0",
        "persistent": bool(store.data_path),
    }
