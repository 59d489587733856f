"""
Shared dependencies for API routers
"""
from fastapi import Request

from tippy.core.store import Store
from tippy.models import Settings


def get_store(request: Request) -> Store:
    """Store created in the application lifespan"""
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
