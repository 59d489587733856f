"""
FastAPI main application
Tippy - shared prediction store and scoring for sporting events

Routers in tippy/api/:
- health.py: Health check
- teams.py: Team listing and registration
- games.py: Games, results, per-game bets, a user's bets
- global_bets.py: Global bets, predictions and results
- leaderboard.py: Computed standings

Every router reaches the store through app.state, never a module global.
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tippy.api import games, global_bets, health, leaderboard, teams
from tippy.config import settings_from_env
from tippy.core.store import Store
from tippy.errors import StoreError
from tippy.models import Settings


logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application

    Args:
        settings: Explicit settings; read via TIPPY_CONFIG when omitted
    """
    if settings is None:
        settings = settings_from_env()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events"""
        app.state.settings = settings
        app.state.store = Store.load(settings.data_path, tz=settings.timezone)
        logger.info(f"✅ Server started (timezone={settings.timezone}, data_path={settings.data_path})")

        yield

        logger.info("🛑 Server shutting down")

    app = FastAPI(
        title="Tippy",
        description="Shared prediction store and scoring engine for sporting events",
        version="1.0.0",
        lifespan=lifespan
    )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        # Errors raised outside an endpoint's own handling, e.g. a failed
        # snapshot flush after a read
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    # ==================== INCLUDE ROUTERS ====================

    app.include_router(health.router)
    app.include_router(teams.router)
    app.include_router(games.router)
    app.include_router(global_bets.router)
    app.include_router(leaderboard.router)

    return app


# ==================== RUN SERVER ====================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
