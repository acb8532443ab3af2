"""FastAPI application serving the storefront core."""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from storefront.logging import get_logger
from storefront.routers import router as store_router
from storefront.session import SessionRegistry, build_registry

logger = get_logger(__name__)


def create_app(sessions: Optional[SessionRegistry] = None) -> FastAPI:
    """Build the app; without a registry one is built from the environment at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "sessions", None) is None:
            app.state.sessions = build_registry()
        logger.info("Storefront ready")
        yield
        await app.state.sessions.aclose()

    app = FastAPI(title="repX Store", lifespan=lifespan)
    app.state.sessions = sessions
    app.include_router(store_router)

    @app.get("/api/health")
    async def health_check():
        return {"status": "ok"}

    return app
