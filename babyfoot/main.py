from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from babyfoot.api.errors import register_error_handlers
from babyfoot.api.routes.games import router as games_router
from babyfoot.api.routes.health import router as health_router
from babyfoot.api.routes.sessions import router as sessions_router
from babyfoot.api.routes.tournaments import router as tournaments_router
from babyfoot.core.config import get_settings
from babyfoot.core.logging import configure_logging
from babyfoot.db.session import dispose_engine
from babyfoot.store.factory import close_document_store

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_document_store()
    await dispose_engine()
    logger.info("api_shutdown_complete")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, app_env=settings.app_env)

    app = FastAPI(
        title="Babyfoot Live API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(sessions_router)
    app.include_router(games_router)
    app.include_router(tournaments_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "babyfoot.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
