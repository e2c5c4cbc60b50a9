"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from swapflow import __version__
from swapflow.config import get_settings
from swapflow.ledger.database import close_db, init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, release the engine on shutdown."""
    await init_db()
    yield
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="swapflow API",
        description="Status of recorded swap transactions and UniswapX orders",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    from swapflow.api.routes import health, swaps

    app.include_router(health.router, tags=["Health"])
    app.include_router(swaps.router)

    return app
