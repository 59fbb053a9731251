"""FastAPI application for Evograph.

Serves the layout engine to presentation layers that cannot run it
in-process.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from evograph.api.routes import API_VERSION, router
from evograph.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown."""
    logger.info(f"Starting Evograph API ({settings.environment.value})...")
    logger.info(
        f"Canvas {settings.canvas_width:.0f}x{settings.canvas_height:.0f}, "
        f"margin {settings.boundary_margin:.0f}, damping {settings.damping_factor}"
    )

    yield

    logger.info("Shutting down Evograph API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Evograph",
        description="Layout and simulation engine for evolving knowledge graphs",
        version=API_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "evograph.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
