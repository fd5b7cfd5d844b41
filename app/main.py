"""Main FastAPI application with modular structure."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.orders.api.orders import router as orders_router, ws_router as orders_ws_router
from app.printing.api.printer import router as printer_router
from app.settings.api.settings import router as settings_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the printing tunables on startup."""
    settings = get_settings()
    logger.info("--- Server starting up ---")
    logger.info(
        f"Discovery: ports={settings.scan_ports} batch={settings.scan_batch_size} "
        f"probe_timeout={settings.probe_timeout_ms}ms"
    )
    logger.info(
        f"Printing: timeout={settings.print_timeout_ms}ms "
        f"drain_grace={settings.print_drain_grace_ms}ms"
    )

    yield

    logger.info("--- Server shutting down ---")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_title,
        description=settings.app_description,
        version=settings.app_version,
        lifespan=lifespan
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(orders_router, prefix="/api")
    app.include_router(printer_router, prefix="/api")
    app.include_router(settings_router, prefix="/api")
    app.include_router(orders_ws_router)

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
