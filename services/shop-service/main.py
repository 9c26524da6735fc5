"""Main application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional, Sequence

import uvicorn
import httpx
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.pymongo import PymongoInstrumentor
from pymongo.database import Database

from config import (
    ALLOWED_ORIGINS,
    API_VERSION,
    ENVIRONMENT,
    HOST,
    IMAGE_STORAGE,
    IMAGE_STORAGE_BACKENDS,
    MONGO_DB_NAME,
    OTEL_ENABLED,
    PORT
)
from database import create_client, init_db
from errors import ShopError
from logging_config import setup_logging
from routers import products, cart, upload, auth as auth_router
from schemas import HealthResponse
from services.image_storage import HostedImageStorage, LocalImageStorage, IMAGES_PATH

logger = logging.getLogger(__name__)

ROUTERS: Sequence[APIRouter] = (
    auth_router.router,
    products.router,
    cart.router,
    upload.router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info("Starting application...")

    # Connect to MongoDB unless a database was injected
    mongo_client = None
    if app.state.db is None:
        if OTEL_ENABLED:
            PymongoInstrumentor().instrument()
        mongo_client = create_client()
        app.state.db = mongo_client[MONGO_DB_NAME]
        logger.info("MongoDB client initialized", extra={"database": MONGO_DB_NAME})

    init_db(app.state.db)

    # Initialize HTTP client
    http_client = httpx.AsyncClient(timeout=30.0)
    if OTEL_ENABLED:
        HTTPXClientInstrumentor().instrument_client(http_client)
    app.state.http_client = http_client

    if app.state.image_storage is None:
        app.state.image_storage = HostedImageStorage(http_client)
    logger.info("Image storage initialized", extra={"backend": app.state.image_storage.backend})

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await http_client.aclose()
    if mongo_client is not None:
        mongo_client.close()
    logger.info("Application shutdown complete")


async def shop_error_handler(request: Request, exc: ShopError) -> JSONResponse:
    """Render service errors as ``{"success": false, "errors": ...}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "errors": exc.message}
    )


def create_app(
    routers: Sequence[APIRouter] = ROUTERS,
    db: Optional[Database] = None,
    image_storage=None,
    allowed_origins: Sequence[str] = ALLOWED_ORIGINS,
    storage_backend: str = IMAGE_STORAGE
) -> FastAPI:
    """
    Build the application.

    Args:
        routers: Routers to mount
        db: Database to use instead of connecting with MONGO_URI
        image_storage: Image storage backend, built from storage_backend when omitted
        allowed_origins: Origins allowed by CORS
        storage_backend: "local" or "hosted", used when image_storage is omitted

    Returns:
        Configured FastAPI application

    Raises:
        ValueError: If storage_backend is not a known backend
    """
    if storage_backend not in IMAGE_STORAGE_BACKENDS:
        raise ValueError(
            f"IMAGE_STORAGE must be one of {sorted(IMAGE_STORAGE_BACKENDS)}, got {storage_backend!r}"
        )

    app = FastAPI(
        title="Shop Service",
        version=API_VERSION,
        lifespan=lifespan
    )

    if image_storage is None and storage_backend == "local":
        image_storage = LocalImageStorage()
    app.state.db = db
    app.state.image_storage = image_storage

    # Requests without an Origin header are not CORS requests and pass through
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(allowed_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "auth-token"],
    )

    app.add_exception_handler(ShopError, shop_error_handler)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Shop API is running"

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint."""
        return {"status": "OK", "environment": ENVIRONMENT}

    for router in routers:
        app.include_router(router)

    if isinstance(image_storage, LocalImageStorage):
        app.mount(IMAGES_PATH, StaticFiles(directory=image_storage.upload_dir), name="images")

    if OTEL_ENABLED:
        FastAPIInstrumentor.instrument_app(app)

    return app


def run() -> None:
    """Start the server."""
    setup_logging()
    logger.info("Server starting", extra={"host": HOST, "port": PORT, "environment": ENVIRONMENT})
    uvicorn.run("main:create_app", factory=True, host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    run()
