"""FastAPI application entry point for the SignalWatch connectivity backend."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from signalwatch.api.exception_handlers import register_exception_handlers
from signalwatch.api.middleware import RequestIDMiddleware
from signalwatch.api.routes import alerts, connectivity, places
from signalwatch.core import close_db, get_settings, init_db
from signalwatch.core.logging import get_logger, setup_logging
from signalwatch.services.places_client import close_places_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle - startup and shutdown events."""
    # Initialize logging first (before any other initialization)
    setup_logging()

    settings = get_settings()
    await init_db()
    logger.info(f"{settings.app_name} {settings.app_version} started")

    try:
        yield
    finally:
        await close_places_client()
        await close_db()
        logger.info("Database connection closed")


app = FastAPI(
    title="SignalWatch API",
    description="Connectivity monitoring with low-signal alerting",
    version=get_settings().app_version,
    lifespan=lifespan,
)

# Add request ID middleware for log correlation
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(alerts.router)
app.include_router(connectivity.router)
app.include_router(places.router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: 200 whenever the process can serve requests."""
    return {"status": "alive"}


def serve() -> None:
    """Run the API with uvicorn using the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    serve()
