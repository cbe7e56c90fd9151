"""
FastAPI Server - Main Application Entry Point.

This module sets up the FastAPI application with all routers
and middleware.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.exceptions import setup_exception_handlers
from api.routers import (
    health_router,
    layout_router,
    navigation_router,
    sidebar_router,
    tenants_router,
    ui_settings_router,
)
from app_settings import settings
from navigation import get_navigation_client
from utils.logging import get_logger, request_logging_middleware, setup_logging

setup_logging(
    level=settings.log_level,
    json_format=settings.use_json_logs,
    module_levels={"navigation": "DEBUG"} if settings.debug else None,
)
logger = get_logger("api.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup checks and shutdown cleanup."""
    missing = settings.validate_production_settings()
    if missing:
        logger.error(f"[STARTUP] Missing required settings for production: {', '.join(missing)}")
        raise RuntimeError(f"Missing required settings: {', '.join(missing)}")

    nav = get_navigation_client()
    logger.info(f"[STARTUP] Navigation service ready (environment={settings.environment}, store={nav.store_name})")

    yield

    close = getattr(nav.store, "close", None)
    if close is not None:
        await close()
    logger.info("[SHUTDOWN] Navigation service stopped")


app = FastAPI(
    title="SIP Navigation API",
    description="Role-aware navigation, sidebar grouping and layout persistence",
    version="1.0.0",
    lifespan=lifespan,
)

setup_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


@app.middleware("http")
async def logging_middleware(request, call_next):
    return await request_logging_middleware(request, call_next)


app.include_router(health_router)
app.include_router(navigation_router)
app.include_router(layout_router)
app.include_router(sidebar_router)
app.include_router(ui_settings_router)
app.include_router(tenants_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.server:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
