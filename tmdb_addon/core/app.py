"""
FastAPI Application Factory
Creates and configures the FastAPI app instance
"""
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tmdb_addon.api.endpoints import catalog, configure, health, manifest, meta
from tmdb_addon.core.config import settings
from tmdb_addon.core.exceptions import AddonError
from tmdb_addon.services.addon import AddonServices
import logging

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


async def addon_error_handler(request: Request, exc: AddonError) -> JSONResponse:
    """Map addon errors onto JSON error responses"""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": type(exc).__name__, "detail": exc.message},
    )


def create_app(services: Optional[AddonServices] = None) -> FastAPI:
    """
    Create and configure FastAPI application

    Args:
        services: Pre-built service container (tests inject mocked clients)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting TMDB Addon")
        logger.info("Base URL: %s", settings.BASE_URL)
        if not settings.TMDB_API_KEY:
            logger.warning("TMDB_API_KEY is not set; users must supply their own key")

        yield

        logger.info("Shutting down TMDB Addon")
        await app.state.services.close()

    app = FastAPI(
        title="TMDB Stremio Addon",
        description="Movie and series catalogs and metadata from TMDB and MDBList",
        version="1.0.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.services = services or AddonServices()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AddonError, addon_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(configure.router)
    app.include_router(manifest.router)
    app.include_router(catalog.router)
    app.include_router(meta.router)

    return app
