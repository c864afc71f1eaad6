"""
Catalog API main application.
Entry point for the FastAPI server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config.logging import get_logger, setup_logging
from shared.config.settings import settings
from shared.utils.exceptions import AppException

from catalog_api.routers.catalog import router as catalog_router
from catalog_api.routers.health import router as health_router
from catalog_api.routers.orders import router as orders_router
from catalog_api.routers.revalidate import router as revalidate_router

logger = get_logger(__name__)


DEFAULT_ORIGINS = [
    "http://localhost:4321",  # Astro dev server
    "http://127.0.0.1:4321",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    config_errors = settings.validate_production_secrets()
    if config_errors:
        for error in config_errors:
            logger.error("Configuration error: %s", error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(config_errors)}. "
                "Server will not start with insecure configuration."
            )

    logger.info(
        "Starting catalog API",
        port=settings.rest_api_port,
        env=settings.environment,
        company_slug=settings.company_slug,
    )

    yield

    logger.info("Shutting down catalog API")


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render HTTP errors as ``{"success": false, "code", "message"}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "code": exc.code, "message": exc.detail},
        headers=exc.headers,
    )


def get_allowed_origins() -> list[str]:
    if settings.allowed_origins:
        return [origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()]
    return DEFAULT_ORIGINS


app = FastAPI(
    title="Catalog API",
    description="Notion-backed product catalog and presupuesto submission",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(AppException, app_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(catalog_router)
app.include_router(orders_router)
app.include_router(revalidate_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "catalog_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
