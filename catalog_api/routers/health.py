"""
Health check endpoint.
"""

from fastapi import APIRouter

from shared.config.settings import settings


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check():
    """
    Basic health check endpoint.
    Returns service status without checking Notion.
    """
    return {
        "status": "healthy",
        "service": "catalog-api",
        "environment": settings.environment,
    }
