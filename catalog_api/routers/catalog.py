"""
Public catalog router.
Exposes the current company's catalog as read from Notion.
No authentication required.
"""

from fastapi import APIRouter, Depends

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.exceptions import (
    CompanyNotFoundError,
    ConfigError,
    ExternalServiceError,
    InternalError,
    NetworkError,
    NotFoundError,
    NotionAPIError,
)

from catalog_api.dependencies import get_catalog_service
from catalog_api.schemas import CatalogData
from catalog_api.services.catalog.service import CatalogService

logger = get_logger(__name__)


router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/catalog", response_model=CatalogData)
async def get_catalog(service: CatalogService = Depends(get_catalog_service)) -> CatalogData:
    """
    Get the catalog of the configured company.

    Served from the in-memory cache when fresh, otherwise resolved
    through Notion.
    """
    company_slug = settings.company_slug
    try:
        settings.require_notion_credentials()
        return await service.get_catalog_data(company_slug)
    except ConfigError as e:
        raise InternalError(str(e)) from e
    except CompanyNotFoundError as e:
        raise NotFoundError(str(e), company_slug=company_slug) from e
    except (NetworkError, NotionAPIError) as e:
        raise ExternalServiceError("Notion", company_slug=company_slug, error=str(e)) from e
