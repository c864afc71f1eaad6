"""
Catalog orchestration: cache lookup, then company and product resolution.
"""

from __future__ import annotations

from shared.config.logging import get_logger

from catalog_api.schemas import CatalogData
from catalog_api.services.catalog.cache import CatalogCache
from catalog_api.services.catalog.companies import CompanyResolver
from catalog_api.services.catalog.products import CatalogResolver

logger = get_logger(__name__)


class CatalogService:
    """
    Serve ``CatalogData`` for a company slug, refreshing through Notion when
    the cache has nothing fresh.

    Usage:
        service = CatalogService(companies, products, cache)
        catalog = await service.get_catalog_data("acme")
    """

    def __init__(
        self,
        companies: CompanyResolver,
        products: CatalogResolver,
        cache: CatalogCache,
    ):
        self.companies = companies
        self.products = products
        self.cache = cache

    async def get_catalog_data(self, company_slug: str) -> CatalogData:
        """
        Raises:
            CompanyNotFoundError: No company matches ``company_slug``.
            NetworkError: Notion could not be reached.
            NotionAPIError: The fallback scan was rejected by Notion.
        """
        cached = self.cache.get(company_slug)
        if cached is not None:
            return cached

        company = await self.companies.resolve(company_slug)
        products = await self.products.resolve(company)
        data = CatalogData(company=company, products=products)

        self.cache.put(company_slug, data)
        logger.info("Catalog loaded", company_slug=company_slug, products=len(products))
        return data
