"""
FastAPI dependencies and process-wide caches.

The caches live for the whole process; HTTP clients are opened per request.
"""

from typing import AsyncIterator

import httpx
from fastapi import Depends

from shared.config.settings import settings

from catalog_api.services.catalog.cache import CatalogCache, CompanyKeyCache
from catalog_api.services.catalog.companies import CompanyResolver
from catalog_api.services.catalog.keys import KeyValidator
from catalog_api.services.catalog.products import CatalogResolver
from catalog_api.services.catalog.service import CatalogService
from catalog_api.services.notion.client import NotionClient
from catalog_api.services.notion.http import RetryingHttpClient
from catalog_api.services.orders import OrderService


catalog_cache = CatalogCache(ttl=settings.catalog_cache_ttl_seconds)
company_key_cache = CompanyKeyCache(ttl=settings.catalog_cache_ttl_seconds)


def clear_caches() -> None:
    catalog_cache.clear()
    company_key_cache.clear()


async def get_notion_http() -> AsyncIterator[RetryingHttpClient]:
    async with RetryingHttpClient() as http:
        yield http


async def get_webhook_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.webhook_timeout_seconds) as client:
        yield client


def get_notion_client(http: RetryingHttpClient = Depends(get_notion_http)) -> NotionClient:
    return NotionClient(http, token=settings.notion_token)


def get_company_resolver(notion: NotionClient = Depends(get_notion_client)) -> CompanyResolver:
    return CompanyResolver(notion, settings.notion_companies_database_id)


def get_catalog_service(
    notion: NotionClient = Depends(get_notion_client),
    companies: CompanyResolver = Depends(get_company_resolver),
) -> CatalogService:
    products = CatalogResolver(
        notion,
        products_database_id=settings.notion_database_id,
        companies_database_id=settings.notion_companies_database_id,
    )
    return CatalogService(companies, products, catalog_cache)


def get_key_validator(companies: CompanyResolver = Depends(get_company_resolver)) -> KeyValidator:
    return KeyValidator(companies, company_key_cache)


def get_order_service(
    key_validator: KeyValidator = Depends(get_key_validator),
    webhook_client: httpx.AsyncClient = Depends(get_webhook_client),
) -> OrderService:
    return OrderService(key_validator, webhook_client)
