"""
Company key validation for presupuesto submission.
"""

from __future__ import annotations

from shared.config.logging import get_logger, mask_secret
from shared.security.secrets import safe_compare_secret

from catalog_api.services.catalog.cache import CompanyKeyCache
from catalog_api.services.catalog.companies import CompanyResolver

logger = get_logger(__name__)


class KeyValidator:
    """
    Check a user-supplied key against the company's key in Notion.

    Fails closed: empty input or a company without a configured key never
    validates.
    """

    def __init__(self, resolver: CompanyResolver, cache: CompanyKeyCache):
        self.resolver = resolver
        self.cache = cache

    async def current_key(self, company_slug: str) -> str:
        """Cached key for the company, fetched from Notion on miss or staleness."""
        key = self.cache.get(company_slug)
        if key is not None:
            return key

        record = await self.resolver.resolve_keyed(company_slug)
        self.cache.put(company_slug, record.key)
        logger.debug("Company key refreshed", company_slug=company_slug, key=mask_secret(record.key))
        return record.key

    async def validate(self, company_slug: str, input_key: str) -> bool:
        candidate = input_key.strip()
        if not candidate:
            return False

        stored = await self.current_key(company_slug)
        if not stored:
            logger.warning("Company has no key configured", company_slug=company_slug)
            return False

        return safe_compare_secret(stored, candidate)
