"""
Company lookup in the companies database.

The slug column has no fixed name, so lookup runs an ordered list of
strategies and the first one returning a page wins:

1. one exact-match query per candidate slug property;
2. a full scan comparing slugified slug and name against the target.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Sequence

from shared.config.logging import get_logger
from shared.utils.exceptions import CompanyNotFoundError, NetworkError, NotionAPIError
from shared.utils.text import slugify

from catalog_api.schemas import Company, CompanyRecord
from catalog_api.services.notion.client import NotionClient
from catalog_api.services.notion.properties import first_image, first_text, parse_properties

logger = get_logger(__name__)


SLUG_PROPERTIES = ("Slug", "slug", "Client Slug", "client-slug")
NAME_PROPERTIES = ("Name", "Nombre", "Company")
URL_PROPERTIES = ("URL", "Url", "Website")
LOGO_PROPERTIES = ("Logo", "logo", "Image", "Imagen")
KEY_PROPERTIES = ("Clave", "clave", "Key", "Password")

DEFAULT_COMPANY_NAME = "Empresa"


# =============================================================================
# Parsing
# =============================================================================


def parse_company(page: dict[str, Any]) -> Company:
    """Build a ``Company`` from a companies-database page."""
    props = parse_properties(page.get("properties"))

    name = first_text(props, NAME_PROPERTIES, default=DEFAULT_COMPANY_NAME)
    slug = first_text(props, SLUG_PROPERTIES) or slugify(name)

    return Company(
        id=page.get("id", ""),
        name=name,
        slug=slugify(slug),
        url=first_text(props, URL_PROPERTIES),
        logo=first_image(props, LOGO_PROPERTIES),
    )


def parse_company_key(page: dict[str, Any]) -> str:
    """Secret key of a company page, trimmed. ``""`` when none is set."""
    props = parse_properties(page.get("properties"))
    return first_text(props, KEY_PROPERTIES).strip()


# =============================================================================
# Lookup Strategies
# =============================================================================


@dataclass(frozen=True)
class CompanyLookup:
    """Inputs shared by every lookup strategy."""

    notion: NotionClient
    database_id: str
    company_slug: str


CompanyStrategy = Callable[[CompanyLookup], Awaitable[dict[str, Any] | None]]


def slug_property_strategy(property_name: str) -> CompanyStrategy:
    """Exact rich-text match on one property. Query errors count as no match."""

    async def strategy(lookup: CompanyLookup) -> dict[str, Any] | None:
        try:
            data = await lookup.notion.query_database(
                lookup.database_id,
                {
                    "filter": {
                        "property": property_name,
                        "rich_text": {"equals": lookup.company_slug},
                    }
                },
            )
        except (NotionAPIError, NetworkError) as e:
            logger.debug("Slug query failed", property=property_name, error=str(e))
            return None

        results = data.get("results") or []
        return results[0] if results else None

    strategy.__name__ = f"slug_property[{property_name}]"
    return strategy


async def full_scan_strategy(lookup: CompanyLookup) -> dict[str, Any] | None:
    """Scan every company and compare normalized slug or name."""
    target = slugify(lookup.company_slug)
    pages = await lookup.notion.query_all_pages(lookup.database_id)

    for page in pages:
        company = parse_company(page)
        if slugify(company.slug) == target or slugify(company.name) == target:
            return page
    return None


DEFAULT_STRATEGIES: tuple[CompanyStrategy, ...] = (
    *(slug_property_strategy(name) for name in SLUG_PROPERTIES),
    full_scan_strategy,
)


# =============================================================================
# Resolver
# =============================================================================


class CompanyResolver:
    """
    Resolve a company by slug.

    Usage:
        resolver = CompanyResolver(notion, settings.notion_companies_database_id)
        company = await resolver.resolve("acme")
    """

    def __init__(
        self,
        notion: NotionClient,
        database_id: str,
        strategies: Sequence[CompanyStrategy] = DEFAULT_STRATEGIES,
    ):
        self.notion = notion
        self.database_id = database_id
        self.strategies = tuple(strategies)

    async def find_page(self, company_slug: str) -> dict[str, Any]:
        """
        Raw page of the company matching ``company_slug``.

        Raises:
            CompanyNotFoundError: No strategy found a match.
        """
        lookup = CompanyLookup(self.notion, self.database_id, company_slug)

        for strategy in self.strategies:
            page = await strategy(lookup)
            if page is not None:
                logger.debug(
                    "Company resolved",
                    company_slug=company_slug,
                    strategy=getattr(strategy, "__name__", repr(strategy)),
                )
                return page

        raise CompanyNotFoundError(company_slug)

    async def resolve(self, company_slug: str) -> Company:
        return parse_company(await self.find_page(company_slug))

    async def resolve_keyed(self, company_slug: str) -> CompanyRecord:
        """Company plus its secret key. For key validation only."""
        page = await self.find_page(company_slug)
        return CompanyRecord(company=parse_company(page), key=parse_company_key(page))
