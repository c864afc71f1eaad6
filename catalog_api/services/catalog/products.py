"""
Product lookup for a resolved company.

The relation property linking products to their company can have any name,
so resolution goes in layers:

1. discover relation properties of the products database that point at the
   companies database (failures yield no names);
2. query ``relation contains <company id>`` for every candidate property and
   id format, first non-empty answer wins;
3. scan the whole products database and match relation ids client-side,
   including relation properties of any name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Sequence

from shared.config.logging import get_logger
from shared.utils.exceptions import NetworkError, NotionAPIError
from shared.utils.text import normalize_notion_id

from catalog_api.schemas import Company, Product
from catalog_api.services.notion.client import NotionClient
from catalog_api.services.notion.properties import (
    all_relation_ids,
    image_value,
    number_value,
    parse_properties,
    relation_ids,
    text_value,
)

logger = get_logger(__name__)


RELATION_ALIASES = ("Empresa", "Empresas", "Company")


def parse_product(page: dict[str, Any], company: Company | None = None) -> Product:
    """Build a ``Product`` from a products-database page."""
    props = parse_properties(page.get("properties"))

    return Product(
        id=page.get("id", ""),
        name=text_value(props.get("Name")),
        category=text_value(props.get("Category")),
        price=number_value(props.get("Price")),
        price_x10=number_value(props.get("Price_x10")),
        price_x50=number_value(props.get("Price_x50")),
        price_x100=number_value(props.get("Price_x100")),
        description=text_value(props.get("Description")),
        image=image_value(props.get("Image")),
        company=company,
    )


def company_id_variants(company_id: str) -> tuple[str, ...]:
    """Raw id first, then its hyphen-less lowercase form, without duplicates."""
    return tuple(dict.fromkeys([company_id, normalize_notion_id(company_id)]))


async def discover_relation_properties(
    notion: NotionClient,
    products_database_id: str,
    companies_database_id: str,
) -> list[str]:
    """
    Names of product properties declared as relations to the companies database.

    Returns ``[]`` when the schema cannot be fetched.
    """
    try:
        schema = await notion.get_database_schema(products_database_id)
    except (NotionAPIError, NetworkError) as e:
        logger.debug("Schema discovery failed", error=str(e))
        return []

    target = normalize_notion_id(companies_database_id)
    names = []
    for name, prop in (schema.get("properties") or {}).items():
        if not isinstance(prop, dict) or prop.get("type") != "relation":
            continue
        related_db = (prop.get("relation") or {}).get("database_id")
        if related_db and normalize_notion_id(related_db) == target:
            names.append(name)
    return names


# =============================================================================
# Lookup Strategies
# =============================================================================


@dataclass(frozen=True)
class ProductLookup:
    """Inputs shared by every product lookup strategy."""

    notion: NotionClient
    database_id: str
    company: Company
    candidates: tuple[str, ...]
    id_variants: tuple[str, ...]


ProductStrategy = Callable[[ProductLookup], Awaitable[list[dict[str, Any]] | None]]


async def relation_query_strategy(lookup: ProductLookup) -> list[dict[str, Any]] | None:
    """Filtered query per candidate property and id format."""
    for property_name in lookup.candidates:
        for company_id in lookup.id_variants:
            try:
                data = await lookup.notion.query_database(
                    lookup.database_id,
                    {
                        "filter": {
                            "property": property_name,
                            "relation": {"contains": company_id},
                        }
                    },
                )
            except (NotionAPIError, NetworkError) as e:
                logger.debug(
                    "Relation query failed",
                    property=property_name,
                    company_id=company_id,
                    error=str(e),
                )
                continue

            results = data.get("results") or []
            if results:
                return results
    return None


async def full_scan_strategy(lookup: ProductLookup) -> list[dict[str, Any]] | None:
    """
    Scan every product and keep pages related to the company.

    Relation ids come from the candidate properties and from every
    relation-typed property, even ones the schema does not link to the
    companies database.
    """
    wanted = {normalize_notion_id(company_id) for company_id in lookup.id_variants}
    pages = await lookup.notion.query_all_pages(lookup.database_id)

    matched = []
    for page in pages:
        props = parse_properties(page.get("properties"))
        ids = relation_ids(props, lookup.candidates) + all_relation_ids(props)
        if wanted.intersection(normalize_notion_id(i) for i in ids):
            matched.append(page)
    return matched


DEFAULT_STRATEGIES: tuple[ProductStrategy, ...] = (
    relation_query_strategy,
    full_scan_strategy,
)


# =============================================================================
# Resolver
# =============================================================================


class CatalogResolver:
    """
    Resolve the products of a company.

    Usage:
        resolver = CatalogResolver(notion, products_db_id, companies_db_id)
        products = await resolver.resolve(company)
    """

    def __init__(
        self,
        notion: NotionClient,
        products_database_id: str,
        companies_database_id: str,
        aliases: Sequence[str] = RELATION_ALIASES,
        strategies: Sequence[ProductStrategy] = DEFAULT_STRATEGIES,
    ):
        self.notion = notion
        self.products_database_id = products_database_id
        self.companies_database_id = companies_database_id
        self.aliases = tuple(aliases)
        self.strategies = tuple(strategies)

    async def relation_candidates(self) -> tuple[str, ...]:
        """Discovered relation names first, then the fixed aliases."""
        discovered = await discover_relation_properties(
            self.notion, self.products_database_id, self.companies_database_id
        )
        return tuple(dict.fromkeys([*discovered, *self.aliases]))

    async def find_pages(self, company: Company) -> list[dict[str, Any]]:
        lookup = ProductLookup(
            notion=self.notion,
            database_id=self.products_database_id,
            company=company,
            candidates=await self.relation_candidates(),
            id_variants=company_id_variants(company.id),
        )

        for strategy in self.strategies:
            pages = await strategy(lookup)
            if pages:
                logger.debug(
                    "Products resolved",
                    company_slug=company.slug,
                    strategy=strategy.__name__,
                    count=len(pages),
                )
                return pages

        logger.warning("No products found for company", company_slug=company.slug)
        return []

    async def resolve(self, company: Company) -> list[Product]:
        pages = await self.find_pages(company)
        return [parse_product(page, company) for page in pages]
