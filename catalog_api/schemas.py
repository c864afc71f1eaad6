"""
Pydantic schemas for the catalog and presupuesto payloads.

Field names are snake_case in Python and camelCase on the wire
(``priceX10``, ``companySlug``...). Serialize with ``by_alias=True``.
"""

from dataclasses import dataclass, field

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr


# =============================================================================
# Catalog Schemas
# =============================================================================


class Company(BaseModel):
    """A company whose catalog can be served."""

    id: str
    name: str
    slug: str
    url: str = ""
    logo: str = ""

    model_config = {"frozen": True}


class Product(BaseModel):
    """
    A catalog product as read from the products database.

    Tier prices of 0 mean "no override at this threshold".
    """

    id: str
    name: str = ""
    category: str = ""
    price: float = 0
    price_x10: float = Field(default=0, alias="priceX10")
    price_x50: float = Field(default=0, alias="priceX50")
    price_x100: float = Field(default=0, alias="priceX100")
    description: str = ""
    image: str = ""
    company: Company | None = None

    model_config = {"frozen": True, "populate_by_name": True}


class CatalogData(BaseModel):
    """Resolved catalog for one company. Unit of the catalog cache."""

    company: Company | None = None
    products: list[Product] = Field(default_factory=list)

    model_config = {"frozen": True}


@dataclass(frozen=True)
class CompanyRecord:
    """Company plus its secret key. Never serialized to clients."""

    company: Company
    key: str = field(default="", repr=False)


# =============================================================================
# Presupuesto Schemas
# =============================================================================


class PresupuestoItem(BaseModel):
    """One line of a submitted presupuesto."""

    id: StrictStr
    name: StrictStr
    qty: StrictInt = Field(ge=0)
    unit_price: StrictFloat = Field(alias="unitPrice")
    base_unit_price: StrictFloat = Field(alias="baseUnitPrice")
    subtotal: StrictFloat

    model_config = {"populate_by_name": True}


class PresupuestoPayload(BaseModel):
    """
    Quote built from the cart.

    ``subtotal`` is the sum at base price, ``total`` the sum at the applied
    tier price and ``discount = max(0, subtotal - total)``.
    """

    company_name: StrictStr = Field(alias="companyName")
    company_slug: StrictStr = Field(alias="companySlug")
    items: list[PresupuestoItem] = Field(min_length=1)
    subtotal: StrictFloat
    discount: StrictFloat
    total: StrictFloat

    model_config = {"populate_by_name": True}


class OrderResponse(BaseModel):
    """Successful order submission."""

    success: bool = True


class RevalidateResponse(BaseModel):
    """Result of an on-demand revalidation."""

    revalidated: bool
    now: int  # epoch milliseconds
    message: str = "Index page queued for revalidation"
