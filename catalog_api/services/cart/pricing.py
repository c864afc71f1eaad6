"""
Tiered pricing and the presupuesto cart.

Unit price is picked from a threshold ladder, highest first. A tier price
of 0 means "no price at this tier" and the ladder keeps descending:

    qty >= 100 and price_x100 > 0  ->  price_x100
    qty >= 50  and price_x50  > 0  ->  price_x50
    qty >= 10  and price_x10  > 0  ->  price_x10
    otherwise                      ->  price
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from catalog_api.schemas import Company, PresupuestoItem, PresupuestoPayload, Product
from catalog_api.services.cart.storage import CartStorage


@dataclass(frozen=True)
class TierPrices:
    price: float = 0.0
    price_x10: float = 0.0
    price_x50: float = 0.0
    price_x100: float = 0.0

    @classmethod
    def from_product(cls, product: Product) -> TierPrices:
        return cls(
            price=product.price,
            price_x10=product.price_x10,
            price_x50=product.price_x50,
            price_x100=product.price_x100,
        )

    def ladder(self) -> tuple[tuple[int, float], ...]:
        return ((100, self.price_x100), (50, self.price_x50), (10, self.price_x10))


def unit_price(prices: TierPrices, qty: int) -> float:
    """Unit price applied to ``qty`` units."""
    for threshold, tier_price in prices.ladder():
        if qty >= threshold and tier_price > 0:
            return tier_price
    return prices.price


def sanitize_quantity(value: Any) -> int:
    """
    Floor to an integer and clamp at 0. Anything that is not a finite
    number (``None``, ``"abc"``, ``nan``, ``inf``) becomes 0.
    """
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, math.floor(number))


def format_currency(value: float) -> str:
    return f"€{value:.2f}"


@dataclass
class CartRow:
    """One product line. Rows are never removed, only zeroed."""

    id: str
    name: str
    prices: TierPrices
    qty: int = 0

    @property
    def unit_price(self) -> float:
        return unit_price(self.prices, self.qty)

    @property
    def base_subtotal(self) -> float:
        return self.qty * self.prices.price

    @property
    def subtotal(self) -> float:
        return self.qty * self.unit_price


@dataclass(frozen=True)
class CartTotals:
    subtotal: float = 0.0  # at base price
    total: float = 0.0  # at applied tier price
    discount: float = 0.0


def compute_totals(rows: Iterable[CartRow]) -> CartTotals:
    subtotal = 0.0
    total = 0.0
    for row in rows:
        if row.qty <= 0:
            continue
        subtotal += row.base_subtotal
        total += row.subtotal
    return CartTotals(subtotal=subtotal, total=total, discount=max(0.0, subtotal - total))


class Cart:
    """
    Quantities per product with persisted state.

    Every mutation recomputes the totals, notifies ``on_change`` and saves
    the quantities. Mutations on unknown product ids are ignored.

    Usage:
        cart = Cart(catalog.products, storage=CartStorage(MemoryStore()))
        cart.increment(product_id)
        cart.set_quantity(other_id, 12)
        payload = cart.to_presupuesto(catalog.company)
    """

    def __init__(
        self,
        products: Iterable[Product],
        storage: CartStorage | None = None,
        on_change: Callable[[CartTotals], None] | None = None,
    ):
        self.storage = storage
        self.on_change = on_change
        self._rows: dict[str, CartRow] = {}

        for product in products:
            if not product.id:
                continue
            self._rows[product.id] = CartRow(
                id=product.id,
                name=product.name or "Producto",
                prices=TierPrices.from_product(product),
            )

        if storage is not None:
            for product_id, qty in storage.load().items():
                row = self._rows.get(product_id)
                if row is not None:
                    row.qty = sanitize_quantity(qty)

        self._totals = compute_totals(self._rows.values())
        self._changed()

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> list[CartRow]:
        return list(self._rows.values())

    @property
    def active_rows(self) -> list[CartRow]:
        return [row for row in self._rows.values() if row.qty > 0]

    @property
    def totals(self) -> CartTotals:
        return self._totals

    def quantity(self, product_id: str) -> int:
        row = self._rows.get(product_id)
        return row.qty if row else 0

    def quantities(self) -> dict[str, int]:
        return {row.id: row.qty for row in self.active_rows}

    def increment(self, product_id: str, delta: int = 1) -> None:
        row = self._rows.get(product_id)
        if row is None:
            return
        self._set(row, row.qty + delta)

    def decrement(self, product_id: str, delta: int = 1) -> None:
        self.increment(product_id, -delta)

    def set_quantity(self, product_id: str, value: Any) -> None:
        row = self._rows.get(product_id)
        if row is None:
            return
        self._set(row, value)

    def reset(self) -> None:
        """Zero every row."""
        for row in self._rows.values():
            row.qty = 0
        self._changed()

    def _set(self, row: CartRow, value: Any) -> None:
        row.qty = sanitize_quantity(value)
        self._changed()

    def _changed(self) -> None:
        self._totals = compute_totals(self._rows.values())
        if self.on_change is not None:
            self.on_change(self._totals)
        if self.storage is not None:
            self.storage.save(self.quantities())

    def to_presupuesto(self, company: Company | None) -> PresupuestoPayload:
        """
        Build the order payload from the rows with a positive quantity.

        Raises:
            pydantic.ValidationError: The cart has no positive quantity.
        """
        items = [
            PresupuestoItem(
                id=row.id,
                name=row.name,
                qty=row.qty,
                unit_price=row.unit_price,
                base_unit_price=row.prices.price,
                subtotal=row.subtotal,
            )
            for row in self.active_rows
        ]
        totals = self.totals
        return PresupuestoPayload(
            company_name=company.name if company else "",
            company_slug=company.slug if company else "",
            items=items,
            subtotal=totals.subtotal,
            discount=totals.discount,
            total=totals.total,
        )
