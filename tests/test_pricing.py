"""
Tests for tiered pricing and the cart.
"""

import pytest
from hypothesis import given, settings, strategies as st
from pydantic import ValidationError

from catalog_api.schemas import Company, Product
from catalog_api.services.cart.pricing import (
    Cart,
    TierPrices,
    compute_totals,
    CartRow,
    format_currency,
    sanitize_quantity,
    unit_price,
)
from catalog_api.services.cart.storage import STORAGE_KEY, CartStorage, MemoryStore


ACME = Company(id="c1", name="Acme", slug="acme")

CAMISETA = Product(id="p1", name="Camiseta", price=10, price_x10=8)
TAZA = Product(id="p2", name="Taza", price=5)
PEGATINA = Product(id="p3", name="Pegatina", price=2, price_x100=1)


class TestUnitPrice:

    @pytest.mark.parametrize(
        "qty,expected",
        [(0, 10), (9, 10), (10, 9), (49, 9), (50, 8), (99, 8), (100, 7), (1000, 7)],
    )
    def test_full_ladder(self, qty, expected):
        prices = TierPrices(price=10, price_x10=9, price_x50=8, price_x100=7)
        assert unit_price(prices, qty) == expected

    def test_zero_tier_keeps_descending(self):
        prices = TierPrices(price=10, price_x10=0, price_x50=5, price_x100=3)

        assert unit_price(prices, 60) == 5
        assert unit_price(prices, 150) == 3
        assert unit_price(prices, 5) == 10
        assert unit_price(prices, 20) == 10

    def test_no_tiers(self):
        assert unit_price(TierPrices(price=4), 500) == 4

    def test_from_product(self):
        assert TierPrices.from_product(CAMISETA) == TierPrices(price=10, price_x10=8)


class TestSanitizeQuantity:

    @pytest.mark.parametrize(
        "value,expected",
        [
            (3, 3),
            (3.9, 3),
            ("12", 12),
            ("7.5", 7),
            (-4, 0),
            (None, 0),
            ("abc", 0),
            ("", 0),
            (float("nan"), 0),
            (float("inf"), 0),
            (10 ** 400, 0),
            (-(10 ** 400), 0),
        ],
    )
    def test_values(self, value, expected):
        assert sanitize_quantity(value) == expected


def test_format_currency():
    assert format_currency(206) == "€206.00"
    assert format_currency(8.5) == "€8.50"


class TestCart:

    def test_three_item_scenario(self):
        cart = Cart([CAMISETA, TAZA, PEGATINA])
        cart.set_quantity("p1", 12)
        cart.set_quantity("p2", 2)
        cart.set_quantity("p3", 100)

        assert [row.unit_price for row in cart.rows] == [8, 5, 1]
        assert cart.totals.subtotal == 330
        assert cart.totals.total == 206
        assert cart.totals.discount == 124

    def test_increment_and_decrement(self):
        cart = Cart([CAMISETA])
        cart.increment("p1")
        cart.increment("p1", 9)
        assert cart.quantity("p1") == 10
        assert cart.rows[0].unit_price == 8

        cart.decrement("p1", 20)
        assert cart.quantity("p1") == 0

    def test_unknown_ids_are_ignored(self):
        cart = Cart([CAMISETA])
        cart.increment("nope")
        cart.set_quantity("nope", 5)

        assert "nope" not in cart
        assert cart.quantities() == {}

    def test_products_without_id_are_skipped(self):
        cart = Cart([Product(id="", name="Fantasma", price=1), TAZA])
        assert len(cart) == 1

    def test_unnamed_product(self):
        cart = Cart([Product(id="p9", price=1)])
        assert cart.rows[0].name == "Producto"

    def test_set_quantity_sanitizes(self):
        cart = Cart([CAMISETA])
        cart.set_quantity("p1", "4.7")
        assert cart.quantity("p1") == 4

        cart.set_quantity("p1", "basura")
        assert cart.quantity("p1") == 0

    def test_reset_keeps_rows(self):
        cart = Cart([CAMISETA, TAZA])
        cart.set_quantity("p1", 3)
        cart.reset()

        assert len(cart) == 2
        assert cart.active_rows == []
        assert cart.totals.total == 0

    def test_on_change_notified_on_every_mutation(self):
        seen = []
        cart = Cart([CAMISETA], on_change=seen.append)
        cart.increment("p1")
        cart.set_quantity("p1", 10)

        assert [t.total for t in seen] == [0, 10, 80]

    def test_quantities_persisted(self):
        store = MemoryStore()
        cart = Cart([CAMISETA, TAZA], storage=CartStorage(store))
        cart.set_quantity("p1", 3)
        cart.set_quantity("p2", 0)

        assert store.get_item(STORAGE_KEY) == '{"p1": 3}'

    def test_rehydrates_known_products_only(self):
        store = MemoryStore()
        CartStorage(store).save({"p1": 12, "gone": 4})

        cart = Cart([CAMISETA, TAZA], storage=CartStorage(store))

        assert cart.quantities() == {"p1": 12}
        assert cart.totals.total == 96
        assert store.get_item(STORAGE_KEY) == '{"p1": 12}'


class TestToPresupuesto:

    def test_payload(self):
        cart = Cart([CAMISETA, TAZA, PEGATINA])
        cart.set_quantity("p1", 12)
        cart.set_quantity("p3", 100)

        payload = cart.to_presupuesto(ACME)

        assert payload.company_slug == "acme"
        assert payload.company_name == "Acme"
        assert [item.id for item in payload.items] == ["p1", "p3"]
        assert payload.items[0].unit_price == 8
        assert payload.items[0].base_unit_price == 10
        assert payload.items[0].subtotal == 96
        assert (payload.subtotal, payload.total, payload.discount) == (320, 196, 124)

        wire = payload.model_dump(by_alias=True)
        assert wire["companySlug"] == "acme"
        assert wire["items"][0]["unitPrice"] == 8

    def test_empty_cart_is_rejected(self):
        cart = Cart([CAMISETA])

        with pytest.raises(ValidationError):
            cart.to_presupuesto(ACME)


row_strategy = st.builds(
    lambda i, qty, base, x10, x50, x100: CartRow(
        id=f"p{i}", name="x", prices=TierPrices(base, x10, x50, x100), qty=qty
    ),
    st.integers(min_value=0, max_value=1000),
    st.integers(min_value=0, max_value=500),
    *(st.integers(min_value=0, max_value=1000) for _ in range(4)),
)


class TestTotalsProperties:

    @given(rows=st.lists(row_strategy, max_size=10))
    @settings(max_examples=100)
    def test_discount_invariant(self, rows):
        totals = compute_totals(rows)

        assert totals.discount >= 0
        assert totals.discount == max(0.0, totals.subtotal - totals.total)

    @given(rows=st.lists(row_strategy, max_size=10))
    @settings(max_examples=50)
    def test_zero_quantity_rows_do_not_count(self, rows):
        active = [row for row in rows if row.qty > 0]
        assert compute_totals(rows) == compute_totals(active)


def test_huge_quantity_is_clamped_to_zero():
    cart = Cart([CAMISETA])
    cart.set_quantity("p1", 10 ** 400)

    assert cart.quantity("p1") == 0
    assert cart.totals.total == 0
