"""
Tests for the TTL caches.
"""

from catalog_api.schemas import CatalogData, Company, Product
from catalog_api.services.catalog.cache import CatalogCache, CompanyKeyCache, TTLCache


ACME = Company(id="c1", name="Acme", slug="acme")


def catalog(*product_ids: str) -> CatalogData:
    return CatalogData(company=ACME, products=[Product(id=i, name=i, price=1) for i in product_ids])


class TestTTLCache:

    def test_miss(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        assert cache.get("a") is None
        assert not cache.contains("a")

    def test_hit_until_ttl(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        cache.put("a", 1)

        clock.advance(9.9)
        assert cache.get("a") == 1

        clock.advance(0.1)
        assert cache.get("a") is None
        assert not cache.contains("a")

    def test_put_replaces_and_restarts_age(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        cache.put("a", 1)
        clock.advance(8)
        cache.put("a", 2)
        clock.advance(8)

        assert cache.get("a") == 2

    def test_invalidate_and_clear(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        cache.put("a", 1)
        cache.put("b", 2)

        cache.invalidate("a")
        cache.invalidate("missing")
        assert cache.get("a") is None
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0

    def test_falsy_values_are_hits(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        cache.put("a", "")
        assert cache.get("a") == ""
        assert cache.contains("a")


class TestCatalogCache:

    def test_stores_non_empty_catalog(self, clock):
        cache = CatalogCache(ttl=3600, clock=clock)
        data = catalog("p1")
        cache.put("acme", data)

        assert cache.get("acme") is data

    def test_empty_catalog_not_stored(self, clock):
        cache = CatalogCache(ttl=3600, clock=clock)
        cache.put("acme", catalog())

        assert cache.get("acme") is None
        assert len(cache) == 0

    def test_empty_catalog_keeps_previous_entry(self, clock):
        cache = CatalogCache(ttl=3600, clock=clock)
        cache.put("acme", catalog("p1"))
        cache.put("acme", catalog())

        assert [p.id for p in cache.get("acme").products] == ["p1"]


class TestCompanyKeyCache:

    def test_empty_key_is_cached(self, clock):
        cache = CompanyKeyCache(ttl=60, clock=clock)
        cache.put("acme", "")

        assert cache.get("acme") == ""
