"""
Tests for POST /api/revalidate.
"""

import time

import pytest

from catalog_api.dependencies import catalog_cache, company_key_cache
from catalog_api.schemas import CatalogData, Company, Product


@pytest.fixture
def warm_caches():
    catalog_cache.put("acme", CatalogData(
        company=Company(id="c1", name="Acme", slug="acme"),
        products=[Product(id="p1", name="Camiseta", price=10)],
    ))
    company_key_cache.put("acme", "clave-123")


class TestRevalidate:

    def test_valid_secret_clears_caches(self, client, warm_caches):
        before = int(time.time() * 1000)

        response = client.post("/api/revalidate", params={"secret": "revalidate-secret-123"})

        assert response.status_code == 200
        data = response.json()
        assert data["revalidated"] is True
        assert data["now"] >= before
        assert catalog_cache.get("acme") is None
        assert company_key_cache.get("acme") is None

    @pytest.mark.parametrize("params", [{}, {"secret": ""}, {"secret": "wrong"}, {"secret": "revalidate-secret-12"}])
    def test_invalid_secret(self, client, warm_caches, params):
        response = client.post("/api/revalidate", params=params)

        assert response.status_code == 401
        assert response.json() == {"success": False, "code": "INVALID_SECRET", "message": "Invalid secret"}
        assert catalog_cache.get("acme") is not None

    def test_unconfigured_secret_rejects_everything(self, client, configured_settings, monkeypatch):
        monkeypatch.setattr(configured_settings, "revalidate_secret", "")

        response = client.post("/api/revalidate", params={"secret": ""})

        assert response.status_code == 401
