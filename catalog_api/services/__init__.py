"""
Services module for business logic.

- notion/: Notion API boundary (retrying HTTP client, queries, property extraction)
- catalog/: Company and product resolution, caches, key validation
- cart/: Tiered pricing, cart state and its persistence
- orders.py: Presupuesto submission and webhook forwarding
"""
