"""
Catalog resolution: companies, products, caches and key validation.
"""
