"""
Catalog API: Notion-backed product catalog and presupuesto submission.
"""
