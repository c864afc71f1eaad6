"""
Notion API boundary.
"""

from catalog_api.services.notion.client import NotionClient
from catalog_api.services.notion.http import RetryConfig, RetryingHttpClient

__all__ = ["NotionClient", "RetryConfig", "RetryingHttpClient"]
