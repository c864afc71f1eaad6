"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

from shared.utils.text import slugify


DEFAULT_CLIENT = "CrossSaiyan"
DEFAULT_WEBHOOK_URL = "https://n8n.mrprinteto.com/webhook-test/nuevo-pedido"


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    # Notion (content store)
    notion_token: str = ""
    notion_database_id: str = ""  # products database
    notion_companies_database_id: str = ""
    notion_api_url: str = "https://api.notion.com/v1"
    notion_version: str = "2022-06-28"
    notion_page_size: int = 100

    # Company whose catalog is served. Free text, slugified on use.
    notion_client: str = DEFAULT_CLIENT

    # Outbound HTTP
    http_timeout_seconds: float = 5.0  # Per attempt
    http_max_retries: int = 3

    # Caches (catalog data and company keys)
    catalog_cache_ttl_seconds: float = 60 * 60

    # Order forwarding (n8n automation)
    n8n_pedido_webhook_url: str = DEFAULT_WEBHOOK_URL
    webhook_timeout_seconds: float = 10.0
    order_fallback_message: str = (
        "Este pedido debe ser solicitado por email. Escribemos a info@mrprinteto.com."
    )

    # On-demand revalidation
    revalidate_secret: str = ""

    # Cart persistence used by the CLI
    cart_storage_path: str = ".presupuesto.json"

    # Server
    rest_api_port: int = 8000
    # Comma-separated list of allowed origins (empty uses default localhost list)
    allowed_origins: str = ""

    # Environment
    environment: str = "development"
    debug: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def company_slug(self) -> str:
        """Slug of the company whose catalog is served."""
        return slugify(self.notion_client.strip() or DEFAULT_CLIENT)

    @property
    def webhook_url(self) -> str:
        """Order webhook. An empty env value falls back to the default."""
        return self.n8n_pedido_webhook_url.strip() or DEFAULT_WEBHOOK_URL

    def require_notion_credentials(self, products: bool = True) -> None:
        """
        Ensure the Notion credentials needed for a request are present.

        Args:
            products: Also require the products database id. Key validation
                only touches the companies database.

        Raises:
            ConfigError: If any required value is empty.
        """
        from shared.utils.exceptions import ConfigError

        missing = []
        if not self.notion_token:
            missing.append("NOTION_TOKEN")
        if products and not self.notion_database_id:
            missing.append("NOTION_DATABASE_ID")
        if not self.notion_companies_database_id:
            missing.append("NOTION_COMPANIES_DATABASE_ID")

        if missing:
            raise ConfigError(f"Faltan {', '.join(missing)} en .env")

    def validate_production_secrets(self) -> list[str]:
        """
        Validate that secrets are properly configured for production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if not self.notion_token:
                errors.append("NOTION_TOKEN must be set in production")

            if not self.notion_database_id or not self.notion_companies_database_id:
                errors.append(
                    "NOTION_DATABASE_ID and NOTION_COMPANIES_DATABASE_ID must be set in production"
                )

            if not self.revalidate_secret or len(self.revalidate_secret) < 16:
                errors.append(
                    "REVALIDATE_SECRET must be at least 16 characters in production"
                )

            if self.debug:
                errors.append("DEBUG must be False in production")

            if not self.allowed_origins:
                errors.append(
                    "ALLOWED_ORIGINS must be set in production (comma-separated list of allowed domains)"
                )

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience export
settings = get_settings()
