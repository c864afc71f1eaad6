"""
Presupuesto submission: payload validation, key check and webhook forwarding.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from shared.config.logging import get_logger
from shared.config.settings import Settings, settings as default_settings
from shared.utils.exceptions import InvalidKeyError, InvalidPayloadError, WebhookError

from catalog_api.schemas import PresupuestoPayload
from catalog_api.services.catalog.keys import KeyValidator

logger = get_logger(__name__)


def parse_order_request(raw_body: bytes | str, fallback_message: str) -> tuple[str, PresupuestoPayload]:
    """
    Extract ``(key, presupuesto)`` from a raw request body.

    Raises:
        InvalidPayloadError: Empty body, invalid JSON, missing or blank key,
            or a presupuesto that fails validation.
    """
    if not raw_body:
        raise InvalidPayloadError(fallback_message, reason="empty body")

    try:
        body: Any = json.loads(raw_body)
    except ValueError:
        raise InvalidPayloadError(fallback_message, reason="invalid json") from None

    if not isinstance(body, dict):
        raise InvalidPayloadError(fallback_message, reason="body is not an object")

    key = body.get("key")
    key = key.strip() if isinstance(key, str) else ""
    if not key:
        raise InvalidPayloadError(fallback_message, reason="missing key")

    try:
        presupuesto = PresupuestoPayload.model_validate(body.get("presupuesto"))
    except ValidationError as e:
        raise InvalidPayloadError(
            fallback_message, reason="invalid presupuesto", errors=e.error_count()
        ) from None

    return key, presupuesto


class OrderService:
    """
    Accept a presupuesto for the configured company and forward it to the
    automation webhook.

    Usage:
        service = OrderService(key_validator, webhook_client)
        await service.submit(await request.body())
    """

    def __init__(
        self,
        key_validator: KeyValidator,
        webhook_client: httpx.AsyncClient,
        settings: Settings | None = None,
    ):
        self.key_validator = key_validator
        self.webhook_client = webhook_client
        self.settings = settings or default_settings

    async def submit(self, raw_body: bytes | str) -> None:
        """
        Raises:
            InvalidPayloadError: The body is malformed.
            InvalidKeyError: The key does not match the company's key.
            WebhookError: The webhook is unreachable or answered non-2xx.
            ConfigError: Notion credentials are missing.
        """
        fallback = self.settings.order_fallback_message
        key, presupuesto = parse_order_request(raw_body, fallback)

        self.settings.require_notion_credentials(products=False)
        company_slug = self.settings.company_slug

        if not await self.key_validator.validate(company_slug, key):
            raise InvalidKeyError(company_slug=company_slug)

        await self.forward(company_slug, presupuesto)
        logger.info(
            "Presupuesto forwarded",
            company_slug=company_slug,
            items=len(presupuesto.items),
            total=presupuesto.total,
        )

    async def forward(self, company_slug: str, presupuesto: PresupuestoPayload) -> None:
        fallback = self.settings.order_fallback_message
        body = {
            "companySlug": company_slug,
            "presupuesto": presupuesto.model_dump(by_alias=True),
            "requestedAt": datetime.now(timezone.utc).isoformat(),
        }

        try:
            response = await self.webhook_client.post(
                self.settings.webhook_url,
                json=body,
                timeout=self.settings.webhook_timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise WebhookError(fallback, error=repr(e)) from e

        if not response.is_success:
            raise WebhookError(fallback, webhook_status=response.status_code)
