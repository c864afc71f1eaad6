"""
Centralized exceptions for consistent error handling.

Two families live here:

- Domain errors (``CatalogError`` subclasses) raised by the Notion services,
  the caches and the cart engine. They carry no HTTP semantics.
- HTTP errors (``AppException`` subclasses) raised by routers and the order
  service. They are logged on construction and rendered by the app's
  exception handler as ``{"success": false, "code": ..., "message": ...}``.

Usage:
    from shared.utils.exceptions import CompanyNotFoundError, InvalidKeyError

    raise CompanyNotFoundError("acme")
    raise InvalidKeyError(company_slug="acme")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Domain Errors
# =============================================================================


class CatalogError(Exception):
    """Base class for catalog domain errors."""


class ConfigError(CatalogError):
    """Required configuration (credentials, database ids) is missing or invalid."""


class NetworkError(CatalogError):
    """An outbound call failed after exhausting its retries."""


class NotionAPIError(CatalogError):
    """Notion answered with a non-2xx status that is not worth retrying."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Notion API {status_code}: {body}")


class CompanyNotFoundError(CatalogError):
    """No company in the companies database matches the requested slug."""

    def __init__(self, company_slug: str):
        self.company_slug = company_slug
        super().__init__(
            f'No se encontro la empresa "{company_slug}" en NOTION_COMPANIES_DATABASE_ID'
        )


class StorageError(CatalogError):
    """Cart state could not be read from or written to its store."""


# =============================================================================
# HTTP Errors
# =============================================================================


class AppException(HTTPException):
    """
    Base HTTP exception with automatic logging.

    All HTTP-facing exceptions inherit from this class to get consistent
    logging and a machine-readable ``code`` for the response body.
    """

    code = "ERROR"

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, code=self.code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


class InvalidPayloadError(AppException):
    """Malformed or incomplete order submission (400)."""

    code = "INVALID_PAYLOAD"

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class InvalidKeyError(AppException):
    """Submitted company key does not match (401)."""

    code = "INVALID_KEY"

    def __init__(self, detail: str = "Clave incorrecta.", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class InvalidSecretError(AppException):
    """Revalidation secret mismatch (401)."""

    code = "INVALID_SECRET"

    def __init__(self, detail: str = "Invalid secret", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class NotFoundError(AppException):
    """Entity not found (404)."""

    code = "NOT_FOUND"

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class WebhookError(AppException):
    """Downstream automation webhook unreachable or non-2xx (502)."""

    code = "WEBHOOK_ERROR"

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            log_level="error",
            **log_context,
        )


class ExternalServiceError(AppException):
    """Upstream content service failed (502)."""

    code = "UPSTREAM_ERROR"

    def __init__(self, service: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Error al comunicarse con {service}",
            log_level="error",
            service=service,
            **log_context,
        )


class InternalError(AppException):
    """Unexpected failure (500)."""

    code = "INTERNAL_ERROR"

    def __init__(self, detail: str = "Error interno del servidor", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )
