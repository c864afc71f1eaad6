"""
Presupuesto submission router.
"""

from fastapi import APIRouter, Depends, Request

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.exceptions import AppException, InternalError

from catalog_api.dependencies import get_order_service
from catalog_api.schemas import OrderResponse
from catalog_api.services.orders import OrderService

logger = get_logger(__name__)


router = APIRouter(prefix="/api", tags=["orders"])


@router.post("/pedido", response_model=OrderResponse)
async def submit_pedido(
    request: Request,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """
    Submit a presupuesto.

    Body: ``{"key": str, "presupuesto": PresupuestoPayload}``. The body is
    read raw so that malformed JSON maps to ``INVALID_PAYLOAD`` rather
    than a validation 422.
    """
    raw_body = await request.body()
    try:
        await service.submit(raw_body)
    except AppException:
        raise
    except Exception as e:
        logger.error("Error procesando solicitud de pedido", error=repr(e), exc_info=True)
        raise InternalError(settings.order_fallback_message) from e

    return OrderResponse()
