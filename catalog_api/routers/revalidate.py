"""
On-demand revalidation.

Called by the Notion automation when catalog content changes. Drops the
cached catalog and company keys so the next request reads Notion again.

Usage: POST /api/revalidate?secret=<REVALIDATE_SECRET>
"""

import time

from fastapi import APIRouter

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.security.secrets import safe_compare_secret
from shared.utils.exceptions import InvalidSecretError

from catalog_api.dependencies import clear_caches
from catalog_api.schemas import RevalidateResponse

logger = get_logger(__name__)


router = APIRouter(prefix="/api", tags=["revalidate"])


@router.post("/revalidate", response_model=RevalidateResponse)
def revalidate(secret: str = "") -> RevalidateResponse:
    if not settings.revalidate_secret or not safe_compare_secret(settings.revalidate_secret, secret):
        raise InvalidSecretError()

    clear_caches()
    logger.info("Catalog caches cleared on revalidation")
    return RevalidateResponse(revalidated=True, now=int(time.time() * 1000))
