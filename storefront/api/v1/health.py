"""Health check endpoint."""

import logging

from fastapi import APIRouter, Depends

from storefront.core.config import settings
from storefront.core.dependencies import get_page_storage
from storefront.repositories.base import PageStorage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(storage: PageStorage = Depends(get_page_storage)):
    """Check storage backend connectivity."""
    storage_status = "ok"
    try:
        await storage.ping()
    except Exception:
        logger.warning("Storage health check failed", exc_info=True)
        storage_status = "error"

    return {
        "status": "ok" if storage_status == "ok" else "degraded",
        "storage": storage_status,
        "backend": settings.STORAGE_BACKEND,
        "version": "0.1.0",
    }
