"""Store management endpoints."""

from fastapi import APIRouter, Depends

from storefront.core.dependencies import get_page_storage, get_store
from storefront.repositories.base import PageStorage
from storefront.schemas.store import StoreCreate, StoreInfo

router = APIRouter()


@router.post("/", response_model=StoreInfo, status_code=201)
async def create_store(body: StoreCreate, storage: PageStorage = Depends(get_page_storage)):
    """Create a store. Slugs are globally unique (409 on collision)."""
    return await storage.create_store(body)


@router.get("/{store_id}", response_model=StoreInfo)
async def read_store(store: StoreInfo = Depends(get_store)):
    return store
