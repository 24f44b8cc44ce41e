"""Aggregate all v1 sub-routers."""

from fastapi import APIRouter

from storefront.api.v1.catalog import router as catalog_router
from storefront.api.v1.health import router as health_router
from storefront.api.v1.pages import router as pages_router
from storefront.api.v1.public_storefront import router as public_storefront_router
from storefront.api.v1.stores import router as stores_router

api_v1_router = APIRouter()

api_v1_router.include_router(health_router, tags=["health"])
api_v1_router.include_router(catalog_router, tags=["catalog"])
api_v1_router.include_router(stores_router, prefix="/stores", tags=["stores"])
api_v1_router.include_router(pages_router, prefix="/stores/{store_id}/pages", tags=["pages"])
api_v1_router.include_router(public_storefront_router, prefix="/storefront", tags=["storefront"])
