"""FastAPI dependency chain: storage backend -> registry -> renderer/composer -> store scope."""

import uuid
from functools import lru_cache

from fastapi import Depends, Request

from storefront.core.config import settings
from storefront.core.exceptions import StoreNotFoundError
from storefront.repositories.base import PageRepository, PageStorage
from storefront.schemas.store import StoreInfo
from storefront.services.composition import StorefrontComposer
from storefront.services.form_actions import FormActionDispatcher
from storefront.services.renderer import PageRenderer
from storefront.widgets.builtin import build_default_registry
from storefront.widgets.registry import WidgetRegistry


@lru_cache
def get_page_storage() -> PageStorage:
    """Process-wide storage backend selected by ``STORAGE_BACKEND``."""
    if settings.STORAGE_BACKEND == "sql":
        from storefront.db.session import async_session_factory
        from storefront.repositories.sql import SqlPageStorage

        return SqlPageStorage(async_session_factory)

    from storefront.repositories.memory import InMemoryPageStorage

    return InMemoryPageStorage()


def get_widget_registry(request: Request) -> WidgetRegistry:
    registry = getattr(request.app.state, "widget_registry", None)
    if registry is None:
        registry = request.app.state.widget_registry = build_default_registry()
    return registry


def get_page_renderer(registry: WidgetRegistry = Depends(get_widget_registry)) -> PageRenderer:
    return PageRenderer(registry)


def get_composer(
    storage: PageStorage = Depends(get_page_storage),
    renderer: PageRenderer = Depends(get_page_renderer),
) -> StorefrontComposer:
    return StorefrontComposer(storage, renderer)


def get_form_dispatcher() -> FormActionDispatcher:
    return FormActionDispatcher()


async def get_store(
    store_id: uuid.UUID,
    storage: PageStorage = Depends(get_page_storage),
) -> StoreInfo:
    store = await storage.get_store(store_id)
    if store is None:
        raise StoreNotFoundError(f"Store '{store_id}' not found")
    return store


async def get_page_repository(
    store: StoreInfo = Depends(get_store),
    storage: PageStorage = Depends(get_page_storage),
    registry: WidgetRegistry = Depends(get_widget_registry),
) -> PageRepository:
    """Editor repository scoped to the ``store_id`` path parameter."""
    return storage.pages(store.id, registry)
