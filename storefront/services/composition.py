"""Storefront composition: store, header, footer, page and navigation for one URL."""

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Mapping
from typing import TypeVar

from storefront.core.config import settings
from storefront.core.exceptions import StoreNotFoundError
from storefront.core.latch import InflightLatch
from storefront.repositories.base import PageStorage
from storefront.schemas.page import NavigationPage, PageDocument
from storefront.schemas.render import (
    NavigationLink,
    RenderedPage,
    StorefrontNavigation,
    StorefrontResponse,
)
from storefront.schemas.store import StoreInfo
from storefront.services.renderer import PageRenderer, RenderContext
from storefront.services.resolution import normalize_path, resolve_page, resolve_system_page

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _captured(label: str, aw: Awaitable[T], default: T) -> T:
    """Await one composition slot. A failure turns into ``default`` for that slot only."""
    try:
        return await aw
    except Exception:
        logger.warning("Storefront %s lookup failed", label, exc_info=True)
        return default


def page_href(slug: str | None, store_slug: str, base_path: str) -> str:
    base = f"{base_path.rstrip('/')}/{store_slug}"
    if slug in (None, "", "/"):
        return base
    return f"{base}/{slug.lstrip('/')}"


def build_navigation(pages: list[NavigationPage], store_slug: str, base_path: str) -> StorefrontNavigation:
    nav = StorefrontNavigation()
    for page in pages:
        placement = page.navigation_placement
        href = page_href(page.slug, store_slug, base_path)
        if placement in ("header", "both"):
            nav.header.append(NavigationLink(id=page.id, name=page.name, slug=page.slug, href=href, placement="header"))
        if placement in ("footer", "both"):
            nav.footer.append(NavigationLink(id=page.id, name=page.name, slug=page.slug, href=href, placement="footer"))
    return nav


class StorefrontComposer:
    def __init__(self, storage: PageStorage, renderer: PageRenderer, base_path: str | None = None):
        self.storage = storage
        self.renderer = renderer
        self.base_path = base_path if base_path is not None else settings.STOREFRONT_BASE_PATH

    async def resolve_store(self, store_slug: str) -> StoreInfo:
        """Store lookup is a hard prerequisite: its failures are not downgraded."""
        store = await self.storage.public().get_public_store_by_slug(store_slug)
        if store is None:
            raise StoreNotFoundError(f"Store '{store_slug}' not found")
        return store

    def _render(self, label: str, doc: PageDocument | None, context: RenderContext) -> RenderedPage | None:
        """Render one slot; a render failure drops that slot only."""
        if doc is None or not doc.is_renderable:
            return None
        try:
            return self.renderer.render(doc, context)
        except Exception:
            logger.warning("Storefront %s render failed for page %s", label, doc.id, exc_info=True)
            return None

    async def load_navigation(self, store: StoreInfo) -> StorefrontNavigation:
        pages = await self.storage.public(store.id).get_navigation_pages()
        return build_navigation(pages, store.store_slug, self.base_path)

    async def compose(
        self,
        store_slug: str,
        page_path: str | None = None,
        *,
        params: Mapping[str, str] | None = None,
        default_page: RenderedPage | None = None,
    ) -> StorefrontResponse:
        """Resolve and render everything a storefront URL shows.

        Header, footer, page and navigation are looked up concurrently; each
        slot is dropped on its own if missing, empty or failing. ``default_page``
        stands in when the requested page cannot be rendered.
        """
        store = await self.resolve_store(store_slug)
        repo = self.storage.public(store.id)

        info, header, footer, page, nav_pages = await asyncio.gather(
            _captured("store info", repo.get_public_store_info(), None),
            _captured("header", resolve_system_page(repo, "header"), None),
            _captured("footer", resolve_system_page(repo, "footer"), None),
            _captured("page", resolve_page(repo, page_path), None),
            _captured("navigation", repo.get_navigation_pages(), []),
        )

        store_info = info or store
        context = RenderContext(store=store_info, params=params or {})
        rendered_page = self._render("page", page, context)
        page_found = rendered_page is not None
        if rendered_page is None:
            logger.debug("No renderable page for %s/%s", store_slug, normalize_path(page_path))
            rendered_page = default_page

        return StorefrontResponse(
            store=store_info,
            header=self._render("header", header, context),
            footer=self._render("footer", footer, context),
            page=rendered_page,
            page_found=page_found,
            navigation=build_navigation(nav_pages, store_info.store_slug, self.base_path),
        )


class StorefrontSession:
    """One visitor's navigation through a storefront.

    Page loads and navigation loads are latched per ``(store id, path)``: a
    repeat request while the same key is in flight is dropped, not queued. A
    page load that finishes after the visitor moved elsewhere is discarded.
    """

    def __init__(self, composer: StorefrontComposer, store_slug: str):
        self.composer = composer
        self.store_slug = store_slug
        self.store: StoreInfo | None = None
        self.current: StorefrontResponse | None = None
        self.navigation: StorefrontNavigation | None = None
        self._page_latch = InflightLatch()
        self._nav_latch = InflightLatch()
        self._current_key: tuple[uuid.UUID, str] | None = None

    async def _store(self) -> StoreInfo:
        if self.store is None:
            self.store = await self.composer.resolve_store(self.store_slug)
        return self.store

    async def navigate(self, page_path: str | None = None) -> StorefrontResponse | None:
        """Load ``page_path``. Returns ``None`` if the load was a duplicate or went stale."""
        store = await self._store()
        key = (store.id, normalize_path(page_path))
        self._current_key = key
        with self._page_latch.hold(key) as acquired:
            if not acquired:
                logger.debug("Page load for %s already in flight", key)
                return None
            result = await self.composer.compose(self.store_slug, page_path)
        if self._current_key != key:
            logger.debug("Discarding stale page load for %s", key)
            return None
        self.current = result
        return result

    async def load_navigation(self) -> StorefrontNavigation | None:
        store = await self._store()
        key = (store.id, "navigation")
        with self._nav_latch.hold(key) as acquired:
            if not acquired:
                return None
            self.navigation = await self.composer.load_navigation(store)
        return self.navigation
