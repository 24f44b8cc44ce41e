"""Repository contracts for page documents.

``PublicPageRepository`` is what the anonymous storefront sees: published
content only, scoped to one store. ``PageRepository`` is the editor side and
owns the publishing workflow (status transitions, history, restore). Concrete
backends only implement the storage primitives.
"""

import logging
import secrets
import time
import uuid
from abc import ABC, abstractmethod
from datetime import UTC, datetime

from storefront.core.exceptions import InvalidTransitionError, PageConflictError, PageNotFoundError
from storefront.schemas.page import (
    SYSTEM_PAGE_TYPES,
    HistoryEntry,
    NavigationPage,
    PageCreate,
    PageDocument,
    PageStatus,
    PublishedPageSummary,
)
from storefront.schemas.store import StoreCreate, StoreInfo
from storefront.widgets.registry import WidgetRegistry

logger = logging.getLogger(__name__)

# current status -> statuses reachable from it
PAGE_TRANSITIONS: dict[str, set[str]] = {
    "draft": {"published", "scheduled", "archived"},
    "scheduled": {"published", "draft", "archived"},
    "published": {"draft", "archived"},
    "archived": {"draft"},
}


def _validate_transition(current: str, requested: str) -> None:
    allowed = PAGE_TRANSITIONS.get(current, set())
    if requested not in allowed:
        raise InvalidTransitionError(current, requested, sorted(allowed))


def _now() -> datetime:
    return datetime.now(UTC)


def generate_page_id() -> str:
    return f"page_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


def generate_version_id() -> str:
    return f"version_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


class PublicPageRepository(ABC):
    """Read-only access to published pages of one store."""

    def __init__(self, store_id: uuid.UUID | None = None):
        self.store_id = store_id

    def _require_store(self) -> uuid.UUID:
        if self.store_id is None:
            raise RuntimeError("This operation needs a store-scoped repository")
        return self.store_id

    @abstractmethod
    async def get_public_store_by_slug(self, store_slug: str) -> StoreInfo | None: ...

    @abstractmethod
    async def get_public_store_info(self) -> StoreInfo | None: ...

    @abstractmethod
    async def get_published_page_by_slug(self, slug: str) -> PageDocument | None: ...

    @abstractmethod
    async def get_published_page_by_id(self, page_id: str) -> PageDocument | None: ...

    @abstractmethod
    async def get_published_page_by_type(self, page_type: str) -> PageDocument | None: ...

    @abstractmethod
    async def get_navigation_pages(self) -> list[NavigationPage]:
        """Published pages placed in header, footer or both, ordered by name."""

    @abstractmethod
    async def get_all_published_pages(self) -> list[PublishedPageSummary]:
        """Every published page of the store, ordered by name."""

    async def get_published_system_page(self, page_type: str) -> PageDocument | None:
        """Look a system page up by page type, falling back to slug ``/<type>``."""
        page = await self.get_published_page_by_type(page_type)
        if page is None:
            page = await self.get_published_page_by_slug(f"/{page_type}")
        return page


class PageRepository(ABC):
    """Editor-side access to every page of one store, regardless of status."""

    def __init__(self, store_id: uuid.UUID, registry: WidgetRegistry | None = None):
        self.store_id = store_id
        self.registry = registry

    # -- storage primitives -------------------------------------------------

    @abstractmethod
    async def _load(self, page_id: str) -> PageDocument | None: ...

    @abstractmethod
    async def _load_all(self) -> list[PageDocument]: ...

    @abstractmethod
    async def _write(self, doc: PageDocument, history_entry: HistoryEntry | None = None) -> None:
        """Upsert ``doc`` and, in the same unit of work, append ``history_entry``."""

    @abstractmethod
    async def _remove(self, page_id: str) -> bool: ...

    @abstractmethod
    async def _load_history(self, page_id: str) -> list[HistoryEntry]:
        """History entries, newest first."""

    # -- reads --------------------------------------------------------------

    async def get_page(self, page_id: str) -> PageDocument | None:
        return await self._load(page_id)

    async def require_page(self, page_id: str) -> PageDocument:
        doc = await self._load(page_id)
        if doc is None:
            raise PageNotFoundError(f"Page '{page_id}' not found")
        return doc

    async def list_pages(self, status: PageStatus | None = None) -> list[PageDocument]:
        pages = await self._load_all()
        if status is not None:
            pages = [p for p in pages if p.status == status]
        return sorted(pages, key=lambda p: p.name)

    async def list_versions(self, page_id: str) -> list[HistoryEntry]:
        await self.require_page(page_id)
        return await self._load_history(page_id)

    async def get_version(self, page_id: str, version_id: str) -> HistoryEntry:
        for entry in await self.list_versions(page_id):
            if entry.id == version_id:
                return entry
        raise PageNotFoundError(f"Version '{version_id}' of page '{page_id}' not found")

    # -- writes -------------------------------------------------------------

    async def create_page(self, body: PageCreate) -> PageDocument:
        now = _now()
        template = body.template
        doc = PageDocument(
            id=generate_page_id(),
            name=body.name,
            slug=body.slug,
            page_type=body.page_type,
            navigation_placement=body.navigation_placement,
            sections=list(template.sections) if template else [],
            theme_overrides=template.theme_overrides if template else None,
            seo=template.seo if template else None,
            status="draft",
            created_at=now,
            updated_at=now,
        )
        await self._write(doc)
        logger.info("Created page %s (%s) in store %s", doc.id, doc.name, self.store_id)
        return doc

    async def save_draft(self, doc: PageDocument) -> PageDocument:
        """Replace the stored document wholesale. Saving always yields a draft."""
        existing = await self._load(doc.id)
        if self.registry is not None:
            doc = self.registry.migrate_document(doc)
        now = _now()
        saved = doc.model_copy(
            update={
                "status": "draft",
                "scheduled_for": None,
                "history": None,
                "created_at": existing.created_at if existing else (doc.created_at or now),
                "published_at": existing.published_at if existing else None,
                "updated_at": now,
            }
        )
        await self._write(saved)
        return saved

    async def publish(
        self, page_id: str, *, author_id: str | None = None, note: str | None = None
    ) -> PageDocument:
        doc = await self.require_page(page_id)
        _validate_transition(doc.status, "published")
        await self._check_publish_conflicts(doc)
        now = _now()
        published = doc.model_copy(
            update={"status": "published", "published_at": now, "scheduled_for": None, "updated_at": now}
        )
        entry = HistoryEntry(
            id=generate_version_id(),
            created_at=now,
            author_id=author_id,
            note=note or "Published",
            version=published.version,
            snapshot=published.model_copy(update={"history": None}),
        )
        await self._write(published, entry)
        logger.info("Published page %s in store %s", page_id, self.store_id)
        return published

    async def schedule(self, page_id: str, when: datetime) -> PageDocument:
        doc = await self.require_page(page_id)
        _validate_transition(doc.status, "scheduled")
        scheduled = doc.model_copy(update={"status": "scheduled", "scheduled_for": when, "updated_at": _now()})
        await self._write(scheduled)
        return scheduled

    async def archive(self, page_id: str) -> PageDocument:
        return await self._move(page_id, "archived")

    async def unpublish(self, page_id: str) -> PageDocument:
        return await self._move(page_id, "draft")

    async def restore_version(self, page_id: str, version_id: str, *, author_id: str | None = None) -> PageDocument:
        """Make a history snapshot the current draft, backing up the current state first."""
        current = await self.require_page(page_id)
        entry = await self.get_version(page_id, version_id)
        if entry.snapshot is None:
            raise PageNotFoundError(f"Version '{version_id}' has no snapshot")
        now = _now()
        backup = HistoryEntry(
            id=generate_version_id(),
            created_at=now,
            author_id=author_id,
            note="Backup before version restore",
            version=current.version,
            snapshot=current.model_copy(update={"history": None}),
        )
        restored = entry.snapshot.model_copy(
            update={
                "id": page_id,
                "status": "draft",
                "scheduled_for": None,
                "published_at": current.published_at,
                "created_at": current.created_at,
                "updated_at": now,
            }
        )
        if self.registry is not None:
            restored = self.registry.migrate_document(restored)
        await self._write(restored, backup)
        logger.info("Restored page %s to version %s", page_id, version_id)
        return restored

    async def delete_page(self, page_id: str) -> None:
        if not await self._remove(page_id):
            raise PageNotFoundError(f"Page '{page_id}' not found")
        logger.info("Deleted page %s from store %s", page_id, self.store_id)

    # -- internals ----------------------------------------------------------

    async def _move(self, page_id: str, status: PageStatus) -> PageDocument:
        doc = await self.require_page(page_id)
        _validate_transition(doc.status, status)
        moved = doc.model_copy(update={"status": status, "scheduled_for": None, "updated_at": _now()})
        await self._write(moved)
        return moved

    async def _check_publish_conflicts(self, doc: PageDocument) -> None:
        published = [p for p in await self._load_all() if p.status == "published" and p.id != doc.id]
        if doc.slug is not None and any(p.slug == doc.slug for p in published):
            raise PageConflictError(f"Another published page already uses slug '{doc.slug}'")
        if doc.page_type in SYSTEM_PAGE_TYPES and any(p.page_type == doc.page_type for p in published):
            raise PageConflictError(f"A published {doc.page_type} page already exists")


class PageStorage(ABC):
    """Entry point of a storage backend: stores plus per-store repositories."""

    @abstractmethod
    def public(self, store_id: uuid.UUID | None = None) -> PublicPageRepository: ...

    @abstractmethod
    def pages(self, store_id: uuid.UUID, registry: WidgetRegistry | None = None) -> PageRepository: ...

    @abstractmethod
    async def create_store(self, body: StoreCreate) -> StoreInfo: ...

    @abstractmethod
    async def get_store(self, store_id: uuid.UUID) -> StoreInfo | None: ...

    @abstractmethod
    async def ping(self) -> bool: ...
