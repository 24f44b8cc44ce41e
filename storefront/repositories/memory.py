"""In-memory storage backend.

Rows are kept in their persisted (snake_case) shape and go through the same
mapping as the SQL backend, so tests exercise the real conversion.
"""

import copy
import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from storefront.core.exceptions import StoreSlugTakenError
from storefront.repositories.base import PageRepository, PageStorage, PublicPageRepository
from storefront.repositories.mapping import (
    document_to_row,
    history_to_row,
    row_to_document,
    row_to_history,
    row_to_navigation_page,
    row_to_summary,
)
from storefront.schemas.page import (
    NAVIGATION_PLACEMENTS,
    HistoryEntry,
    NavigationPage,
    PageDocument,
    PublishedPageSummary,
)
from storefront.schemas.store import StoreCreate, StoreInfo
from storefront.widgets.registry import WidgetRegistry

logger = logging.getLogger(__name__)

Row = dict[str, Any]


@dataclass
class InMemoryPageDatabase:
    stores: dict[uuid.UUID, Row] = field(default_factory=dict)
    pages: dict[str, Row] = field(default_factory=dict)
    history: list[Row] = field(default_factory=list)

    def store_pages(self, store_id: uuid.UUID) -> list[Row]:
        return [r for r in self.pages.values() if r["store_id"] == store_id]


class InMemoryPublicPageRepository(PublicPageRepository):
    def __init__(self, db: InMemoryPageDatabase, store_id: uuid.UUID | None = None):
        super().__init__(store_id)
        self.db = db

    def _published(self) -> list[Row]:
        rows = [r for r in self.db.store_pages(self._require_store()) if r["status"] == "published"]
        return sorted(rows, key=lambda r: r["name"])

    def _first(self, **match: Any) -> PageDocument | None:
        for row in self._published():
            if all(row.get(k) == v for k, v in match.items()):
                return row_to_document(copy.deepcopy(row))
        return None

    async def get_public_store_by_slug(self, store_slug: str) -> StoreInfo | None:
        for row in self.db.stores.values():
            if row["store_slug"] == store_slug and row["is_active"]:
                return StoreInfo.model_validate(row)
        return None

    async def get_public_store_info(self) -> StoreInfo | None:
        row = self.db.stores.get(self._require_store())
        if row is None or not row["is_active"]:
            return None
        return StoreInfo.model_validate(row)

    async def get_published_page_by_slug(self, slug: str) -> PageDocument | None:
        return self._first(slug=slug)

    async def get_published_page_by_id(self, page_id: str) -> PageDocument | None:
        return self._first(id=page_id)

    async def get_published_page_by_type(self, page_type: str) -> PageDocument | None:
        return self._first(page_type=page_type)

    async def get_navigation_pages(self) -> list[NavigationPage]:
        return [
            row_to_navigation_page(r)
            for r in self._published()
            if r["navigation_placement"] in NAVIGATION_PLACEMENTS
        ]

    async def get_all_published_pages(self) -> list[PublishedPageSummary]:
        return [row_to_summary(copy.deepcopy(r)) for r in self._published()]


class InMemoryPageRepository(PageRepository):
    def __init__(self, db: InMemoryPageDatabase, store_id: uuid.UUID, registry: WidgetRegistry | None = None):
        super().__init__(store_id, registry)
        self.db = db

    async def _load(self, page_id: str) -> PageDocument | None:
        row = self.db.pages.get(page_id)
        if row is None or row["store_id"] != self.store_id:
            return None
        return row_to_document(copy.deepcopy(row))

    async def _load_all(self) -> list[PageDocument]:
        return [row_to_document(copy.deepcopy(r)) for r in self.db.store_pages(self.store_id)]

    async def _write(self, doc: PageDocument, history_entry: HistoryEntry | None = None) -> None:
        self.db.pages[doc.id] = document_to_row(doc, self.store_id)
        if history_entry is not None:
            self.db.history.append(history_to_row(history_entry, doc.id, self.store_id))

    async def _remove(self, page_id: str) -> bool:
        row = self.db.pages.get(page_id)
        if row is None or row["store_id"] != self.store_id:
            return False
        del self.db.pages[page_id]
        self.db.history = [h for h in self.db.history if h["page_id"] != page_id]
        return True

    async def _load_history(self, page_id: str) -> list[HistoryEntry]:
        rows = [h for h in self.db.history if h["page_id"] == page_id and h["store_id"] == self.store_id]
        rows.sort(key=lambda h: h["created_at"], reverse=True)
        return [row_to_history(copy.deepcopy(h)) for h in rows]


class InMemoryPageStorage(PageStorage):
    def __init__(self, db: InMemoryPageDatabase | None = None):
        self.db = db or InMemoryPageDatabase()

    def public(self, store_id: uuid.UUID | None = None) -> InMemoryPublicPageRepository:
        return InMemoryPublicPageRepository(self.db, store_id)

    def pages(self, store_id: uuid.UUID, registry: WidgetRegistry | None = None) -> InMemoryPageRepository:
        return InMemoryPageRepository(self.db, store_id, registry)

    async def create_store(self, body: StoreCreate) -> StoreInfo:
        if any(r["store_slug"] == body.store_slug for r in self.db.stores.values()):
            raise StoreSlugTakenError(f"Store slug '{body.store_slug}' is already taken")
        store_id = uuid.uuid4()
        self.db.stores[store_id] = {
            "id": store_id,
            "store_name": body.store_name,
            "store_slug": body.store_slug,
            "store_logo_url": body.store_logo_url,
            "is_active": True,
            "created_at": datetime.now(UTC),
        }
        logger.info("Created store %s (%s)", store_id, body.store_slug)
        return StoreInfo.model_validate(self.db.stores[store_id])

    async def get_store(self, store_id: uuid.UUID) -> StoreInfo | None:
        row = self.db.stores.get(store_id)
        return StoreInfo.model_validate(row) if row else None

    async def ping(self) -> bool:
        return True
