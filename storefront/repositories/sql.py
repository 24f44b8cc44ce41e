"""PostgreSQL storage backend (SQLAlchemy async).

Every call opens its own short-lived session, so concurrent reads issued by
the storefront composer never share a connection. Store-scoped calls run
``SET LOCAL app.current_store`` first; row-level security does the rest.
"""

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import delete, select, text
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.core.exceptions import PageConflictError, StoreSlugTakenError
from storefront.models.page_document import PageDocumentRow, PageHistoryRow
from storefront.models.store import Store
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


def _as_row(obj: Any) -> dict[str, Any]:
    return {attr.key: getattr(obj, attr.key) for attr in obj.__mapper__.column_attrs}


@asynccontextmanager
async def _scoped_session(
    factory: async_sessionmaker[AsyncSession], store_id: uuid.UUID | None
) -> AsyncIterator[AsyncSession]:
    """Session bound to one transaction. Commits on success, rolls back on error."""
    async with factory() as session:
        try:
            if store_id is not None:
                await session.execute(
                    text("SELECT set_config('app.current_store', :sid, true)"),
                    {"sid": str(store_id)},
                )
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


class SqlPublicPageRepository(PublicPageRepository):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], store_id: uuid.UUID | None = None):
        super().__init__(store_id)
        self.session_factory = session_factory

    def _published(self):
        return (
            select(PageDocumentRow)
            .where(
                PageDocumentRow.store_id == self._require_store(),
                PageDocumentRow.status == "published",
            )
            .order_by(PageDocumentRow.name, PageDocumentRow.id)
        )

    async def _first(self, *criteria) -> PageDocument | None:
        async with _scoped_session(self.session_factory, self.store_id) as db:
            result = await db.execute(self._published().where(*criteria).limit(1))
            row = result.scalar_one_or_none()
        return row_to_document(_as_row(row)) if row is not None else None

    async def get_public_store_by_slug(self, store_slug: str) -> StoreInfo | None:
        async with _scoped_session(self.session_factory, None) as db:
            result = await db.execute(
                select(Store).where(Store.store_slug == store_slug, Store.is_active.is_(True))
            )
            store = result.scalar_one_or_none()
        return StoreInfo.model_validate(store) if store is not None else None

    async def get_public_store_info(self) -> StoreInfo | None:
        async with _scoped_session(self.session_factory, None) as db:
            result = await db.execute(
                select(Store).where(Store.id == self._require_store(), Store.is_active.is_(True))
            )
            store = result.scalar_one_or_none()
        return StoreInfo.model_validate(store) if store is not None else None

    async def get_published_page_by_slug(self, slug: str) -> PageDocument | None:
        return await self._first(PageDocumentRow.slug == slug)

    async def get_published_page_by_id(self, page_id: str) -> PageDocument | None:
        return await self._first(PageDocumentRow.id == page_id)

    async def get_published_page_by_type(self, page_type: str) -> PageDocument | None:
        return await self._first(PageDocumentRow.page_type == page_type)

    async def get_navigation_pages(self) -> list[NavigationPage]:
        stmt = self._published().where(PageDocumentRow.navigation_placement.in_(NAVIGATION_PLACEMENTS))
        async with _scoped_session(self.session_factory, self.store_id) as db:
            rows = (await db.execute(stmt)).scalars().all()
            return [row_to_navigation_page(_as_row(r)) for r in rows]

    async def get_all_published_pages(self) -> list[PublishedPageSummary]:
        async with _scoped_session(self.session_factory, self.store_id) as db:
            rows = (await db.execute(self._published())).scalars().all()
            return [row_to_summary(_as_row(r)) for r in rows]


class SqlPageRepository(PageRepository):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        store_id: uuid.UUID,
        registry: WidgetRegistry | None = None,
    ):
        super().__init__(store_id, registry)
        self.session_factory = session_factory

    async def _load(self, page_id: str) -> PageDocument | None:
        async with _scoped_session(self.session_factory, self.store_id) as db:
            result = await db.execute(
                select(PageDocumentRow).where(
                    PageDocumentRow.id == page_id, PageDocumentRow.store_id == self.store_id
                )
            )
            row = result.scalar_one_or_none()
        return row_to_document(_as_row(row)) if row is not None else None

    async def _load_all(self) -> list[PageDocument]:
        async with _scoped_session(self.session_factory, self.store_id) as db:
            result = await db.execute(
                select(PageDocumentRow).where(PageDocumentRow.store_id == self.store_id)
            )
            return [row_to_document(_as_row(r)) for r in result.scalars().all()]

    async def _write(self, doc: PageDocument, history_entry: HistoryEntry | None = None) -> None:
        values = document_to_row(doc, self.store_id)
        # Let the server defaults fill unset timestamps.
        values = {k: v for k, v in values.items() if not (k in ("created_at", "updated_at") and v is None)}
        stmt = insert(PageDocumentRow).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[PageDocumentRow.id],
            set_={k: stmt.excluded[k] for k in values if k not in ("id", "store_id")},
        )
        async with _scoped_session(self.session_factory, self.store_id) as db:
            try:
                await db.execute(stmt)
                if history_entry is not None:
                    db.add(PageHistoryRow(**history_to_row(history_entry, doc.id, self.store_id)))
                await db.flush()
            except IntegrityError as exc:
                # Partial unique index on published slugs backs the in-code check.
                raise PageConflictError(f"Page '{doc.id}' conflicts with a published page") from exc

    async def _remove(self, page_id: str) -> bool:
        async with _scoped_session(self.session_factory, self.store_id) as db:
            result = await db.execute(
                delete(PageDocumentRow).where(
                    PageDocumentRow.id == page_id, PageDocumentRow.store_id == self.store_id
                )
            )
            return result.rowcount > 0

    async def _load_history(self, page_id: str) -> list[HistoryEntry]:
        async with _scoped_session(self.session_factory, self.store_id) as db:
            result = await db.execute(
                select(PageHistoryRow)
                .where(PageHistoryRow.page_id == page_id, PageHistoryRow.store_id == self.store_id)
                .order_by(PageHistoryRow.created_at.desc())
            )
            return [row_to_history(_as_row(r)) for r in result.scalars().all()]


class SqlPageStorage(PageStorage):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    def public(self, store_id: uuid.UUID | None = None) -> SqlPublicPageRepository:
        return SqlPublicPageRepository(self.session_factory, store_id)

    def pages(self, store_id: uuid.UUID, registry: WidgetRegistry | None = None) -> SqlPageRepository:
        return SqlPageRepository(self.session_factory, store_id, registry)

    async def create_store(self, body: StoreCreate) -> StoreInfo:
        store = Store(
            store_name=body.store_name,
            store_slug=body.store_slug,
            store_logo_url=body.store_logo_url,
        )
        async with _scoped_session(self.session_factory, None) as db:
            db.add(store)
            try:
                await db.flush()
            except IntegrityError as exc:
                raise StoreSlugTakenError(f"Store slug '{body.store_slug}' is already taken") from exc
            await db.refresh(store)
        logger.info("Created store %s (%s)", store.id, store.store_slug)
        return StoreInfo.model_validate(store)

    async def get_store(self, store_id: uuid.UUID) -> StoreInfo | None:
        async with _scoped_session(self.session_factory, None) as db:
            store = await db.get(Store, store_id)
        return StoreInfo.model_validate(store) if store is not None else None

    async def ping(self) -> bool:
        async with _scoped_session(self.session_factory, None) as db:
            await db.execute(text("SELECT 1"))
        return True
