"""The one mapping between in-memory documents and persisted rows.

Rows use the storage column names (``published_at``, ``theme_overrides``,
``navigation_placement``...). JSON columns hold the camelCase document JSON
the builder writes (``colSpan``, ``customColors``...). Nothing else in the
code base renames fields.
"""

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from storefront.schemas.page import (
    HistoryEntry,
    NavigationPage,
    PageDocument,
    PublishedPageSummary,
    Section,
    SeoSettings,
    ThemeOverrides,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_TYPE = "page"
DEFAULT_NAVIGATION_PLACEMENT = "none"


def _dump_json(model) -> dict[str, Any]:
    if model is None:
        return {}
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _load_sections(raw: Any, page_id: str) -> list[Section]:
    # Missing or malformed sections mean "no content", never an error.
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Page %s has non-list sections (%s); treating as empty", page_id, type(raw).__name__)
        return []
    return [Section.model_validate(s) for s in raw]


def document_to_row(doc: PageDocument, store_id: uuid.UUID) -> dict[str, Any]:
    return {
        "id": doc.id,
        "store_id": store_id,
        "name": doc.name,
        "slug": doc.slug,
        "version": doc.version,
        "status": doc.status,
        "page_type": doc.page_type or DEFAULT_PAGE_TYPE,
        "navigation_placement": doc.navigation_placement or DEFAULT_NAVIGATION_PLACEMENT,
        "footer_column": doc.footer_column,
        "sections": [_dump_json(s) for s in doc.sections],
        "theme_overrides": _dump_json(doc.theme_overrides),
        "seo": _dump_json(doc.seo),
        "custom_code": doc.custom_code or {},
        "global_styles": doc.global_styles or {},
        "published_at": doc.published_at,
        "scheduled_for": doc.scheduled_for,
        "created_at": doc.created_at,
        "updated_at": doc.updated_at,
    }


def row_to_document(row: Mapping[str, Any]) -> PageDocument:
    page_id = row["id"]
    theme = row.get("theme_overrides")
    seo = row.get("seo")
    return PageDocument(
        id=page_id,
        name=row["name"],
        slug=row.get("slug"),
        version=row.get("version") or 1,
        status=row.get("status") or "draft",
        page_type=row.get("page_type"),
        navigation_placement=row.get("navigation_placement"),
        footer_column=row.get("footer_column"),
        sections=_load_sections(row.get("sections"), page_id),
        theme_overrides=ThemeOverrides.model_validate(theme) if theme else None,
        seo=SeoSettings.model_validate(seo) if seo else None,
        custom_code=row.get("custom_code") or None,
        global_styles=row.get("global_styles") or None,
        published_at=row.get("published_at"),
        scheduled_for=row.get("scheduled_for"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def row_to_navigation_page(row: Mapping[str, Any]) -> NavigationPage:
    return NavigationPage(
        id=row["id"],
        name=row["name"],
        slug=row.get("slug"),
        navigation_placement=row.get("navigation_placement"),
    )


def row_to_summary(row: Mapping[str, Any]) -> PublishedPageSummary:
    return PublishedPageSummary(
        id=row["id"],
        name=row["name"],
        slug=row.get("slug"),
        navigation_placement=row.get("navigation_placement"),
        page_type=row.get("page_type"),
        sections=_load_sections(row.get("sections"), row["id"]),
    )


def history_to_row(entry: HistoryEntry, page_id: str, store_id: uuid.UUID) -> dict[str, Any]:
    snapshot = entry.snapshot
    return {
        "id": entry.id,
        "store_id": store_id,
        "page_id": page_id,
        "version": entry.version,
        "author_id": entry.author_id,
        "note": entry.note,
        "snapshot": _dump_json(snapshot) if snapshot is not None else {},
        "created_at": entry.created_at,
    }


def row_to_history(row: Mapping[str, Any]) -> HistoryEntry:
    snapshot = row.get("snapshot")
    return HistoryEntry(
        id=row["id"],
        created_at=row["created_at"],
        author_id=row.get("author_id"),
        note=row.get("note"),
        version=row["version"],
        snapshot=PageDocument.model_validate(snapshot) if snapshot else None,
    )
