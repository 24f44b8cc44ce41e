"""Document builders shared by the page-builder tests."""

from typing import Any

from storefront.repositories.memory import InMemoryPageStorage
from storefront.schemas.page import PageDocument
from storefront.schemas.store import StoreInfo
from storefront.widgets.registry import WidgetRegistry


def widget(widget_id: str, widget_type: str = "text", version: int = 2, **extra: Any) -> dict:
    props = extra.pop("props", None)
    if props is None:
        props = {"content": f"Content of {widget_id}"} if widget_type == "text" else {}
    return {
        "id": widget_id,
        "type": widget_type,
        "version": version,
        "colSpan": {"sm": 12, "md": 12, "lg": 12},
        "props": props,
        **extra,
    }


def section(section_id: str, *widgets: dict) -> dict:
    return {"id": section_id, "rows": [{"id": f"{section_id}-row", "widgets": list(widgets)}]}


def make_document(
    page_id: str,
    name: str,
    slug: str | None,
    *,
    sections: list[dict] | None = None,
    **fields: Any,
) -> PageDocument:
    if sections is None:
        sections = [section(f"{page_id}-s1", widget(f"{page_id}-w1"))]
    return PageDocument.model_validate(
        {"id": page_id, "name": name, "slug": slug, "version": 2, "sections": sections, **fields}
    )


async def publish_document(
    storage: InMemoryPageStorage,
    store: StoreInfo,
    doc: PageDocument,
    registry: WidgetRegistry | None = None,
) -> PageDocument:
    """Save ``doc`` as a draft and publish it."""
    repo = storage.pages(store.id, registry)
    await repo.save_draft(doc)
    return await repo.publish(doc.id)


async def create_store_via_api(client, slug: str = "acme", name: str = "Acme Goods") -> dict:
    resp = await client.post("/api/v1/stores/", json={"storeName": name, "storeSlug": slug})
    assert resp.status_code == 201, resp.text
    return resp.json()
