"""Editor endpoints for a store's page documents and their publishing workflow.

POST   /stores/{store_id}/pages
GET    /stores/{store_id}/pages[?status=]
GET    /stores/{store_id}/pages/{page_id}
PUT    /stores/{store_id}/pages/{page_id}            (save draft, full overwrite)
DELETE /stores/{store_id}/pages/{page_id}
POST   /stores/{store_id}/pages/{page_id}/publish|schedule|archive|unpublish
GET    /stores/{store_id}/pages/{page_id}/history
POST   /stores/{store_id}/pages/{page_id}/history/{version_id}/restore
POST   /stores/{store_id}/pages/publish-due
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from storefront.core.dependencies import get_page_repository, get_widget_registry
from storefront.repositories.base import PageRepository
from storefront.schemas.page import (
    HistoryEntry,
    PageCreate,
    PageDocument,
    PagePublishRequest,
    PageScheduleRequest,
    PageStatus,
    PublishDueResponse,
)
from storefront.services.documents import validate_document
from storefront.services.publishing import publish_due_pages
from storefront.widgets.registry import WidgetRegistry

router = APIRouter()


@router.post("/", response_model=PageDocument, status_code=201)
async def create_page(
    body: PageCreate,
    repo: PageRepository = Depends(get_page_repository),
    registry: WidgetRegistry = Depends(get_widget_registry),
):
    """Create a draft, optionally seeded from a template whose widgets must validate."""
    if body.template is not None:
        seeded = PageDocument(id="template", name=body.name, page_type=body.page_type, sections=body.template.sections)
        errors = validate_document(seeded, registry)
        if errors:
            raise HTTPException(status_code=422, detail={"widgets": errors})
    return await repo.create_page(body)


@router.get("/", response_model=list[PageDocument])
async def list_pages(
    status: PageStatus | None = Query(None),
    repo: PageRepository = Depends(get_page_repository),
):
    return await repo.list_pages(status=status)


@router.post("/publish-due", response_model=PublishDueResponse)
async def publish_due(repo: PageRepository = Depends(get_page_repository)):
    """Publish every scheduled page whose time has come."""
    return PublishDueResponse(published=await publish_due_pages(repo))


@router.get("/{page_id}", response_model=PageDocument)
async def get_page(page_id: str, repo: PageRepository = Depends(get_page_repository)):
    return await repo.require_page(page_id)


@router.put("/{page_id}", response_model=PageDocument)
async def save_page(
    page_id: str,
    doc: PageDocument,
    repo: PageRepository = Depends(get_page_repository),
    registry: WidgetRegistry = Depends(get_widget_registry),
):
    """Replace the whole document. The saved page is always a draft.

    Widgets the registry rejects (unknown type, props failing the schema)
    fail the save with a per-widget error map.
    """
    if doc.id != page_id:
        raise HTTPException(status_code=422, detail="Document id does not match the URL")
    await repo.require_page(page_id)
    errors = validate_document(doc, registry)
    if errors:
        raise HTTPException(status_code=422, detail={"widgets": errors})
    return await repo.save_draft(doc)


@router.delete("/{page_id}", status_code=204)
async def delete_page(page_id: str, repo: PageRepository = Depends(get_page_repository)):
    await repo.delete_page(page_id)
    return Response(status_code=204)


@router.post("/{page_id}/publish", response_model=PageDocument)
async def publish_page(
    page_id: str,
    body: PagePublishRequest | None = None,
    repo: PageRepository = Depends(get_page_repository),
):
    body = body or PagePublishRequest()
    return await repo.publish(page_id, author_id=body.author_id, note=body.note)


@router.post("/{page_id}/schedule", response_model=PageDocument)
async def schedule_page(
    page_id: str,
    body: PageScheduleRequest,
    repo: PageRepository = Depends(get_page_repository),
):
    return await repo.schedule(page_id, body.scheduled_for)


@router.post("/{page_id}/archive", response_model=PageDocument)
async def archive_page(page_id: str, repo: PageRepository = Depends(get_page_repository)):
    return await repo.archive(page_id)


@router.post("/{page_id}/unpublish", response_model=PageDocument)
async def unpublish_page(page_id: str, repo: PageRepository = Depends(get_page_repository)):
    return await repo.unpublish(page_id)


@router.get("/{page_id}/history", response_model=list[HistoryEntry])
async def list_history(page_id: str, repo: PageRepository = Depends(get_page_repository)):
    return await repo.list_versions(page_id)


@router.post("/{page_id}/history/{version_id}/restore", response_model=PageDocument)
async def restore_version(
    page_id: str,
    version_id: str,
    repo: PageRepository = Depends(get_page_repository),
):
    return await repo.restore_version(page_id, version_id)
