"""Public read-only storefront endpoints (anonymous, store-scoped by slug).

Flow: slug -> store lookup (hard prerequisite) -> header/footer/page/navigation
resolved concurrently -> render pass. Only published content is ever served.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from storefront.core.dependencies import get_composer, get_form_dispatcher, get_page_storage, get_widget_registry
from storefront.core.exceptions import PageNotFoundError, ProblemDetailError
from storefront.repositories.base import PageStorage
from storefront.schemas.form import FormProps, FormSubmitRequest, FormSubmitResponse
from storefront.schemas.render import StorefrontNavigation, StorefrontResponse
from storefront.services.composition import StorefrontComposer
from storefront.services.form_actions import FormActionDispatcher
from storefront.services.forms import FormState
from storefront.services.palettes import generate_palette_css, resolve_document_palette
from storefront.services.resolution import resolve_page
from storefront.widgets.registry import WidgetRegistry

logger = logging.getLogger(__name__)

router = APIRouter()

SUBMIT_STATUS_CODES = {"success": 200, "redirect": 200, "invalid": 422, "error": 502}


@router.get("/{store_slug}", response_model=StorefrontResponse)
async def get_storefront_home(
    store_slug: str,
    request: Request,
    composer: StorefrontComposer = Depends(get_composer),
):
    """Compose the store's home page with its header, footer and navigation."""
    return await composer.compose(store_slug, "", params=dict(request.query_params))


@router.get("/{store_slug}/navigation", response_model=StorefrontNavigation)
async def get_storefront_navigation(
    store_slug: str,
    composer: StorefrontComposer = Depends(get_composer),
):
    store = await composer.resolve_store(store_slug)
    return await composer.load_navigation(store)


@router.get("/{store_slug}/theme.css", response_class=PlainTextResponse)
async def get_storefront_theme_css(
    store_slug: str,
    page: str = "",
    composer: StorefrontComposer = Depends(get_composer),
):
    """CSS custom properties for the palette of the page at ``page``."""
    store = await composer.resolve_store(store_slug)
    doc = await resolve_page(composer.storage.public(store.id), page)
    css = generate_palette_css(resolve_document_palette(doc)) if doc is not None else ""
    return PlainTextResponse(css, media_type="text/css")


@router.get("/{store_slug}/pages/{page_path:path}", response_model=StorefrontResponse)
async def get_storefront_page(
    store_slug: str,
    page_path: str,
    request: Request,
    composer: StorefrontComposer = Depends(get_composer),
):
    """Compose an arbitrary storefront path. ``pageFound`` is false when nothing matched."""
    return await composer.compose(store_slug, page_path, params=dict(request.query_params))


@router.post("/{store_slug}/forms/{page_id}/{widget_id}", response_model=FormSubmitResponse)
async def submit_form(
    store_slug: str,
    page_id: str,
    widget_id: str,
    body: FormSubmitRequest,
    response: Response,
    composer: StorefrontComposer = Depends(get_composer),
    storage: PageStorage = Depends(get_page_storage),
    registry: WidgetRegistry = Depends(get_widget_registry),
    dispatcher: FormActionDispatcher = Depends(get_form_dispatcher),
):
    """Validate and submit a form widget of a published page."""
    store = await composer.resolve_store(store_slug)
    doc = await storage.public(store.id).get_published_page_by_id(page_id)
    if doc is None:
        raise PageNotFoundError(f"Page '{page_id}' not found")
    widget = doc.find_widget(widget_id)
    if widget is None or widget.type != "form":
        raise PageNotFoundError(f"Form '{widget_id}' not found on page '{page_id}'")

    try:
        props = FormProps.model_validate(registry.validate_props(widget))
    except ValidationError as exc:
        logger.warning("Form %s/%s has invalid props: %s", page_id, widget_id, exc.errors()[:1])
        raise ProblemDetailError(
            status=422,
            title="Invalid Form",
            detail=f"Form '{widget_id}' on page '{page_id}' is misconfigured",
        ) from exc
    state = FormState(props)
    state.load_values(body.values)
    result = await state.submit(dispatcher)
    logger.info("Form %s/%s submitted: %s", page_id, widget_id, result.status)
    response.status_code = SUBMIT_STATUS_CODES[result.status]
    return result
