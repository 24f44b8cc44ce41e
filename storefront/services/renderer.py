"""Turns a page document into the render-pass payload served to storefronts."""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from storefront.schemas.page import BreakpointVisibility, PageDocument, Widget
from storefront.schemas.render import RenderedPage, RenderedRow, RenderedSection, RenderedWidget
from storefront.schemas.store import StoreInfo
from storefront.services.conditions import evaluate_widget_conditions
from storefront.services.palettes import resolve_document_palette
from storefront.widgets.registry import WidgetRegistry

logger = logging.getLogger(__name__)

STORE_NAME_PLACEHOLDER = re.compile(r"\{\{\s*(?:store_name|storeName)\s*\}\}", re.IGNORECASE)


@dataclass
class RenderContext:
    store: StoreInfo | None = None
    params: Mapping[str, str] = field(default_factory=dict)

    def scope(self, doc: PageDocument) -> dict[str, Any]:
        """Names visible to widget condition expressions."""
        store = {}
        if self.store is not None:
            store = {
                "id": str(self.store.id),
                "name": self.store.store_name,
                "slug": self.store.store_slug,
            }
        page = {"id": doc.id, "name": doc.name, "slug": doc.slug, "type": doc.page_type}
        return {"store": store, "page": page, "params": dict(self.params)}


def substitute_placeholders(value: Any, store_name: str | None) -> Any:
    if store_name is None:
        return value
    if isinstance(value, str):
        return STORE_NAME_PLACEHOLDER.sub(store_name, value)
    if isinstance(value, list):
        return [substitute_placeholders(v, store_name) for v in value]
    if isinstance(value, dict):
        return {k: substitute_placeholders(v, store_name) for k, v in value.items()}
    return value


class PageRenderer:
    def __init__(self, registry: WidgetRegistry):
        self.registry = registry

    def render(self, doc: PageDocument, context: RenderContext | None = None) -> RenderedPage:
        context = context or RenderContext()
        doc = self.registry.migrate_document(doc)
        scope = context.scope(doc)
        store_name = context.store.store_name if context.store else None

        sections = [
            RenderedSection(
                id=section.id,
                title=section.title,
                background=section.background,
                padding=section.padding,
                rows=[
                    RenderedRow(
                        id=row.id,
                        widgets=[
                            rendered
                            for w in row.widgets
                            if (rendered := self.render_widget(w, scope, store_name)) is not None
                        ],
                    )
                    for row in section.rows
                ],
            )
            for section in doc.sections
        ]
        return RenderedPage(
            id=doc.id,
            name=doc.name,
            slug=doc.slug,
            page_type=doc.page_type,
            seo=doc.seo,
            css_variables=resolve_document_palette(doc).variables,
            sections=sections,
        )

    def render_widget(
        self, widget: Widget, scope: Mapping[str, Any], store_name: str | None = None
    ) -> RenderedWidget | None:
        """Render one widget, or ``None`` when it is skipped.

        Unregistered types and props that fail their schema are skipped with a
        warning instead of failing the page.
        """
        if not self.registry.has(widget.type):
            logger.warning("Skipping widget %s: unknown type %r", widget.id, widget.type)
            return None
        if not evaluate_widget_conditions(widget.conditions, scope):
            logger.debug("Widget %s hidden by its conditions", widget.id)
            return None
        try:
            props = self.registry.validate_props(widget)
        except ValidationError as exc:
            logger.warning("Skipping widget %s (%s): invalid props: %s", widget.id, widget.type, exc)
            return None

        visibility = BreakpointVisibility(sm=True, md=True, lg=True)
        if widget.visibility is not None:
            visibility = visibility.model_copy(update=widget.visibility.model_dump(exclude_none=True))
        return RenderedWidget(
            id=widget.id,
            type=widget.type,
            version=widget.version,
            col_span=widget.col_span,
            props=substitute_placeholders(props, store_name),
            visibility=visibility,
            styles=widget.styles,
            animations=widget.animations,
            custom_css=widget.custom_css,
        )
