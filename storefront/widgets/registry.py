"""Widget registry: widget type tag -> props schema, defaults and migration hook.

The registry is an explicit object built at startup (``build_default_registry``)
and handed to the renderer and editor through dependencies. Nothing registers
itself at import time.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from storefront.schemas.page import BreakpointSpan, BreakpointVisibility, PageDocument, Widget

logger = logging.getLogger(__name__)

MigrateHook = Callable[[Widget, int], Widget]

WIDGET_CATEGORIES = ("content", "media", "commerce", "layout")


def _full_width() -> BreakpointSpan:
    return BreakpointSpan(sm=12, md=12, lg=12)


@dataclass(frozen=True)
class WidgetConfig:
    type: str
    name: str
    schema: type[BaseModel]
    default_props: dict[str, Any]
    category: str = "content"
    description: str = ""
    default_col_span: BreakpointSpan = field(default_factory=_full_width)
    migrate: MigrateHook | None = None
    # System widgets (header/footer layouts) are hidden from the widget library.
    system_widget: bool = False


class WidgetRegistry:
    def __init__(self) -> None:
        self._widgets: dict[str, WidgetConfig] = {}

    def register(self, config: WidgetConfig) -> None:
        """Register a widget config. The last registration for a type wins."""
        if config.type in self._widgets:
            logger.debug("Replacing widget registration for type %r", config.type)
        self._widgets[config.type] = config

    def get(self, widget_type: str) -> WidgetConfig | None:
        return self._widgets.get(widget_type)

    def has(self, widget_type: str) -> bool:
        return widget_type in self._widgets

    def types(self) -> list[str]:
        return list(self._widgets)

    def all(self) -> list[WidgetConfig]:
        return list(self._widgets.values())

    def user_widgets(self) -> list[WidgetConfig]:
        return [c for c in self._widgets.values() if not c.system_widget]

    def by_category(self, category: str, *, include_system: bool = False) -> list[WidgetConfig]:
        pool = self.all() if include_system else self.user_widgets()
        return [c for c in pool if c.category == category]

    def create_widget(self, widget_type: str, widget_id: str) -> Widget:
        """Build a fresh widget instance from the type's defaults."""
        config = self.get(widget_type)
        if config is None:
            raise KeyError(f'Widget type "{widget_type}" not found')
        return Widget(
            id=widget_id,
            type=widget_type,
            version=1,
            col_span=config.default_col_span.model_copy(),
            props=dict(config.default_props),
            visibility=BreakpointVisibility(sm=True, md=True, lg=True),
        )

    def validate_props(self, widget: Widget) -> dict[str, Any]:
        """Validate ``widget.props`` (merged over the type defaults).

        Returns the normalized props dict. Raises ``KeyError`` for an unregistered
        type and ``pydantic.ValidationError`` for a schema mismatch.
        """
        config = self.get(widget.type)
        if config is None:
            raise KeyError(f'Widget type "{widget.type}" not found')
        merged = {**config.default_props, **widget.props}
        validated = config.schema.model_validate(merged)
        return validated.model_dump(by_alias=True, exclude_none=True)

    def migrate_widget(self, widget: Widget, target_version: int) -> Widget:
        """Step a widget up to ``target_version`` one version at a time.

        Widgets already at (or past) the target, or whose type has no migrate
        hook, come back unchanged.
        """
        config = self.get(widget.type)
        if config is None or config.migrate is None or widget.version >= target_version:
            return widget

        migrated = widget
        while migrated.version < target_version:
            step = config.migrate(migrated, migrated.version + 1)
            if step.version <= migrated.version:
                logger.warning(
                    "Migration for %r stalled at version %d (target %d)",
                    widget.type,
                    migrated.version,
                    target_version,
                )
                break
            migrated = step
        return migrated

    def migrate_document(self, doc: PageDocument) -> PageDocument:
        """Migrate every widget whose version differs from the document version."""
        sections = []
        for section in doc.sections:
            rows = []
            for row in section.rows:
                widgets = [
                    self.migrate_widget(w, doc.version) if w.version != doc.version else w
                    for w in row.widgets
                ]
                rows.append(row.model_copy(update={"widgets": widgets}))
            sections.append(section.model_copy(update={"rows": rows}))
        return doc.model_copy(update={"sections": sections})
