"""Editor-side checks on a page document before it is saved."""

from pydantic import ValidationError

from storefront.core.exceptions import ExpressionError
from storefront.schemas.page import SYSTEM_PAGE_TYPES, PageDocument, Widget
from storefront.services.conditions import parse_condition
from storefront.widgets.registry import WidgetRegistry


def _condition_error(widget: Widget) -> str | None:
    if widget.conditions is None:
        return None
    for source in (widget.conditions.show_when, widget.conditions.hide_when):
        if not source:
            continue
        try:
            parse_condition(source)
        except ExpressionError as exc:
            return exc.detail
    return None


def validate_document(doc: PageDocument, registry: WidgetRegistry) -> dict[str, str]:
    """Return ``{widget id: message}`` for every widget the registry rejects."""
    errors: dict[str, str] = {}
    for widget in doc.iter_widgets():
        config = registry.get(widget.type)
        if config is None:
            errors[widget.id] = f'Unknown widget type "{widget.type}"'
            continue
        if config.system_widget and doc.page_type not in SYSTEM_PAGE_TYPES:
            errors[widget.id] = f'Widget type "{widget.type}" is only allowed on header/footer pages'
            continue
        try:
            registry.validate_props(widget)
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(p) for p in first["loc"])
            errors[widget.id] = f"{location}: {first['msg']}" if location else first["msg"]
            continue
        condition_error = _condition_error(widget)
        if condition_error:
            errors[widget.id] = condition_error
    return errors
