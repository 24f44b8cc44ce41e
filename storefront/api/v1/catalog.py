"""Read-only catalogs the editor needs: registered widgets and predefined palettes."""

from fastapi import APIRouter, Depends, Query

from storefront.core.dependencies import get_widget_registry
from storefront.schemas.palette import ColorPalette
from storefront.services.palette_catalog import PREDEFINED_PALETTES
from storefront.widgets.registry import WidgetRegistry

router = APIRouter()


@router.get("/widgets")
async def list_widgets(
    include_system: bool = Query(False, alias="includeSystem"),
    registry: WidgetRegistry = Depends(get_widget_registry),
):
    configs = registry.all() if include_system else registry.user_widgets()
    return [
        {
            "type": c.type,
            "name": c.name,
            "description": c.description,
            "category": c.category,
            "systemWidget": c.system_widget,
            "defaultProps": c.default_props,
            "defaultColSpan": c.default_col_span.model_dump(exclude_none=True),
            "propsSchema": c.schema.model_json_schema(by_alias=True),
        }
        for c in configs
    ]


@router.get("/palettes", response_model=list[ColorPalette])
async def list_palettes():
    return list(PREDEFINED_PALETTES)
