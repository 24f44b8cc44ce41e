"""Page document model: Section -> Row -> Widget, plus page-level metadata."""

import logging
from collections.abc import Iterator
from datetime import datetime
from typing import Any, Literal

from pydantic import ConfigDict, Field, field_validator, model_validator

from storefront.schemas.common import CamelModel
from storefront.schemas.palette import COLOR_SLOTS, ColorPaletteApplyOptions

logger = logging.getLogger(__name__)

PageStatus = Literal["draft", "published", "archived", "scheduled"]
NavigationPlacement = Literal["header", "footer", "both", "none"]

SYSTEM_PAGE_TYPES = ("header", "footer")
NAVIGATION_PLACEMENTS = ("header", "footer", "both")


class BreakpointSpan(CamelModel):
    sm: int | None = Field(None, ge=1, le=12)
    md: int | None = Field(None, ge=1, le=12)
    lg: int | None = Field(None, ge=1, le=12)


class BreakpointVisibility(CamelModel):
    sm: bool | None = None
    md: bool | None = None
    lg: bool | None = None


class WidgetConditions(CamelModel):
    show_when: str | None = None
    hide_when: str | None = None


class Widget(CamelModel):
    """One widget instance. ``props`` are validated against the registry schema
    for ``type`` at render/save time, not here: an unregistered type must still
    load so the renderer can skip it."""

    id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    version: int = Field(1, ge=1)
    col_span: BreakpointSpan = Field(default_factory=BreakpointSpan)
    props: dict[str, Any] = Field(default_factory=dict)
    visibility: BreakpointVisibility | None = None
    styles: dict[str, Any] | None = None
    animations: dict[str, Any] | None = None
    custom_css: str | None = Field(None, alias="customCSS")
    conditions: WidgetConditions | None = None


class Row(CamelModel):
    id: str
    widgets: list[Widget] = Field(default_factory=list)


class SectionBackground(CamelModel):
    color_token: str | None = None
    image_url: str | None = None
    video_url: str | None = None


class Section(CamelModel):
    id: str
    title: str | None = None
    rows: list[Row] = Field(default_factory=list)
    background: SectionBackground | None = None
    padding: str | None = None


class ColorPaletteOverride(CamelModel):
    palette_id: str | None = None
    custom_colors: dict[str, str] = Field(default_factory=dict)
    apply_options: ColorPaletteApplyOptions | None = None

    @field_validator("custom_colors")
    @classmethod
    def drop_unknown_slots(cls, v: dict[str, str]) -> dict[str, str]:
        unknown = sorted(set(v) - set(COLOR_SLOTS))
        if unknown:
            logger.warning("Ignoring unknown custom color slots: %s", ", ".join(unknown))
        return {k: c for k, c in v.items() if k in COLOR_SLOTS}


class ThemeOverrides(CamelModel):
    """Free-form theme tokens plus the optional palette override."""

    model_config = ConfigDict(extra="allow")

    color_palette: ColorPaletteOverride | None = None


class SeoSettings(CamelModel):
    model_config = ConfigDict(extra="allow")

    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None
    open_graph_title: str | None = None
    open_graph_description: str | None = None
    open_graph_image: str | None = None
    twitter_card: str | None = None
    twitter_image: str | None = None
    canonical_url: str | None = None
    structured_data: dict[str, Any] | None = None


class HistoryEntry(CamelModel):
    id: str
    created_at: datetime
    author_id: str | None = None
    note: str | None = None
    version: int
    snapshot: "PageDocument | None" = None


class PageDocument(CamelModel):
    """Aggregate root of the page builder."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = None
    version: int = Field(1, ge=1)
    sections: list[Section] = Field(default_factory=list)
    status: PageStatus = "draft"
    published_at: datetime | None = None
    scheduled_for: datetime | None = None
    navigation_placement: NavigationPlacement | None = None
    page_type: str | None = None
    footer_column: int | None = Field(None, ge=1, le=4)
    theme_overrides: ThemeOverrides | None = None
    seo: SeoSettings | None = None
    custom_code: dict[str, Any] | None = None
    global_styles: dict[str, Any] | None = None
    history: list[HistoryEntry] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def check_unique_widget_ids(self) -> "PageDocument":
        seen: set[str] = set()
        for widget in self.iter_widgets():
            if widget.id in seen:
                raise ValueError(f"Duplicate widget id '{widget.id}'")
            seen.add(widget.id)
        return self

    def iter_widgets(self) -> Iterator[Widget]:
        for section in self.sections:
            for row in section.rows:
                yield from row.widgets

    def find_widget(self, widget_id: str) -> Widget | None:
        return next((w for w in self.iter_widgets() if w.id == widget_id), None)

    @property
    def is_system_page(self) -> bool:
        return self.page_type in SYSTEM_PAGE_TYPES

    @property
    def has_content(self) -> bool:
        return bool(self.sections)

    @property
    def is_renderable(self) -> bool:
        """Published with at least one section. Empty sections mean "no content"."""
        return self.status == "published" and self.has_content

    @property
    def color_palette(self) -> ColorPaletteOverride | None:
        if self.theme_overrides is None:
            return None
        return self.theme_overrides.color_palette


HistoryEntry.model_rebuild()


class NavigationPage(CamelModel):
    id: str
    name: str
    slug: str | None = None
    navigation_placement: NavigationPlacement | None = None


class PublishedPageSummary(NavigationPage):
    page_type: str | None = None
    sections: list[Section] = Field(default_factory=list)


class PageTemplate(CamelModel):
    """Starter content for a new page (everything except identity and lifecycle)."""

    id: str
    name: str
    description: str = ""
    sections: list[Section] = Field(default_factory=list)
    theme_overrides: ThemeOverrides | None = None
    seo: SeoSettings | None = None


class PageCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    page_type: str | None = None
    navigation_placement: NavigationPlacement | None = None
    template: PageTemplate | None = None


class PageScheduleRequest(CamelModel):
    scheduled_for: datetime


class PagePublishRequest(CamelModel):
    author_id: str | None = None
    note: str | None = None


class PublishDueResponse(CamelModel):
    published: list[str]
