"""Render-pass output served to the storefront client."""

from typing import Any

from pydantic import Field

from storefront.schemas.common import CamelModel
from storefront.schemas.page import (
    BreakpointSpan,
    BreakpointVisibility,
    NavigationPlacement,
    SectionBackground,
    SeoSettings,
)
from storefront.schemas.store import StoreInfo


class RenderedWidget(CamelModel):
    id: str
    type: str
    version: int
    col_span: BreakpointSpan
    props: dict[str, Any]
    visibility: BreakpointVisibility
    styles: dict[str, Any] | None = None
    animations: dict[str, Any] | None = None
    custom_css: str | None = Field(None, alias="customCSS")


class RenderedRow(CamelModel):
    id: str
    widgets: list[RenderedWidget] = Field(default_factory=list)


class RenderedSection(CamelModel):
    id: str
    title: str | None = None
    background: SectionBackground | None = None
    padding: str | None = None
    rows: list[RenderedRow] = Field(default_factory=list)


class RenderedPage(CamelModel):
    id: str
    name: str
    slug: str | None = None
    page_type: str | None = None
    seo: SeoSettings | None = None
    css_variables: dict[str, str] = Field(default_factory=dict)
    sections: list[RenderedSection] = Field(default_factory=list)


class NavigationLink(CamelModel):
    id: str
    name: str
    slug: str | None = None
    href: str
    placement: NavigationPlacement


class StorefrontNavigation(CamelModel):
    header: list[NavigationLink] = Field(default_factory=list)
    footer: list[NavigationLink] = Field(default_factory=list)


class StorefrontResponse(CamelModel):
    store: StoreInfo
    header: RenderedPage | None = None
    footer: RenderedPage | None = None
    page: RenderedPage | None = None
    page_found: bool = False
    navigation: StorefrontNavigation = Field(default_factory=StorefrontNavigation)
