"""Props schemas for the built-in widgets."""

from typing import Literal

from pydantic import Field

from storefront.schemas.common import CamelModel


class TextProps(CamelModel):
    content: str = ""
    text_align: Literal["left", "center", "right", "justify"] = "left"
    font_size: Literal["xs", "sm", "base", "lg", "xl", "2xl", "3xl", "4xl", "5xl", "6xl"] = "base"
    font_weight: Literal["normal", "medium", "semibold", "bold"] = "normal"
    color: str = "text-gray-900"
    max_width: str | None = None
    line_height: Literal["tight", "snug", "normal", "relaxed", "loose"] = "normal"
    allow_html: bool = False


class ButtonProps(CamelModel):
    text: str = Field(..., min_length=1)
    url: str | None = None
    style: Literal["primary", "secondary", "outline", "ghost"] = "primary"
    size: Literal["sm", "md", "lg"] = "md"
    open_in_new_tab: bool = False


class ImageProps(CamelModel):
    src: str
    alt: str = ""
    caption: str | None = None
    link: str | None = None
    object_fit: Literal["cover", "contain", "fill"] = "cover"


class HeroProps(CamelModel):
    title: str
    subtitle: str | None = None
    background_image: str | None = None
    cta_text: str | None = None
    cta_url: str | None = None
    alignment: Literal["left", "center", "right"] = "center"
    height: Literal["sm", "md", "lg", "screen"] = "lg"


class SpacerProps(CamelModel):
    height: int = Field(40, ge=0, le=400)


class DividerProps(CamelModel):
    style: Literal["solid", "dashed", "dotted"] = "solid"
    thickness: int = Field(1, ge=1, le=10)
    color: str | None = None


class GalleryImage(CamelModel):
    src: str
    alt: str = ""
    caption: str | None = None


class GalleryProps(CamelModel):
    images: list[GalleryImage] = Field(default_factory=list)
    columns: int = Field(3, ge=1, le=6)
    lightbox: bool = True


class ProductGridProps(CamelModel):
    title: str | None = None
    columns: int = Field(4, ge=1, le=6)
    limit: int = Field(8, ge=1, le=48)
    category_id: str | None = None
    sort_by: Literal["newest", "price_asc", "price_desc", "name"] = "newest"
    show_price: bool = True
    show_add_to_cart: bool = True


class FeaturedProductProps(CamelModel):
    product_id: str | None = None
    layout: Literal["image-left", "image-right", "stacked"] = "image-left"
    show_description: bool = True


class NavItem(CamelModel):
    label: str
    url: str


class NavigationProps(CamelModel):
    orientation: Literal["horizontal", "vertical"] = "horizontal"
    use_dynamic_pages: bool = True
    items: list[NavItem] = Field(default_factory=list)


class SubscribeProps(CamelModel):
    title: str = "Subscribe to our newsletter"
    description: str | None = None
    placeholder: str = "Enter your email"
    button_text: str = "Subscribe"


class HeaderLayoutProps(CamelModel):
    logo_url: str | None = None
    show_logo: bool = True
    show_store_name: bool = True
    layout: Literal["logo-left", "logo-center", "logo-right"] = "logo-left"
    sticky: bool = False
    navigation_source: Literal["dynamic", "manual"] = "dynamic"
    menu_items: list[NavItem] = Field(default_factory=list)
    show_cart: bool = True
    show_search: bool = False


class FooterColumn(CamelModel):
    title: str
    links: list[NavItem] = Field(default_factory=list)


class FooterLayoutProps(CamelModel):
    columns: list[FooterColumn] = Field(default_factory=list)
    copyright_text: str = "© {{store_name}}. All rights reserved."
    show_social: bool = False
    social_links: list[NavItem] = Field(default_factory=list)
    show_newsletter: bool = False
