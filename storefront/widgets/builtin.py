"""Built-in widget configurations and the default registry factory."""

from storefront.schemas.form import FormProps
from storefront.schemas.page import BreakpointSpan, Widget
from storefront.widgets import schemas
from storefront.widgets.registry import WidgetConfig, WidgetRegistry


def _migrate_text(widget: Widget, target_version: int) -> Widget:
    # v2 added allowHtml; older content is always treated as plain text.
    if widget.version == 1 and target_version == 2:
        props = {**widget.props, "allowHtml": widget.props.get("allowHtml", False)}
        return widget.model_copy(update={"version": 2, "props": props})
    return widget


TEXT = WidgetConfig(
    type="text",
    name="Text",
    description="Add rich text content to your page",
    category="content",
    schema=schemas.TextProps,
    default_props={
        "content": "Enter your text here...",
        "textAlign": "left",
        "fontSize": "base",
        "fontWeight": "normal",
        "color": "text-gray-900",
        "lineHeight": "normal",
        "allowHtml": False,
    },
    migrate=_migrate_text,
)

BUTTON = WidgetConfig(
    type="button",
    name="Button",
    description="Call-to-action button",
    category="content",
    default_col_span=BreakpointSpan(sm=12, md=6, lg=4),
    schema=schemas.ButtonProps,
    default_props={"text": "Click me", "url": "#", "style": "primary", "size": "md"},
)

IMAGE = WidgetConfig(
    type="image",
    name="Image",
    description="Single image with optional caption and link",
    category="media",
    default_col_span=BreakpointSpan(sm=12, md=6, lg=6),
    schema=schemas.ImageProps,
    default_props={"src": "", "alt": "", "objectFit": "cover"},
)

HERO = WidgetConfig(
    type="hero",
    name="Hero",
    description="Full-width banner with headline and call to action",
    category="layout",
    schema=schemas.HeroProps,
    default_props={
        "title": "Welcome to {{store_name}}",
        "subtitle": "Discover our latest products",
        "ctaText": "Shop now",
        "ctaUrl": "/products",
        "alignment": "center",
        "height": "lg",
    },
)

SPACER = WidgetConfig(
    type="spacer",
    name="Spacer",
    description="Vertical whitespace",
    category="layout",
    schema=schemas.SpacerProps,
    default_props={"height": 40},
)

DIVIDER = WidgetConfig(
    type="divider",
    name="Divider",
    description="Horizontal rule",
    category="layout",
    schema=schemas.DividerProps,
    default_props={"style": "solid", "thickness": 1},
)

GALLERY = WidgetConfig(
    type="gallery",
    name="Gallery",
    description="Grid of images",
    category="media",
    schema=schemas.GalleryProps,
    default_props={"images": [], "columns": 3, "lightbox": True},
)

PRODUCT_GRID = WidgetConfig(
    type="productGrid",
    name="Product Grid",
    description="Grid of products from the catalog",
    category="commerce",
    schema=schemas.ProductGridProps,
    default_props={
        "title": "Our Products",
        "columns": 4,
        "limit": 8,
        "sortBy": "newest",
        "showPrice": True,
        "showAddToCart": True,
    },
)

FEATURED_PRODUCT = WidgetConfig(
    type="featuredProduct",
    name="Featured Product",
    description="Highlight a single product",
    category="commerce",
    schema=schemas.FeaturedProductProps,
    default_props={"layout": "image-left", "showDescription": True},
)

NAVIGATION = WidgetConfig(
    type="navigation",
    name="Navigation",
    description="Menu built from published pages or manual links",
    category="layout",
    schema=schemas.NavigationProps,
    default_props={"orientation": "horizontal", "useDynamicPages": True, "items": []},
)

SUBSCRIBE = WidgetConfig(
    type="subscribe",
    name="Subscribe",
    description="Newsletter sign-up",
    category="content",
    default_col_span=BreakpointSpan(sm=12, md=8, lg=6),
    schema=schemas.SubscribeProps,
    default_props={
        "title": "Subscribe to our newsletter",
        "placeholder": "Enter your email",
        "buttonText": "Subscribe",
    },
)

FORM = WidgetConfig(
    type="form",
    name="Advanced Form",
    description="Customizable form with multiple field types and integrations",
    category="content",
    default_col_span=BreakpointSpan(sm=12, md=8, lg=6),
    schema=FormProps,
    default_props={
        "title": "Contact Form",
        "description": "Get in touch with us",
        "fields": [
            {"id": "name", "type": "text", "label": "Full Name", "required": True},
            {"id": "email", "type": "email", "label": "Email Address", "required": True},
            {"id": "message", "type": "textarea", "label": "Message", "required": True},
        ],
        "submitButton": {"text": "Send Message", "loadingText": "Sending..."},
        "actions": {
            "onSubmit": "email",
            "emailTo": "contact@example.com",
            "successMessage": "Thank you for your message! We'll get back to you soon.",
            "errorMessage": "Sorry, there was an error sending your message. Please try again.",
        },
        "validation": {"validateOnBlur": True, "validateOnChange": False},
    },
)

HEADER_LAYOUT = WidgetConfig(
    type="header-layout",
    name="Header Layout",
    description="Store header: logo, navigation and cart",
    category="layout",
    schema=schemas.HeaderLayoutProps,
    default_props={"showLogo": True, "showStoreName": True, "navigationSource": "dynamic"},
    system_widget=True,
)

FOOTER_LAYOUT = WidgetConfig(
    type="footer-layout",
    name="Footer Layout",
    description="Store footer: link columns and copyright",
    category="layout",
    schema=schemas.FooterLayoutProps,
    default_props={"columns": [], "copyrightText": "© {{store_name}}. All rights reserved."},
    system_widget=True,
)

BUILTIN_WIDGETS = (
    TEXT,
    BUTTON,
    IMAGE,
    HERO,
    SPACER,
    DIVIDER,
    GALLERY,
    PRODUCT_GRID,
    FEATURED_PRODUCT,
    NAVIGATION,
    SUBSCRIBE,
    FORM,
    HEADER_LAYOUT,
    FOOTER_LAYOUT,
)


def build_default_registry() -> WidgetRegistry:
    registry = WidgetRegistry()
    for config in BUILTIN_WIDGETS:
        registry.register(config)
    return registry
