"""Color palette resolution: base palette + document overrides -> CSS variables.

Resolution is pure: the same (palette_id, custom_colors, apply_options) always
gives the same result, and the catalog palettes are never mutated.
"""

import logging
from collections.abc import Mapping

from storefront.core.config import settings
from storefront.schemas.page import PageDocument
from storefront.schemas.palette import COLOR_SLOTS, ColorPaletteApplyOptions, EffectivePalette
from storefront.services.palette_catalog import get_palette_by_id

logger = logging.getLogger(__name__)

# Slots emitted regardless of apply options (brand + status colors).
ALWAYS_EMITTED: tuple[tuple[str, str], ...] = (
    ("primary", "--color-primary"),
    ("primaryHover", "--color-primary-hover"),
    ("secondary", "--color-secondary"),
    ("secondaryHover", "--color-secondary-hover"),
    ("accent", "--color-accent"),
    ("accentHover", "--color-accent-hover"),
    ("success", "--color-success"),
    ("warning", "--color-warning"),
    ("error", "--color-error"),
    ("info", "--color-info"),
)

# apply-option name -> (slot, css variable) pairs it controls
CATEGORY_VARIABLES: dict[str, tuple[tuple[str, str], ...]] = {
    "backgrounds": (
        ("background", "--color-bg"),
        ("backgroundSecondary", "--color-bg-secondary"),
        ("backgroundAccent", "--color-bg-accent"),
    ),
    "text": (
        ("textPrimary", "--color-text"),
        ("textSecondary", "--color-text-secondary"),
        ("textMuted", "--color-text-muted"),
        ("textInverse", "--color-text-inverse"),
    ),
    "buttons": (
        ("buttonPrimary", "--color-btn-primary"),
        ("buttonPrimaryHover", "--color-btn-primary-hover"),
        ("buttonSecondary", "--color-btn-secondary"),
        ("buttonSecondaryHover", "--color-btn-secondary-hover"),
    ),
    "borders": (
        ("border", "--color-border"),
        ("borderHover", "--color-border-hover"),
        ("shadow", "--color-shadow"),
    ),
    "header_footer": (
        ("headerBackground", "--color-header-bg"),
        ("headerText", "--color-header-text"),
        ("footerBackground", "--color-footer-bg"),
        ("footerText", "--color-footer-text"),
    ),
}


def _coerce_options(
    apply_options: ColorPaletteApplyOptions | Mapping | None,
) -> ColorPaletteApplyOptions:
    if apply_options is None:
        return ColorPaletteApplyOptions()
    if isinstance(apply_options, ColorPaletteApplyOptions):
        return apply_options
    return ColorPaletteApplyOptions.model_validate(dict(apply_options))


def build_css_variables(
    colors: Mapping[str, str],
    apply_options: ColorPaletteApplyOptions | Mapping | None = None,
) -> dict[str, str]:
    """Project an effective color set onto the flat ``--color-*`` binding."""
    if not colors:
        return {}
    options = _coerce_options(apply_options)
    pairs = list(ALWAYS_EMITTED)
    for category, category_pairs in CATEGORY_VARIABLES.items():
        if getattr(options, category):
            pairs.extend(category_pairs)
    return {var: colors[slot] for slot, var in pairs if slot in colors}


def resolve_effective_palette(
    palette_id: str | None,
    custom_colors: Mapping[str, str | None] | None = None,
    apply_options: ColorPaletteApplyOptions | Mapping | None = None,
) -> EffectivePalette:
    """Merge a base palette with document overrides.

    Every slot present in ``custom_colors`` wins over the base palette; absent
    slots fall through. An unknown ``palette_id`` yields an empty palette.
    """
    base = get_palette_by_id(palette_id) if palette_id else None
    if base is None:
        if palette_id:
            logger.warning("Color palette %r not found; no colors applied", palette_id)
        return EffectivePalette(palette_id=palette_id)

    custom = custom_colors or {}
    colors: dict[str, str] = {}
    for slot in COLOR_SLOTS:
        override = custom.get(slot)
        colors[slot] = override if override is not None else base.colors[slot]

    return EffectivePalette(
        palette_id=base.id,
        colors=colors,
        variables=build_css_variables(colors, apply_options),
    )


def resolve_document_palette(doc: PageDocument) -> EffectivePalette:
    """Effective palette for a document's ``themeOverrides.colorPalette``.

    An override without a palette id builds on ``DEFAULT_PALETTE_ID``.
    """
    override = doc.color_palette
    if override is None:
        return EffectivePalette()
    return resolve_effective_palette(
        override.palette_id or settings.DEFAULT_PALETTE_ID,
        override.custom_colors,
        override.apply_options,
    )


def generate_palette_css(palette: EffectivePalette, selector: str = ":root") -> str:
    """Render the CSS variable binding as a stylesheet block ("" when empty)."""
    if not palette.variables:
        return ""
    body = "\n".join(f"  {name}: {value};" for name, value in palette.variables.items())
    return f"{selector} {{\n{body}\n}}\n"
