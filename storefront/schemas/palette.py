"""Color palette schemas and the fixed color slot schema."""

from pydantic import BaseModel, Field, field_validator

from storefront.schemas.common import CamelModel

# The 28 named color slots every palette defines.
COLOR_SLOTS: tuple[str, ...] = (
    "primary",
    "primaryHover",
    "secondary",
    "secondaryHover",
    "accent",
    "accentHover",
    "background",
    "backgroundSecondary",
    "backgroundAccent",
    "textPrimary",
    "textSecondary",
    "textMuted",
    "textInverse",
    "border",
    "borderHover",
    "shadow",
    "success",
    "warning",
    "error",
    "info",
    "buttonPrimary",
    "buttonPrimaryHover",
    "buttonSecondary",
    "buttonSecondaryHover",
    "headerBackground",
    "headerText",
    "footerBackground",
    "footerText",
)

PALETTE_CATEGORIES = ("business", "creative", "minimal", "bold", "nature", "elegant")


class ColorPalette(BaseModel):
    id: str
    name: str
    description: str = ""
    category: str
    colors: dict[str, str]

    model_config = {"frozen": True}

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        if v not in PALETTE_CATEGORIES:
            raise ValueError(f"Unknown palette category '{v}'")
        return v

    @field_validator("colors")
    @classmethod
    def validate_colors(cls, v: dict[str, str]) -> dict[str, str]:
        missing = [slot for slot in COLOR_SLOTS if slot not in v]
        if missing:
            raise ValueError(f"Palette is missing color slots: {', '.join(missing)}")
        return v


class ColorPaletteApplyOptions(CamelModel):
    """Which slot categories are emitted to the CSS variable binding."""

    backgrounds: bool = True
    buttons: bool = True
    text: bool = True
    borders: bool = True
    header_footer: bool = True
    custom_elements: list[str] = Field(default_factory=list)


class EffectivePalette(BaseModel):
    """Base palette merged with document overrides, plus its output binding."""

    palette_id: str | None = None
    colors: dict[str, str] = Field(default_factory=dict)
    variables: dict[str, str] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.colors
