"""Predefined color palettes. Immutable; looked up by id."""

from storefront.schemas.palette import ColorPalette


def _palette(id: str, name: str, category: str, description: str, **colors: str) -> ColorPalette:
    return ColorPalette(id=id, name=name, category=category, description=description, colors=colors)


PREDEFINED_PALETTES: tuple[ColorPalette, ...] = (
    _palette(
        "modern-blue",
        "Modern Blue",
        "business",
        "Clean, trustworthy blues for professional stores",
        primary="#2563EB",
        primaryHover="#1D4ED8",
        secondary="#64748B",
        secondaryHover="#475569",
        accent="#0EA5E9",
        accentHover="#0284C7",
        background="#FFFFFF",
        backgroundSecondary="#F8FAFC",
        backgroundAccent="#EFF6FF",
        textPrimary="#0F172A",
        textSecondary="#334155",
        textMuted="#64748B",
        textInverse="#FFFFFF",
        border="#E2E8F0",
        borderHover="#CBD5E1",
        shadow="rgba(15, 23, 42, 0.08)",
        success="#16A34A",
        warning="#D97706",
        error="#DC2626",
        info="#0284C7",
        buttonPrimary="#2563EB",
        buttonPrimaryHover="#1D4ED8",
        buttonSecondary="#E2E8F0",
        buttonSecondaryHover="#CBD5E1",
        headerBackground="#FFFFFF",
        headerText="#0F172A",
        footerBackground="#0F172A",
        footerText="#E2E8F0",
    ),
    _palette(
        "ocean",
        "Ocean",
        "nature",
        "Deep sea blues with sandy neutrals",
        primary="#006994",
        primaryHover="#00567A",
        secondary="#2E8BC0",
        secondaryHover="#1F6F9C",
        accent="#48CAE4",
        accentHover="#00B4D8",
        background="#F7FBFC",
        backgroundSecondary="#E8F4F8",
        backgroundAccent="#D4ECF4",
        textPrimary="#0B2E3F",
        textSecondary="#1F4E63",
        textMuted="#5E7C8A",
        textInverse="#FFFFFF",
        border="#C5DEE8",
        borderHover="#9CC6D6",
        shadow="rgba(0, 105, 148, 0.12)",
        success="#2A9D8F",
        warning="#E9C46A",
        error="#E76F51",
        info="#48CAE4",
        buttonPrimary="#006994",
        buttonPrimaryHover="#00567A",
        buttonSecondary="#D4ECF4",
        buttonSecondaryHover="#B7DDEB",
        headerBackground="#006994",
        headerText="#FFFFFF",
        footerBackground="#0B2E3F",
        footerText="#D4ECF4",
    ),
    _palette(
        "forest",
        "Forest",
        "nature",
        "Earthy greens for organic and outdoor brands",
        primary="#2D6A4F",
        primaryHover="#1B4332",
        secondary="#74A57F",
        secondaryHover="#5C8A67",
        accent="#D4A373",
        accentHover="#BC8A5F",
        background="#FEFAE0",
        backgroundSecondary="#F4F1DE",
        backgroundAccent="#E9EDC9",
        textPrimary="#1B4332",
        textSecondary="#40916C",
        textMuted="#6B7F70",
        textInverse="#FFFFFF",
        border="#CCD5AE",
        borderHover="#B5C28F",
        shadow="rgba(27, 67, 50, 0.10)",
        success="#40916C",
        warning="#E9C46A",
        error="#BC4749",
        info="#52B788",
        buttonPrimary="#2D6A4F",
        buttonPrimaryHover="#1B4332",
        buttonSecondary="#E9EDC9",
        buttonSecondaryHover="#CCD5AE",
        headerBackground="#FEFAE0",
        headerText="#1B4332",
        footerBackground="#1B4332",
        footerText="#E9EDC9",
    ),
    _palette(
        "sunset",
        "Sunset",
        "creative",
        "Warm oranges and pinks for playful brands",
        primary="#F25C54",
        primaryHover="#D9483F",
        secondary="#F7B267",
        secondaryHover="#F4A04A",
        accent="#F79D65",
        accentHover="#F4845F",
        background="#FFFAF5",
        backgroundSecondary="#FFF1E6",
        backgroundAccent="#FFE5D9",
        textPrimary="#3D2C2E",
        textSecondary="#5C4346",
        textMuted="#8C7376",
        textInverse="#FFFFFF",
        border="#F8D9C7",
        borderHover="#F3BFA2",
        shadow="rgba(242, 92, 84, 0.12)",
        success="#57A773",
        warning="#F7B267",
        error="#C1121F",
        info="#4D96FF",
        buttonPrimary="#F25C54",
        buttonPrimaryHover="#D9483F",
        buttonSecondary="#FFE5D9",
        buttonSecondaryHover="#F8D9C7",
        headerBackground="#FFFAF5",
        headerText="#3D2C2E",
        footerBackground="#3D2C2E",
        footerText="#FFE5D9",
    ),
    _palette(
        "midnight",
        "Midnight",
        "bold",
        "High-contrast dark theme",
        primary="#A78BFA",
        primaryHover="#8B5CF6",
        secondary="#38BDF8",
        secondaryHover="#0EA5E9",
        accent="#F472B6",
        accentHover="#EC4899",
        background="#0B1120",
        backgroundSecondary="#111827",
        backgroundAccent="#1F2937",
        textPrimary="#F9FAFB",
        textSecondary="#D1D5DB",
        textMuted="#9CA3AF",
        textInverse="#0B1120",
        border="#1F2937",
        borderHover="#374151",
        shadow="rgba(0, 0, 0, 0.45)",
        success="#34D399",
        warning="#FBBF24",
        error="#F87171",
        info="#60A5FA",
        buttonPrimary="#8B5CF6",
        buttonPrimaryHover="#7C3AED",
        buttonSecondary="#1F2937",
        buttonSecondaryHover="#374151",
        headerBackground="#0B1120",
        headerText="#F9FAFB",
        footerBackground="#030712",
        footerText="#9CA3AF",
    ),
    _palette(
        "minimal-mono",
        "Minimal Mono",
        "minimal",
        "Black, white and greys",
        primary="#111111",
        primaryHover="#000000",
        secondary="#6B6B6B",
        secondaryHover="#4A4A4A",
        accent="#9E9E9E",
        accentHover="#7A7A7A",
        background="#FFFFFF",
        backgroundSecondary="#F5F5F5",
        backgroundAccent="#EBEBEB",
        textPrimary="#111111",
        textSecondary="#3D3D3D",
        textMuted="#757575",
        textInverse="#FFFFFF",
        border="#E0E0E0",
        borderHover="#BDBDBD",
        shadow="rgba(0, 0, 0, 0.08)",
        success="#2E7D32",
        warning="#F9A825",
        error="#C62828",
        info="#1565C0",
        buttonPrimary="#111111",
        buttonPrimaryHover="#000000",
        buttonSecondary="#EBEBEB",
        buttonSecondaryHover="#E0E0E0",
        headerBackground="#FFFFFF",
        headerText="#111111",
        footerBackground="#111111",
        footerText="#F5F5F5",
    ),
)

_BY_ID = {p.id: p for p in PREDEFINED_PALETTES}


def get_palette_by_id(palette_id: str) -> ColorPalette | None:
    return _BY_ID.get(palette_id)
