import math
import re
from collections.abc import Mapping
from types import MappingProxyType

from contrib_chart.rendering.errors import InvalidColorError
from contrib_chart.rendering.errors import InvalidThemeError
from contrib_chart.rendering.models import ThemeMode


ColorScale = tuple[str, str, str, str, str]

EMPTY_COLOR = "#ebedf0"

# Light-mode scales, index 0 is "no activity" and index 4 the busiest level.
THEMES: Mapping[str, ColorScale] = MappingProxyType(
    {
        "github": ("#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39"),
        "classic": ("#eeeeee", "#c6e48b", "#7bc96f", "#239a3b", "#196127"),
        "modern": ("#f0f0f0", "#b4daff", "#69b4ff", "#007bff", "#0056b3"),
        "nord": ("#eceff4", "#a3be8c", "#8fbcbb", "#81a1c1", "#5e81ac"),
        "solarized": ("#eee8d5", "#93a1a1", "#859900", "#b58900", "#cb4b16"),
        "sunset": ("#fee2e2", "#fecaca", "#f87171", "#dc2626", "#991b1b"),
        "ocean": ("#e0f2fe", "#7dd3fc", "#0ea5e9", "#0284c7", "#075985"),
        "dracula": ("#282a36", "#50fa7b", "#6272a4", "#bd93f9", "#ff79c6"),
        "monokai": ("#272822", "#a6e22e", "#f92672", "#ae81ff", "#fd971f"),
        "one-dark": ("#282c34", "#98c379", "#e06c75", "#c678dd", "#61afef"),
        "material-dark": ("#263238", "#c3e88d", "#ff5370", "#c792ea", "#82aaff"),
        "tokyo-night": ("#1a1b26", "#9ece6a", "#f7768e", "#bb9af7", "#7dcfff"),
        "gruvbox": ("#fbf1c7", "#98971a", "#cc241d", "#b16286", "#458588"),
        "catppuccin": ("#eff1f5", "#40a02b", "#d20f39", "#8839ef", "#1e66f5"),
    }
)

# GitHub's own dark palette for the colors of the light "github" theme.
DARK_COLOR_MAP: Mapping[str, str] = MappingProxyType(
    {
        "#ebedf0": "#161b22",
        "#9be9a8": "#0e4429",
        "#40c463": "#006d32",
        "#30a14e": "#26a641",
        "#216e39": "#39d353",
    }
)

DARK_FACTORS: tuple[float, ...] = (0.1, 0.2, 0.3, 0.4, 0.5)
CUSTOM_WHITE_MIX: tuple[float, ...] = (0.85, 0.7, 0.4)

_HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def theme_names() -> tuple[str, ...]:
    return tuple(THEMES)


def is_known_theme(name: str) -> bool:
    return name in THEMES


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """Parse `rrggbb` or `#rrggbb` into RGB channels.

    Raises:
        InvalidColorError: If the value is not a 6-digit hex color.
    """

    match = _HEX_COLOR_RE.match(value.strip())
    if match is None:
        raise InvalidColorError(f"invalid hex color: {value!r}")

    digits = match.group(1)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def format_hex_color(red: int, green: int, blue: int) -> str:
    return f"#{red:02x}{green:02x}{blue:02x}"


def lighten(rgb: tuple[int, int, int], factor: float) -> str:
    """Blend `rgb` toward white; 0.0 keeps the color, 1.0 gives white."""

    return format_hex_color(
        *(min(255, math.floor(channel + (255 - channel) * factor)) for channel in rgb)
    )


def custom_shades(color: str) -> ColorScale:
    """Expand a base color into a five-step scale ending in the color itself."""

    rgb = parse_hex_color(color)
    return (
        EMPTY_COLOR,
        *(lighten(rgb, factor) for factor in CUSTOM_WHITE_MIX),
        format_hex_color(*rgb),
    )


def dark_color(color: str, index: int) -> str:
    mapped = DARK_COLOR_MAP.get(color.lower())
    if mapped is not None:
        return mapped

    factor = DARK_FACTORS[index]
    return format_hex_color(
        *(max(0, math.floor(channel * factor)) for channel in parse_hex_color(color))
    )


def to_dark_mode(colors: ColorScale) -> ColorScale:
    """Convert a light-mode scale into its dark-mode counterpart."""

    return tuple(dark_color(color, index) for index, color in enumerate(colors))


def resolve_palette(
    theme: str, mode: ThemeMode = ThemeMode.LIGHT, color: str | None = None
) -> ColorScale:
    """Return the five colors used for levels 0..4.

    A custom `color` takes precedence over both `theme` and `mode`.

    Raises:
        InvalidColorError: If `color` is given but is not a hex RGB value.
        InvalidThemeError: If no custom color is given and `theme` is unknown.
    """

    if color:
        return custom_shades(color)

    colors = THEMES.get(theme)
    if colors is None:
        raise InvalidThemeError(f"unknown theme: {theme!r}")

    if mode == ThemeMode.DARK:
        return to_dark_mode(colors)
    return colors
