from collections.abc import Mapping
from datetime import date
from types import MappingProxyType
from typing import Any

from contrib_chart.rendering.models import GAP_RANGE
from contrib_chart.rendering.models import MARGIN_RANGE
from contrib_chart.rendering.models import RADIUS_RANGE
from contrib_chart.rendering.models import SIZE_RANGE
from contrib_chart.rendering.models import RenderConfig
from contrib_chart.rendering.models import ThemeMode
from contrib_chart.rendering.palette import is_known_theme


def _preset(
    *,
    bg: bool,
    grid_only: bool,
    margin: int,
    radius: int,
    gap: int,
    show_months: bool,
    show_days: bool,
    show_footer: bool,
    size: int = 10,
) -> Mapping[str, Any]:
    return MappingProxyType(
        {
            "bg": bg,
            "grid_only": grid_only,
            "margin": margin,
            "radius": radius,
            "gap": gap,
            "size": size,
            "show_months": show_months,
            "show_days": show_days,
            "show_scale": show_footer,
            "show_username": show_footer,
        }
    )


# Presets fix layout options only; theme, mode and color stay with the caller.
PRESETS: Mapping[str, Mapping[str, Any]] = MappingProxyType(
    {
        "minimal": _preset(
            bg=False, grid_only=True, margin=5, radius=2, gap=1,
            show_months=False, show_days=False, show_footer=False,
        ),
        "compact": _preset(
            bg=True, grid_only=True, margin=10, radius=1, gap=1,
            show_months=False, show_days=False, show_footer=False,
        ),
        "classic": _preset(
            bg=True, grid_only=False, margin=20, radius=2, gap=2,
            show_months=True, show_days=False, show_footer=True,
        ),
        "modern": _preset(
            bg=True, grid_only=False, margin=20, radius=3, gap=2,
            show_months=False, show_days=True, show_footer=True,
        ),
        "full": _preset(
            bg=True, grid_only=False, margin=25, radius=2, gap=2,
            show_months=True, show_days=True, show_footer=True,
        ),
        "dark": _preset(
            bg=True, grid_only=False, margin=20, radius=2, gap=2,
            show_months=True, show_days=False, show_footer=True,
        ),
        "coder": _preset(
            bg=True, grid_only=False, margin=20, radius=2, gap=2,
            show_months=True, show_days=False, show_footer=True,
        ),
    }
)

_CLAMPED_FIELDS: Mapping[str, tuple[int, int]] = MappingProxyType(
    {
        "radius": RADIUS_RANGE,
        "gap": GAP_RANGE,
        "size": SIZE_RANGE,
        "margin": MARGIN_RANGE,
    }
)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def reference_date_for(year: int | None, today: date) -> date:
    """Return the last day the chart should cover.

    Past years end on 31 December; the current year (or no year) ends today.
    """

    if year is None or year >= today.year:
        return today
    return date(year, 12, 31)


def build_render_config(
    username: str,
    *,
    default_theme: str,
    preset: str | None = None,
    theme: str | None = None,
    mode: ThemeMode = ThemeMode.LIGHT,
    color: str | None = None,
    **overrides: int | bool | None,
) -> RenderConfig:
    """Merge explicit options, a preset and defaults into a `RenderConfig`.

    Explicit values win over the preset, which wins over the defaults.
    Numeric options are clamped to their supported ranges and an unknown
    theme falls back to `default_theme`.
    """

    unknown = set(overrides) - set(RenderConfig.model_fields)
    if unknown:
        raise TypeError(f"unknown chart options: {', '.join(sorted(unknown))}")

    options: dict[str, Any] = dict(PRESETS.get(preset or "", {}))
    options.update({key: value for key, value in overrides.items() if value is not None})

    for field, (low, high) in _CLAMPED_FIELDS.items():
        if field in options:
            options[field] = clamp(int(options[field]), low, high)

    return RenderConfig(
        username=username,
        theme=theme if theme and is_known_theme(theme) else default_theme,
        mode=mode,
        color=color or None,
        **options,
    )
