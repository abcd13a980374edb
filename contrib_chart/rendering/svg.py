import re
from collections.abc import Sequence
from xml.sax.saxutils import escape

from contrib_chart.rendering.layout import DAY_LABEL_ROWS
from contrib_chart.rendering.layout import Geometry
from contrib_chart.rendering.models import DenseCalendar
from contrib_chart.rendering.models import RenderConfig
from contrib_chart.rendering.models import ThemeMode


SVG_NAMESPACE = "http://www.w3.org/2000/svg"
FONT_FAMILY = "Figtree, system-ui, sans-serif"

MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

BACKGROUND_COLORS = {ThemeMode.LIGHT: "#ffffff", ThemeMode.DARK: "#0d1117"}
TEXT_COLORS = {ThemeMode.LIGHT: "#24292e", ThemeMode.DARK: "#c9d1d9"}

EMPTY_CELL_OPACITY = "0.5"

# Characters that may not appear anywhere in an XML 1.0 document.
_XML_INVALID_CHARS = re.compile(
    "[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]"
)


def _escape_text(content: str) -> str:
    return escape(_XML_INVALID_CHARS.sub("", content))


def _num(value: int | float) -> str:
    if isinstance(value, int) or not value.is_integer():
        return str(value)
    return str(int(value))


def _text(
    x: int | float,
    y: int | float,
    content: str,
    *,
    css_class: str,
    fill: str,
    font_size: int,
    font_weight: int = 400,
    opacity: str = "0.6",
    anchor: str | None = None,
) -> str:
    anchor_attr = f' text-anchor="{anchor}"' if anchor else ""
    return (
        f'<text class="{css_class}" x="{_num(x)}" y="{_num(y)}" '
        f'font-family="{FONT_FAMILY}" font-size="{font_size}" '
        f'font-weight="{font_weight}" fill="{fill}" opacity="{opacity}"'
        f"{anchor_attr}>{_escape_text(content)}</text>"
    )


def _rect(x: int, y: int, size: int, fill: str, radius: int, extra: str = "") -> str:
    return (
        f'<rect x="{x}" y="{y}" width="{size}" height="{size}" fill="{fill}" '
        f'rx="{radius}" ry="{radius}"{extra}/>'
    )


def _month_labels(
    calendar: DenseCalendar, geometry: Geometry, text_color: str
) -> list[str]:
    parts: list[str] = []
    seen_months: set[tuple[int, int]] = set()
    for week_index, week in enumerate(calendar.weeks):
        first_day = week[0].date
        year_month = (first_day.year, first_day.month)
        if year_month in seen_months:
            continue
        seen_months.add(year_month)
        parts.append(
            _text(
                geometry.week_x(week_index),
                geometry.month_label_y,
                MONTH_NAMES[first_day.month - 1],
                css_class="month",
                fill=text_color,
                font_size=10,
                opacity="0.8",
            )
        )
    return parts


def _day_labels(geometry: Geometry, text_color: str) -> list[str]:
    return [
        _text(
            geometry.day_label_x,
            geometry.day_label_y(weekday),
            DAY_NAMES[weekday],
            css_class="day-label",
            fill=text_color,
            font_size=9,
            anchor="end",
        )
        for weekday in DAY_LABEL_ROWS
    ]


def _cells(
    calendar: DenseCalendar,
    colors: Sequence[str],
    geometry: Geometry,
    config: RenderConfig,
) -> list[str]:
    parts: list[str] = []
    for week_index, week in enumerate(calendar.weeks):
        for weekday, day in enumerate(week):
            x, y = geometry.cell_origin(week_index, weekday)
            extra = f' data-date="{day.date.isoformat()}" data-level="{day.level}"'
            # Empty cells are half transparent when there is no background.
            if day.level == 0 and not config.bg:
                extra += f' fill-opacity="{EMPTY_CELL_OPACITY}"'
            parts.append(
                _rect(x, y, geometry.cell_size, colors[day.level], config.radius, extra)
            )
    return parts


def _legend(
    colors: Sequence[str], geometry: Geometry, config: RenderConfig, text_color: str
) -> list[str]:
    legend = geometry.legend
    parts = [
        _text(
            legend.less_x,
            legend.baseline,
            "Less",
            css_class="legend",
            fill=text_color,
            font_size=9,
            anchor="end",
        )
    ]
    for x, color in zip(legend.swatch_xs, colors):
        parts.append(_rect(x, legend.swatch_y, legend.swatch_size, color, config.radius))
    parts.append(
        _text(
            legend.more_x,
            legend.baseline,
            "More",
            css_class="legend",
            fill=text_color,
            font_size=9,
        )
    )
    return parts


def compose_svg(
    calendar: DenseCalendar,
    colors: Sequence[str],
    geometry: Geometry,
    config: RenderConfig,
) -> str:
    """Build the SVG document for a chart.

    The output depends only on the arguments, so identical inputs produce
    byte-identical documents.
    """

    if len(colors) != 5:
        raise ValueError("expected exactly 5 colors")
    if geometry.week_count != calendar.week_count:
        raise ValueError("geometry does not match calendar week count")

    width = geometry.width
    height = geometry.height
    text_color = TEXT_COLORS[config.mode]

    parts = [
        f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
        f'xmlns="{SVG_NAMESPACE}">'
    ]
    if config.bg:
        parts.append(
            f'<rect width="{width}" height="{height}" '
            f'fill="{BACKGROUND_COLORS[config.mode]}"/>'
        )
    if geometry.month_label_y is not None:
        parts.extend(_month_labels(calendar, geometry, text_color))
    if geometry.day_label_x is not None:
        parts.extend(_day_labels(geometry, text_color))
    parts.extend(_cells(calendar, colors, geometry, config))
    if geometry.legend is not None:
        parts.extend(_legend(colors, geometry, config, text_color))
    caption = _XML_INVALID_CHARS.sub("", config.username)
    if geometry.username_y is not None and caption:
        parts.append(
            _text(
                geometry.username_x,
                geometry.username_y,
                config.username,
                css_class="username",
                fill=text_color,
                font_size=10,
                font_weight=500,
                opacity="0.8",
            )
        )
    parts.append("</svg>")
    return "".join(parts)
