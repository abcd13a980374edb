import re
from datetime import date
from xml.etree import ElementTree

import pytest

from contrib_chart.rendering.calendar import normalize
from contrib_chart.rendering.layout import compute_layout
from contrib_chart.rendering.models import ActivityRecord
from contrib_chart.rendering.models import RenderConfig
from contrib_chart.rendering.models import ThemeMode
from contrib_chart.rendering.palette import resolve_palette
from contrib_chart.rendering.svg import compose_svg


SVG_NS = "{http://www.w3.org/2000/svg}"
REFERENCE_DATE = date(2024, 12, 31)


def _compose(config: RenderConfig, records=()) -> str:
    calendar = normalize(records, REFERENCE_DATE)
    colors = resolve_palette(config.theme, config.mode, config.color)
    geometry = compute_layout(calendar.week_count, config)
    return compose_svg(calendar, colors, geometry, config)


def _texts(svg: str, css_class: str) -> list[str]:
    root = ElementTree.fromstring(svg)
    return [
        element.text
        for element in root.iter(f"{SVG_NS}text")
        if element.get("class") == css_class
    ]


def _cells(svg: str) -> list[ElementTree.Element]:
    root = ElementTree.fromstring(svg)
    return [rect for rect in root.iter(f"{SVG_NS}rect") if rect.get("data-date")]


def test_document_size_matches_geometry() -> None:
    config = RenderConfig(username="octocat", show_months=True, show_days=True)
    calendar = normalize([], REFERENCE_DATE)
    geometry = compute_layout(calendar.week_count, config)

    root = ElementTree.fromstring(_compose(config))

    assert root.get("width") == str(geometry.width)
    assert root.get("height") == str(geometry.height)
    assert root.get("viewBox") == f"0 0 {geometry.width} {geometry.height}"


def test_one_cell_per_day_in_calendar_order() -> None:
    svg = _compose(RenderConfig())
    calendar = normalize([], REFERENCE_DATE)

    cells = _cells(svg)

    assert [cell.get("data-date") for cell in cells] == [
        day.date.isoformat() for day in calendar.days
    ]


def test_background_rect_only_when_enabled() -> None:
    with_bg = _compose(RenderConfig(bg=True))
    without_bg = _compose(RenderConfig(bg=False))

    assert '<rect width="' in with_bg
    assert 'fill="#ffffff"' in with_bg
    assert '<rect width="' not in without_bg


def test_dark_mode_uses_dark_background_and_text() -> None:
    svg = _compose(RenderConfig(mode=ThemeMode.DARK, username="octocat"))

    assert 'fill="#0d1117"' in svg
    assert 'fill="#c9d1d9"' in svg


def test_empty_cells_are_translucent_without_background() -> None:
    records = [ActivityRecord(date="2024-06-03", count=3)]

    cells = _cells(_compose(RenderConfig(bg=False), records))

    for cell in cells:
        if cell.get("data-level") == "0":
            assert cell.get("fill-opacity") == "0.5"
        else:
            assert cell.get("fill-opacity") is None


def test_empty_cells_are_opaque_with_background() -> None:
    assert "fill-opacity" not in _compose(RenderConfig(bg=True))


def test_month_labels_one_per_year_month() -> None:
    labels = _texts(_compose(RenderConfig(show_months=True)), "month")

    # Window runs from Sunday 2023-12-31 through Saturday 2025-01-04.
    assert labels == [
        "Dec", "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
    ]


def test_day_labels_show_monday_wednesday_friday() -> None:
    assert _texts(_compose(RenderConfig(show_days=True)), "day-label") == [
        "Mon",
        "Wed",
        "Fri",
    ]


def test_legend_frames_all_five_colors() -> None:
    config = RenderConfig(theme="ocean")
    svg = _compose(config)

    assert _texts(svg, "legend") == ["Less", "More"]
    for color in resolve_palette("ocean", ThemeMode.LIGHT):
        assert f'fill="{color}"' in svg


def test_username_caption_is_escaped() -> None:
    svg = _compose(RenderConfig(username='<script>alert("x")</script>&'))

    assert "<script>" not in svg
    assert _texts(svg, "username") == ['<script>alert("x")</script>&']


def test_username_caption_strips_xml_invalid_characters() -> None:
    svg = _compose(RenderConfig(username="oct\x01cat\x0b\ufffe"))

    assert _texts(svg, "username") == ["octcat"]


def test_caption_of_only_invalid_characters_is_omitted() -> None:
    svg = _compose(RenderConfig(username="\x00\x1f"))

    assert _texts(svg, "username") == []


@pytest.mark.parametrize(
    "flags",
    [
        {},
        {"show_months": True, "show_days": True},
        {"show_scale": True, "show_username": True},
    ],
)
def test_grid_only_removes_all_text(flags: dict[str, bool]) -> None:
    svg = _compose(RenderConfig(grid_only=True, username="octocat", **flags))

    assert "<text" not in svg
    assert "octocat" not in svg
    assert len(_cells(svg)) == len(normalize([], REFERENCE_DATE).days)


def test_compose_is_deterministic() -> None:
    config = RenderConfig(
        username="octocat", show_months=True, show_days=True, color="#ff6b6b"
    )
    records = [ActivityRecord(date="2024-04-01", count=8)]

    assert _compose(config, records) == _compose(config, records)


def test_fractional_offsets_are_written_compactly() -> None:
    svg = _compose(RenderConfig(show_days=True, size=9))

    assert re.search(r'y="\d+\.5"', svg)
    assert ".0\"" not in svg


def test_compose_rejects_wrong_palette_size() -> None:
    config = RenderConfig()
    calendar = normalize([], REFERENCE_DATE)
    geometry = compute_layout(calendar.week_count, config)

    with pytest.raises(ValueError):
        compose_svg(calendar, ("#000000",) * 4, geometry, config)
