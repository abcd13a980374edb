from dataclasses import dataclass

from contrib_chart.rendering.models import DAYS_PER_WEEK
from contrib_chart.rendering.models import RenderConfig


DAY_LABEL_WIDTH = 30
MONTH_LABEL_HEIGHT = 20
LEGEND_HEIGHT = 20
USERNAME_HEIGHT = 20

MONTH_LABEL_BASELINE = 15
DAY_LABEL_INSET = 25
DAY_LABEL_ROWS: tuple[int, ...] = (1, 3, 5)
BAND_BASELINE_OFFSET = 6

LEGEND_SWATCHES = 5
LEGEND_SWATCH_MAX = 10
LEGEND_MORE_WIDTH = 24
LEGEND_LABEL_PADDING = 4


@dataclass(frozen=True)
class LegendGeometry:
    baseline: int
    less_x: int
    more_x: int
    swatch_size: int
    swatch_y: int
    swatch_xs: tuple[int, ...]


@dataclass(frozen=True)
class Geometry:
    """Pixel geometry for one chart; every offset is in canvas units."""

    width: int
    height: int
    week_count: int
    cell_size: int
    gap: int
    grid_x: int
    grid_y: int
    month_label_y: int | None
    day_label_x: int | None
    legend: LegendGeometry | None
    username_x: int | None
    username_y: int | None

    @property
    def stride(self) -> int:
        return self.cell_size + self.gap

    @property
    def grid_right(self) -> int:
        return self.grid_x + (self.week_count - 1) * self.stride + self.cell_size

    @property
    def grid_bottom(self) -> int:
        return self.grid_y + (DAYS_PER_WEEK - 1) * self.stride + self.cell_size

    def week_x(self, week_index: int) -> int:
        return self.grid_x + week_index * self.stride

    def cell_origin(self, week_index: int, weekday: int) -> tuple[int, int]:
        return self.week_x(week_index), self.grid_y + weekday * self.stride

    def day_label_y(self, weekday: int) -> float:
        return self.grid_y + weekday * self.stride + self.cell_size / 2 + 3


def _legend_geometry(
    baseline: int, grid_right: int, cell_size: int, gap: int
) -> LegendGeometry:
    swatch_size = min(cell_size, LEGEND_SWATCH_MAX)
    more_x = grid_right - LEGEND_MORE_WIDTH
    swatches_width = LEGEND_SWATCHES * swatch_size + (LEGEND_SWATCHES - 1) * gap
    swatches_x = more_x - LEGEND_LABEL_PADDING - swatches_width
    return LegendGeometry(
        baseline=baseline,
        less_x=swatches_x - LEGEND_LABEL_PADDING,
        more_x=more_x,
        swatch_size=swatch_size,
        swatch_y=baseline - swatch_size,
        swatch_xs=tuple(
            swatches_x + index * (swatch_size + gap) for index in range(LEGEND_SWATCHES)
        ),
    )


def compute_layout(week_count: int, config: RenderConfig) -> Geometry:
    """Compute canvas size and decoration offsets for `week_count` columns."""

    if week_count < 1:
        raise ValueError("week_count must be at least 1")

    size = config.size
    gap = config.gap
    margin = config.margin

    day_label_width = DAY_LABEL_WIDTH if config.days_visible else 0
    month_label_height = MONTH_LABEL_HEIGHT if config.months_visible else 0
    legend_height = LEGEND_HEIGHT if config.legend_visible else 0
    username_height = USERNAME_HEIGHT if config.username_visible else 0

    width = week_count * (size + gap) + 2 * margin + day_label_width
    height = (
        DAYS_PER_WEEK * size
        + (DAYS_PER_WEEK - 1) * gap
        + 2 * margin
        + month_label_height
        + legend_height
        + username_height
    )

    grid_x = margin + day_label_width
    grid_y = margin + month_label_height
    grid_right = grid_x + (week_count - 1) * (size + gap) + size

    # Caption takes the lowest band, the legend sits in the band above it.
    username_y = height - margin - BAND_BASELINE_OFFSET
    legend = None
    if config.legend_visible:
        legend = _legend_geometry(
            baseline=username_y - username_height,
            grid_right=grid_right,
            cell_size=size,
            gap=gap,
        )

    return Geometry(
        width=width,
        height=height,
        week_count=week_count,
        cell_size=size,
        gap=gap,
        grid_x=grid_x,
        grid_y=grid_y,
        month_label_y=margin + MONTH_LABEL_BASELINE if config.months_visible else None,
        day_label_x=margin + DAY_LABEL_INSET if config.days_visible else None,
        legend=legend,
        username_x=grid_x if config.username_visible else None,
        username_y=username_y if config.username_visible else None,
    )
