import logging
from collections.abc import Iterable
from datetime import date

from contrib_chart.rendering.calendar import normalize
from contrib_chart.rendering.layout import compute_layout
from contrib_chart.rendering.models import ActivityRecord
from contrib_chart.rendering.models import OutputFormat
from contrib_chart.rendering.models import RenderConfig
from contrib_chart.rendering.models import RenderedChart
from contrib_chart.rendering.palette import resolve_palette
from contrib_chart.rendering.raster import encode_png
from contrib_chart.rendering.svg import compose_svg


logger = logging.getLogger(__name__)


def render_chart(
    records: Iterable[ActivityRecord],
    config: RenderConfig,
    *,
    reference_date: date,
    output_format: OutputFormat = OutputFormat.SVG,
) -> RenderedChart:
    """Render contribution records into an SVG or PNG chart.

    Errors from any stage propagate to the caller unchanged.
    """

    calendar = normalize(records, reference_date)
    colors = resolve_palette(config.theme, config.mode, config.color)
    geometry = compute_layout(calendar.week_count, config)
    svg = compose_svg(calendar, colors, geometry, config)

    logger.debug(
        "Rendered %d weeks (%s to %s) at %dx%d",
        calendar.week_count,
        calendar.start.isoformat(),
        calendar.end.isoformat(),
        geometry.width,
        geometry.height,
    )

    if output_format == OutputFormat.PNG:
        return RenderedChart(content=encode_png(svg), media_type=output_format.media_type)
    return RenderedChart(content=svg, media_type=output_format.media_type)
