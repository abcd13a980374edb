import logging

from contrib_chart.rendering.errors import EncodingError


logger = logging.getLogger(__name__)


def encode_png(svg: str, scale: float = 1.0) -> bytes:
    """Rasterize an SVG document to PNG bytes with cairosvg.

    Raises:
        EncodingError: If the cairo backend is missing or the document
            cannot be parsed or rendered.
    """

    try:
        import cairosvg
    except (ImportError, OSError) as exc:
        logger.exception("PNG backend is unavailable")
        raise EncodingError("PNG rendering backend is unavailable") from exc

    try:
        return cairosvg.svg2png(bytestring=svg.encode("utf-8"), scale=scale)
    except Exception as exc:
        logger.exception("Failed to rasterize SVG document (%d bytes)", len(svg))
        raise EncodingError("SVG document could not be rasterized") from exc
