class ChartRenderError(Exception):
    """Base class for failures raised by the rendering pipeline."""


class InvalidColorError(ChartRenderError):
    """Raised when a custom color is not a 6-digit hex RGB value."""


class InvalidThemeError(ChartRenderError):
    """Raised when a theme name is not in the theme table."""


class EncodingError(ChartRenderError):
    """Raised when an SVG document cannot be rasterized."""
