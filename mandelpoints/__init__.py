"""Public API for the escape-time point-cloud engine."""

from .errors import InvalidArgument, MandelbrotError
from .renderer import Bounded, Escaped, EscapeResult, GridResult, evaluate, evaluate_grid
from .palette import BLACK, DEFAULT_PALETTE, Color, color_for
from .schema import MandelbrotResponse, Point, RequestParams
from .generator import (
    GeneratorConfig,
    PointCloudGenerator,
    generate_points,
    pixel_grid,
    pixel_to_complex,
    zoom_out_schedule,
)

__all__ = [
    "BLACK",
    "Bounded",
    "Color",
    "DEFAULT_PALETTE",
    "EscapeResult",
    "Escaped",
    "GeneratorConfig",
    "GridResult",
    "InvalidArgument",
    "MandelbrotError",
    "MandelbrotResponse",
    "Point",
    "PointCloudGenerator",
    "RequestParams",
    "color_for",
    "evaluate",
    "evaluate_grid",
    "generate_points",
    "pixel_grid",
    "pixel_to_complex",
    "zoom_out_schedule",
]
