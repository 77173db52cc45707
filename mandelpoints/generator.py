"""Pixel-to-plane mapping and point-cloud generation."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from .errors import InvalidArgument
from .palette import BLACK, DEFAULT_PALETTE, Color, color_for
from .renderer import Bounded, evaluate, evaluate_grid
from .schema import MandelbrotResponse, Point, RequestParams

logger = logging.getLogger(__name__)

CANVAS_WIDTH = 800.0
CANVAS_HEIGHT = 800.0


@dataclass(frozen=True)
class GeneratorConfig:
    """Fixed settings shared by every generation run."""

    canvas_width: float = CANVAS_WIDTH
    canvas_height: float = CANVAS_HEIGHT
    palette: tuple[Color, ...] = DEFAULT_PALETTE
    offset: tuple[int, int] = (0, 0)
    vectorized: bool = True
    device: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.canvas_width > 0:
            raise InvalidArgument(f"canvas_width must be positive, got {self.canvas_width}", field="canvas_width")
        if not self.canvas_height > 0:
            raise InvalidArgument(f"canvas_height must be positive, got {self.canvas_height}", field="canvas_height")
        if len(self.palette) == 0:
            raise InvalidArgument("palette must contain at least one color", field="palette")
        object.__setattr__(self, "canvas_width", float(self.canvas_width))
        object.__setattr__(self, "canvas_height", float(self.canvas_height))
        object.__setattr__(self, "palette", tuple(self.palette))
        object.__setattr__(self, "offset", (int(self.offset[0]), int(self.offset[1])))


def _axis_factor(scale_factor: int) -> float:
    if scale_factor == 0:
        raise InvalidArgument("scale_factor must not be zero", field="scale_factor")
    return 2.0 * scale_factor


def pixel_to_complex(
    pixel_x: float,
    pixel_y: float,
    offset: tuple[int, int],
    scale_factor: int,
    canvas_width: float,
    canvas_height: float,
) -> tuple[float, float]:
    """Map a pixel to the complex plane; screen y grows down, plane y grows up."""

    ax = _axis_factor(scale_factor)
    x = pixel_x / (canvas_width / (2.0 * ax)) - ax + offset[0]
    y = -pixel_y / (canvas_height / (2.0 * ax)) + ax + offset[1]
    return x, y


def pixel_grid(
    width: int,
    height: int,
    offset: tuple[int, int],
    scale_factor: int,
    canvas_width: float,
    canvas_height: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Vectorized :func:`pixel_to_complex` over the inclusive pixel rectangle.

    Arrays have shape ``(width + 1, height + 1)`` so a C-order ravel walks the
    horizontal index in the outer position.
    """

    ax = _axis_factor(scale_factor)
    cols = np.arange(width + 1, dtype=np.float64)
    rows = np.arange(height + 1, dtype=np.float64)
    px, py = np.meshgrid(cols, rows, indexing="ij")
    x = px / (canvas_width / (2.0 * ax)) - ax + np.float64(offset[0])
    y = -py / (canvas_height / (2.0 * ax)) + ax + np.float64(offset[1])
    return x, y


class PointCloudGenerator:
    """Scan a pixel rectangle and color every sample by its escape time."""

    def __init__(self, config: Optional[GeneratorConfig] = None) -> None:
        self.config = config if config is not None else GeneratorConfig()

    def generate(self, params: RequestParams) -> list[Point]:
        params.validate()
        started = time.perf_counter()
        if self.config.vectorized:
            points = self._generate_grid(params)
        else:
            points = self._generate_scalar(params)
        logger.info(
            "time to calculate %d points was %.3fs",
            params.point_count,
            time.perf_counter() - started,
        )
        return points

    def respond(self, params: RequestParams) -> MandelbrotResponse:
        return MandelbrotResponse(points=self.generate(params))

    def point_at(self, i: int, j: int, params: RequestParams) -> Point:
        cfg = self.config
        c = pixel_to_complex(float(i), float(j), cfg.offset, params.scale_factor, cfg.canvas_width, cfg.canvas_height)
        result = evaluate(c, c, params.max_iterations)
        color = color_for(result, cfg.palette)
        if isinstance(result, Bounded):
            return Point(x=result.final_z[0], y=float(j), color=color)
        return Point(x=float(i), y=float(j), color=color)

    def _generate_scalar(self, params: RequestParams) -> list[Point]:
        return [
            self.point_at(i, j, params)
            for i in range(params.width + 1)
            for j in range(params.height + 1)
        ]

    def _generate_grid(self, params: RequestParams) -> list[Point]:
        cfg = self.config
        c_re, c_im = pixel_grid(
            params.width,
            params.height,
            cfg.offset,
            params.scale_factor,
            cfg.canvas_width,
            cfg.canvas_height,
        )
        result = evaluate_grid(c_re, c_im, params.max_iterations, device=cfg.device)
        escaped_at = result.escaped_at.ravel().tolist()
        bounded = result.bounded.ravel().tolist()
        final_re = result.final_re.ravel().tolist()
        palette = cfg.palette
        size = len(palette)

        points = []
        index = 0
        for i in range(params.width + 1):
            for j in range(params.height + 1):
                if bounded[index]:
                    points.append(Point(x=final_re[index], y=float(j), color=BLACK))
                else:
                    points.append(Point(x=float(i), y=float(j), color=palette[escaped_at[index] % size]))
                index += 1
        return points


def generate_points(params: RequestParams, config: Optional[GeneratorConfig] = None) -> list[Point]:
    """Generate the point cloud for ``params``; raises :class:`InvalidArgument` on bad input."""

    return PointCloudGenerator(config).generate(params)


def zoom_out_schedule(params: RequestParams, frames: int) -> list[RequestParams]:
    """Parameters for a zoom-out sequence stepping the scale factor away from zero."""

    if frames <= 0:
        return []
    step = 1 if params.scale_factor > 0 else -1
    return [replace(params, scale_factor=params.scale_factor + step * k) for k in range(frames)]
