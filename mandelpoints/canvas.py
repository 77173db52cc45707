"""Raster output for point clouds: still images and zoom-out GIFs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

import imageio
import numpy as np
import PIL.Image
import PIL.ImageDraw

from .generator import GeneratorConfig, PointCloudGenerator, zoom_out_schedule
from .palette import BLACK
from .schema import Point, RequestParams

logger = logging.getLogger(__name__)


def render_image(
    points: Iterable[Point],
    width: int,
    height: int,
    *,
    radius: float = 0,
    background: tuple[int, int, int] = BLACK.as_tuple(),
) -> PIL.Image.Image:
    """Draw each point at its ``(x, y)`` position on a ``(width + 1) x (height + 1)`` image.

    With ``radius`` 0 every point sets a single pixel and points outside the image
    are skipped. Otherwise each point is drawn as a filled circle, clipped to the
    image bounds.
    """

    size = (width + 1, height + 1)
    if radius <= 0:
        pixels = np.empty((size[1], size[0], 3), dtype=np.uint8)
        pixels[...] = background
        for point in points:
            col = int(round(point.x))
            row = int(round(point.y))
            if 0 <= col < size[0] and 0 <= row < size[1]:
                pixels[row, col] = point.color.as_tuple()
        return PIL.Image.fromarray(pixels)

    image = PIL.Image.new("RGB", size, background)
    draw = PIL.ImageDraw.Draw(image)
    for point in points:
        draw.ellipse(
            [point.x - radius, point.y - radius, point.x + radius, point.y + radius],
            fill=point.color.as_tuple(),
        )
    return image


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_image(image: PIL.Image.Image, output_path: Union[str, Path], image_format: str = "png") -> Path:
    """Write a single image to ``output_path`` using the provided format."""

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=_pil_format_name(image_format))
    return output_path


def write_zoom_gif(
    params: RequestParams,
    output_path: Union[str, Path],
    frames: int,
    config: Optional[GeneratorConfig] = None,
    *,
    radius: float = 0,
    duration: float = 0.1,
) -> Sequence[RequestParams]:
    """Render a zoom-out sequence and write it as an animated GIF.

    Frame ``k`` uses the scale factor ``params.scale_factor + k`` (stepping away
    from zero for negative factors). Every frame is validated before the file is
    created. Returns the per-frame parameters.
    """

    schedule = zoom_out_schedule(params, frames)
    for frame_params in schedule:
        frame_params.validate()
    generator = PointCloudGenerator(config)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    writer = imageio.get_writer(str(output_path), mode="I", duration=duration, loop=0)
    try:
        for index, frame_params in enumerate(schedule):
            logger.debug("frame %d of %d, scale factor %d", index + 1, len(schedule), frame_params.scale_factor)
            points = generator.generate(frame_params)
            image = render_image(points, frame_params.width, frame_params.height, radius=radius)
            writer.append_data(np.asarray(image))
    finally:
        writer.close()
    return schedule
