"""SVG export: one circle per point."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, Union

from .schema import Point

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def _number(value: float) -> str:
    return repr(float(value))


def points_to_svg(points: Iterable[Point], width: int, height: int, radius: float = 1.0) -> ET.ElementTree:
    """Lay the points out on a ``(width + 1) x (height + 1)`` drawing."""

    root = ET.Element(
        "svg",
        xmlns=SVG_NAMESPACE,
        width=str(width + 1),
        height=str(height + 1),
        viewBox=f"0 0 {width + 1} {height + 1}",
    )
    for point in points:
        ET.SubElement(
            root,
            "circle",
            cx=_number(point.x),
            cy=_number(point.y),
            r=_number(radius),
            fill=point.color.css(),
        )
    return ET.ElementTree(root)


def write_svg(points: Iterable[Point], path: Union[str, Path], width: int, height: int, radius: float = 1.0) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tree = points_to_svg(points, width, height, radius)
    tree.write(str(path), encoding="utf-8", xml_declaration=True)
    return path
