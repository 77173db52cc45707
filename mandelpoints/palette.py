"""Color palette and the iteration-count to color rule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .errors import InvalidArgument
from .renderer import Bounded, Escaped, EscapeResult


@dataclass(frozen=True)
class Color:
    """An RGB triple with 8-bit channels."""

    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise InvalidArgument(f"{name} must be an integer in 0..255, got {value!r}", field=name)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    def to_dict(self) -> dict[str, int]:
        return {"red": self.red, "green": self.green, "blue": self.blue}

    def css(self) -> str:
        return f"rgb({self.red},{self.green},{self.blue})"


BLACK = Color(0, 0, 0)

DEFAULT_PALETTE: tuple[Color, ...] = (
    Color(0, 0, 255),
    Color(32, 107, 203),
    Color(255, 100, 100),
    Color(255, 170, 100),
    Color(255, 200, 100),
    Color(0, 255, 0),
)


def color_for(result: EscapeResult, palette: Sequence[Color] = DEFAULT_PALETTE) -> Color:
    """Pick the palette entry for an escape result.

    Escaped samples cycle through ``palette`` by iteration count; bounded
    samples are always black.
    """

    if isinstance(result, Escaped):
        return palette[result.at_iteration % len(palette)]
    if isinstance(result, Bounded):
        return BLACK
    raise TypeError(f"expected an escape result, got {type(result).__name__}")
