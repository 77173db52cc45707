"""Request and response shapes crossing the engine boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .errors import InvalidArgument
from .palette import Color

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

REQUEST_FIELDS = ("width", "height", "max_iter", "scale_factor")


def _check_int32(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}", field=name)
    if not INT32_MIN <= value <= INT32_MAX:
        raise InvalidArgument(f"{name} does not fit in a signed 32-bit integer: {value}", field=name)
    return value


@dataclass(frozen=True)
class RequestParams:
    """Parameters for one point-cloud generation."""

    width: int
    height: int
    max_iter: int
    scale_factor: int

    @property
    def max_iterations(self) -> int:
        return self.max_iter

    @property
    def point_count(self) -> int:
        return (self.width + 1) * (self.height + 1)

    def validate(self) -> "RequestParams":
        """Check the generation preconditions, raising :class:`InvalidArgument`."""

        for name in REQUEST_FIELDS:
            _check_int32(name, getattr(self, name))
        if self.width < 0:
            raise InvalidArgument(f"width must not be negative, got {self.width}", field="width")
        if self.height < 0:
            raise InvalidArgument(f"height must not be negative, got {self.height}", field="height")
        if self.max_iter < 1:
            raise InvalidArgument(f"max_iter must be at least 1, got {self.max_iter}", field="max_iter")
        if self.scale_factor == 0:
            raise InvalidArgument("scale_factor must not be zero", field="scale_factor")
        return self

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "RequestParams":
        """Build parameters from a decoded JSON object.

        All four fields are required; unknown keys are ignored.
        """

        if not isinstance(payload, Mapping):
            raise InvalidArgument(f"request body must be a JSON object, got {type(payload).__name__}")
        values = {}
        for name in REQUEST_FIELDS:
            if name not in payload:
                raise InvalidArgument(f"missing field: {name}", field=name)
            values[name] = _check_int32(name, payload[name])
        return cls(**values)

    def to_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in REQUEST_FIELDS}


@dataclass(frozen=True)
class Point:
    """One output sample: a position and its color."""

    x: float
    y: float
    color: Color

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "color": self.color.to_dict()}


@dataclass
class MandelbrotResponse:
    points: list[Point] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"points": [point.to_dict() for point in self.points]}
