"""Exceptions raised by the point-cloud engine."""

from __future__ import annotations

from typing import Optional


class MandelbrotError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgument(MandelbrotError, ValueError):
    """A request parameter or configuration value violates a precondition."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field
