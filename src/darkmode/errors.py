"""Structured errors raised by the dark mode engine."""

from __future__ import annotations
from typing import Any


class DarkmodeError(Exception):
    """Base class for dark mode conversion issues."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ColorParseError(DarkmodeError, ValueError):
    """Raised when a CSS color value cannot be parsed."""


class ConversionError(DarkmodeError):
    """Raised (or reported) when synthesizing one element's rule fails."""
