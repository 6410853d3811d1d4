"""Scoped class name generation."""

from __future__ import annotations

import re

from darkmode.config import settings

__all__ = ["ClassNameSequence", "SCOPED_CLASS_RE", "strip_scoped_classes"]

SCOPED_CLASS_RE = re.compile(rf"{re.escape(settings.CLASS_PREFIX)}\S+")


class ClassNameSequence:
    """Monotonic class name generator (``<prefix><n>``).

    Owned by one scheduler so independent runs never share a counter. Names are
    never reused unless `reset` is called explicitly.
    """

    def __init__(self, prefix: str = settings.CLASS_PREFIX, start: int = 0) -> None:
        self._prefix = prefix
        self._start = start
        self._next = start

    @property
    def prefix(self) -> str:
        return self._prefix

    def next(self) -> str:
        name = f"{self._prefix}{self._next}"
        self._next += 1
        return name

    def peek(self) -> int:
        return self._next

    def reset(self) -> None:
        self._next = self._start


def strip_scoped_classes(element) -> list[str]:
    """Remove classes minted by a previous run from ``element``."""
    return element.remove_classes_matching(SCOPED_CLASS_RE)
