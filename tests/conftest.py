# Shared fixtures for the dark mode engine tests.
# Elements are built by hand; `make_element` keeps the style/rect boilerplate short.

from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from darkmode.config import DarkmodeConfig
from darkmode.dom.element import Element, InlineStyle, Rect


def _make_element(
    tag: str = "div",
    style: str = "",
    *,
    text: str = "",
    rect: Optional[Tuple[float, float]] = None,
    **kwargs,
) -> Element:
    """Build an element; ``rect`` is ``(top, bottom)`` with a fixed 0..100 width."""
    box = Rect(top=rect[0], left=0, bottom=rect[1], right=100) if rect is not None else None
    return Element(tag_name=tag, style=InlineStyle.parse(style), text=text, rect=box, **kwargs)


@pytest.fixture
def make_element():
    return _make_element


@pytest.fixture
def config():
    return DarkmodeConfig(need_judge_first_page=False)


@pytest.fixture
def sheets() -> List[Tuple[str, bool]]:
    return []


@pytest.fixture
def sink(sheets):
    def _sink(css: str, first_paint: bool) -> None:
        sheets.append((css, first_paint))

    return _sink
