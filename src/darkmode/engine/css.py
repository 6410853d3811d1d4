"""CSS text generation and the two output buffers.

Rules are accumulated into a *first-paint* buffer (elements in the initial
viewport) and a *remaining* buffer (everything else). `write_style` turns a
buffer into a stylesheet and hands it to the sink. Writing the remaining
stylesheet marks the run as finished.

Stylesheets are wrapped in the dark color-scheme media query unless dark mode is
forced, in which case every selector is scoped under ``html.<HTML_CLASS>``
instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from darkmode.config import DarkmodeConfig, settings

__all__ = ["StyleSheet", "CssWriter", "StyleSink"]

_logger = logging.getLogger(__name__)

StyleSink = Callable[[str, bool], None]


@dataclass(frozen=True)
class StyleSheet:
    css: str
    first_paint: bool


class CssWriter:
    def __init__(self, config: DarkmodeConfig, sink: Optional[StyleSink] = None) -> None:
        self._config = config
        self._sink = sink
        self._first_paint: List[str] = []
        self._remaining: List[str] = []
        self.sheets: List[StyleSheet] = []
        self.is_finished = False

    # Generation -------------------------------------------------------
    @staticmethod
    def gen_css_kv(key: str, value: str) -> str:
        return f"{key}: {value} !important;"

    def gen_css(self, class_name: str, css_kv: str) -> str:
        scope = f"html.{settings.HTML_CLASS} " if self._config.mode == "dark" else ""
        return f"{scope}.{class_name}{{{css_kv}}}"

    # Buffers ----------------------------------------------------------
    def add_css(self, css: str, first_paint: bool = False) -> None:
        if not css:
            return
        (self._first_paint if first_paint else self._remaining).append(css)

    @property
    def first_paint_css(self) -> str:
        return "".join(self._first_paint)

    @property
    def remaining_css(self) -> str:
        return "".join(self._remaining)

    def write_style(self, first_paint: bool = False) -> Optional[str]:
        """Flush one buffer as a stylesheet; returns the written text, if any."""
        if not first_paint:
            self.is_finished = True
        buf = self._first_paint if first_paint else self._remaining
        css = "".join(buf)
        buf.clear()
        if not css:
            return None
        if self._config.mode != "dark":
            css = f"@media {settings.MEDIA_QUERY} {{{css}}}"
        self.sheets.append(StyleSheet(css=css, first_paint=first_paint))
        _logger.debug("wrote %s stylesheet (%d chars)", "first-paint" if first_paint else "remaining", len(css))
        if self._sink is not None:
            self._sink(css, first_paint)
        return css

    @property
    def stylesheet(self) -> str:
        """All stylesheets written so far, in write order."""
        return "\n".join(sheet.css for sheet in self.sheets)

    def reset(self) -> None:
        self._first_paint.clear()
        self._remaining.clear()
        self.is_finished = False
