"""Dark mode entry point.

`Darkmode` wires configuration, the conversion scheduler and the color-scheme
state together:

 - ``init(**options)`` merges options into the run configuration
 - ``run(nodes, **options)`` is ``init`` followed by ``convert``
 - ``convert(nodes, force=False)`` converts elements when dark mode applies
 - ``convert_bg(nodes, force=False)`` resolves text elements parked while
   ``delay_bg_judge`` was set
 - ``set_color_scheme(prefers_dark)`` is the hook a color-scheme listener calls

A run happens at most once unless ``force`` is passed. When the page is light,
elements handed to `convert` are kept and converted as soon as the scheme
switches to dark.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from darkmode.config import DarkmodeConfig
from darkmode.dom.element import Element
from darkmode.engine.css import StyleSink
from darkmode.engine.scheduler import ConversionScheduler, PassReport

__all__ = ["Darkmode"]

_logger = logging.getLogger(__name__)


class Darkmode:
    def __init__(self, config: Optional[DarkmodeConfig] = None, *, sink: Optional[StyleSink] = None) -> None:
        self.config = config or DarkmodeConfig()
        self.scheduler = ConversionScheduler(self.config, sink=sink)
        self.prefers_dark = False
        self._nodes: List[Element] = []
        self._delayed: List[Element] = []

    @property
    def is_dark(self) -> bool:
        if self.config.mode:
            return self.config.mode == "dark"
        return self.prefers_dark

    @property
    def is_finished(self) -> bool:
        return self.scheduler.writer.is_finished

    @property
    def stylesheet(self) -> str:
        return self.scheduler.writer.stylesheet

    # Public API -------------------------------------------------------
    def init(self, **options: Any) -> "Darkmode":
        self.config.update(**options)
        return self

    def run(self, nodes: Iterable[Element], **options: Any) -> Optional[PassReport]:
        self.init(**options)
        return self.convert(nodes)

    def convert(self, nodes: Iterable[Element], force: bool = False) -> Optional[PassReport]:
        self._nodes = list(nodes)
        return self._switch("dom", force)

    def convert_bg(self, nodes: Iterable[Element], force: bool = False) -> Optional[PassReport]:
        self._nodes = list(nodes)
        if self.config.container is not None:
            self.scheduler.layers.update(self._nodes)
            self.scheduler.text_queue.update(self._nodes)
        return self._switch("bg", force)

    def set_color_scheme(self, prefers_dark: bool) -> Optional[PassReport]:
        self.prefers_dark = prefers_dark
        return self._switch("dom", False)

    # Internals --------------------------------------------------------
    def _switch(self, kind: str, force: bool) -> Optional[PassReport]:
        if force:
            self.scheduler.writer.is_finished = False
        if self.scheduler.writer.is_finished:
            return None

        try:
            if self.is_dark:
                if kind == "dom":
                    nodes = self._nodes or self._delayed
                    self._nodes, self._delayed = [], []
                    return self.scheduler.run(nodes)
                resolved = self.scheduler.resolve_queued()
                _logger.debug("resolved %d queued text elements", resolved)
                return None

            # Light page: nothing is split into first paint or delayed later on.
            self.config.need_judge_first_page = False
            self.config.delay_bg_judge = False
            if self.config.container is None and kind == "dom" and self._nodes:
                self._delayed = self._nodes
                self._nodes = []
        except Exception as exc:  # noqa: BLE001
            _logger.exception("dark mode switch failed")
            if self.config.error is not None:
                self.config.error(exc)
        return None
