"""Conversion pass over an ordered element collection.

The scheduler owns all mutable per-run state (class name sequences, pending
layers, text queue, output buffers) and drives the synthesizer over the
elements in the order given.

First paint
-----------
While ``config.need_judge_first_page`` is set each element is classified by its
bounding rectangle against the page height:

 - above the viewport (top <= 0 and bottom <= 0): rule goes to *remaining*
 - inside the viewport: rule goes to *first-paint*, element remembered
 - the first element past that: the first-paint stylesheet is flushed, the
   remembered elements are shown and judging stops for good

Context propagation
-------------------
A synthesis result carries the color context decided for the element; it is
written onto the element and its entire subtree before the next element is
visited, so descendants are adjusted against the right ancestor state.

A failure while converting one element is logged and reported through the
``error`` callback; that element simply produces no rule.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from darkmode.config import DarkmodeConfig, settings
from darkmode.dom.element import Element, apply_context_updates
from darkmode.errors import ConversionError
from darkmode.utils.naming import ClassNameSequence, strip_scoped_classes
from .css import CssWriter, StyleSink
from .layers import PendingLayer, PendingLayerStack, TextElementQueue
from .synthesizer import RuleSynthesizer, SynthesisResult

__all__ = ["Position", "PassReport", "ConversionScheduler"]

_logger = logging.getLogger(__name__)


class Position(str, Enum):
    ABOVE = "above"
    FIRST_PAINT = "first-paint"
    BELOW = "below"


@dataclass
class PassReport:
    elements: int = 0
    rules: int = 0
    first_paint_flushed: bool = False
    errors: List[ConversionError] = field(default_factory=list)


class ConversionScheduler:
    def __init__(
        self,
        config: Optional[DarkmodeConfig] = None,
        *,
        sink: Optional[StyleSink] = None,
        sequence: Optional[ClassNameSequence] = None,
        layer_sequence: Optional[ClassNameSequence] = None,
    ) -> None:
        self.config = config or DarkmodeConfig()
        self.writer = CssWriter(self.config, sink)
        self.sequence = sequence or ClassNameSequence(settings.CLASS_PREFIX)
        self.layer_sequence = layer_sequence or ClassNameSequence(settings.BG_CLASS_PREFIX)
        self.layers = PendingLayerStack(self.layer_sequence)
        self.text_queue = TextElementQueue()
        self.synthesizer = RuleSynthesizer(
            self.config, self.writer, self.layers, self.text_queue, self.sequence
        )
        self._first_paint_elements: List[Element] = []
        self.first_paint_flushed = False

    # Classification ---------------------------------------------------
    def classify(self, element: Element) -> Position:
        rect = element.bounding_rect()
        height = self.config.page_height
        if rect.top <= 0 and rect.bottom <= 0:
            return Position.ABOVE
        if 0 < rect.top < height or 0 < rect.bottom < height:
            return Position.FIRST_PAINT
        return Position.BELOW

    # Passes -----------------------------------------------------------
    def run(self, elements: Iterable[Element]) -> PassReport:
        """Convert ``elements`` in order and write the stylesheets."""
        report = PassReport()
        for element in elements:
            report.elements += 1
            self._process(element, report)
        self.finish()
        report.first_paint_flushed = self.first_paint_flushed
        _logger.debug(
            "dark mode pass done: %d elements, %d rules, %d errors",
            report.elements,
            report.rules,
            len(report.errors),
        )
        return report

    def _process(self, element: Element, report: PassReport) -> None:
        strip_scoped_classes(element)
        result = self._synthesize(element, report)
        css = result.css if result else ""
        if result and result.produced_rule:
            report.rules += 1

        if not self.config.need_judge_first_page:
            self.writer.add_css(css, False)
            return

        position = self.classify(element)
        if position is Position.ABOVE:
            self.writer.add_css(css, False)
        elif position is Position.FIRST_PAINT:
            self._first_paint_elements.append(element)
            self.writer.add_css(css, True)
        else:
            # Only the first element past the viewport gets here.
            self.config.need_judge_first_page = False
            self.flush_first_paint()
            self.writer.add_css(css, False)

    def _synthesize(self, element: Element, report: PassReport) -> Optional[SynthesisResult]:
        try:
            result = self.synthesizer.convert(element)
        except Exception as exc:  # noqa: BLE001
            error = ConversionError(
                f"failed to convert <{element.tag_name.lower()}>: {exc}",
                context={"tag": element.tag_name, "classes": list(element.classes)},
            )
            error.__cause__ = exc
            _logger.exception("dark mode conversion failed for <%s>", element.tag_name.lower())
            report.errors.append(error)
            if self.config.error is not None:
                self.config.error(error)
            return None
        apply_context_updates(element, result.context_updates)
        if result.element_context is not None:
            element.context = result.element_context
        return result

    def flush_first_paint(self) -> None:
        self.writer.write_style(True)
        for element in self._first_paint_elements:
            element.show()
        _logger.debug("first-paint flushed, %d elements shown", len(self._first_paint_elements))
        self._first_paint_elements.clear()
        self.first_paint_flushed = True

    def finish(self) -> None:
        """Write what is left; an unflushed first-paint buffer goes first."""
        if self._first_paint_elements or self.writer.first_paint_css:
            self.flush_first_paint()
        self.writer.write_style(False)

    def resolve_queued(self) -> int:
        """Resolve parked text elements against the pending layers."""

        def emit(layer: PendingLayer) -> None:
            self.writer.add_css(self.writer.gen_css(layer.class_name, layer.css_kv), False)

        count = self.text_queue.drain(lambda element: self.layers.resolve(element, emit))
        self.writer.write_style(False)
        return count

    def reset(self) -> None:
        """Drop all run state, including the class name counters."""
        self.sequence.reset()
        self.layer_sequence.reset()
        self.layers.clear()
        self.text_queue.clear()
        self.writer.reset()
        self._first_paint_elements.clear()
        self.first_paint_flushed = False
