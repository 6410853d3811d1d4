"""Deferred layers and the text element queue.

Background images and gradients only matter for readability where text sits on
top of them, so their compensating CSS is not emitted right away. It is pushed
onto a `PendingLayerStack` under its own scoped class and released when a
text-bearing element is found whose bounding box overlaps the layer's element.

Resolution is a linear scan over the pending entries (no spatial index);
rectangles of pending elements are computed lazily on first use and cached.

`TextElementQueue` parks text-bearing elements when background resolution is
delayed (``delay_bg_judge``) so layout can settle before the overlap checks run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional

from darkmode.config import settings
from darkmode.dom.element import Element, Rect
from darkmode.utils.naming import ClassNameSequence

__all__ = ["PendingLayer", "PendingLayerStack", "TextElementQueue"]


@dataclass(eq=False)
class PendingLayer:
    element: Element
    class_name: str
    css_kv: str
    rect: Optional[Rect] = None

    def bounding_rect(self) -> Rect:
        if self.rect is None:
            self.rect = self.element.bounding_rect()
        return self.rect


class PendingLayerStack:
    def __init__(self, sequence: Optional[ClassNameSequence] = None) -> None:
        self._sequence = sequence or ClassNameSequence(settings.BG_CLASS_PREFIX)
        self._stack: List[PendingLayer] = []

    def push(self, element: Element, css_kv: str) -> PendingLayer:
        """Attach a fresh scoped class to ``element`` and park ``css_kv`` under it."""
        layer = PendingLayer(element=element, class_name=self._sequence.next(), css_kv=css_kv)
        element.add_class(layer.class_name)
        self._stack.insert(0, layer)  # newest first
        return layer

    def resolve(self, candidate: Element, on_match: Callable[[PendingLayer], None]) -> int:
        """Release every layer overlapping ``candidate``; returns the match count.

        Each released layer is removed from the stack, so it is reported once.
        """
        rect = candidate.bounding_rect()
        matched = [layer for layer in self._stack if layer.bounding_rect().overlaps(rect)]
        for layer in matched:
            self._stack.remove(layer)
            on_match(layer)
        return len(matched)

    def update(self, elements: Iterable[Element]) -> None:
        """Forget cached rectangles of layers whose element was re-supplied."""
        refreshed = {id(el) for el in elements}
        for layer in self._stack:
            if id(layer.element) in refreshed:
                layer.rect = None

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)

    def __iter__(self) -> Iterator[PendingLayer]:
        return iter(list(self._stack))


class TextElementQueue:
    def __init__(self) -> None:
        self._queue: List[Element] = []

    def push(self, element: Element) -> None:
        self._queue.append(element)

    def drain(self, callback: Callable[[Element], None]) -> int:
        """Hand each queued element to ``callback`` once, emptying the queue."""
        items, self._queue = self._queue, []
        for element in items:
            callback(element)
        return len(items)

    def update(self, elements: Iterable[Element]) -> None:
        """Keep only queued elements that are still part of ``elements``."""
        present = {id(el) for el in elements}
        self._queue = [el for el in self._queue if id(el) in present]

    def clear(self) -> None:
        self._queue.clear()

    def __len__(self) -> int:
        return len(self._queue)
