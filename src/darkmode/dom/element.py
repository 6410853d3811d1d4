"""Headless element model consumed by the conversion engine.

Collaborators (a live DOM bridge, the BeautifulSoup adapter, tests) build a
tree of `Element` objects carrying exactly what the engine reads and writes:

 - inline style declarations (`InlineStyle`)
 - class list and attribute store
 - direct text content (to decide whether a text overlap check is needed)
 - a viewport-relative bounding rectangle (static or via a provider callable)
 - the inherited color annotations (`ElementColorContext`)

The engine never inspects concrete element types; SVG content is tagged once
at ingestion through `ElementKind`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

__all__ = [
    "Rect",
    "ElementKind",
    "InlineStyle",
    "split_declarations",
    "ElementColorContext",
    "ContextUpdate",
    "Element",
    "apply_context_updates",
]


@dataclass(frozen=True)
class Rect:
    top: float = 0.0
    left: float = 0.0
    bottom: float = 0.0
    right: float = 0.0

    @classmethod
    def from_box(cls, top: float, left: float, width: float, height: float) -> "Rect":
        return cls(top=top, left=left, bottom=top + height, right=left + width)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def overlaps(self, other: "Rect") -> bool:
        """Axis-aligned intersection test; touching edges do not overlap."""
        return not (
            self.top >= other.bottom
            or self.left >= other.right
            or self.right <= other.left
            or self.bottom <= other.top
        )


class ElementKind(str, Enum):
    HTML = "html"
    SVG = "svg"


def split_declarations(css_text: str) -> List[str]:
    """Split inline style text on ``;`` outside parentheses and quotes."""
    chunks: List[str] = []
    buf: List[str] = []
    depth = 0
    quote: Optional[str] = None
    for ch in css_text:
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")" and depth:
            depth -= 1
        elif ch == ";" and not depth:
            chunks.append("".join(buf))
            buf = []
            continue
        buf.append(ch)
    chunks.append("".join(buf))
    return chunks


class InlineStyle:
    """Ordered inline declarations, as read from a ``style`` attribute.

    ``modified`` turns True once `set` changes a declaration, so adapters can
    leave untouched author markup as it was.
    """

    def __init__(self, declarations: Optional[Iterable[Tuple[str, str]]] = None) -> None:
        self._items: List[Tuple[str, str]] = list(declarations or [])
        self.modified = False

    @classmethod
    def parse(cls, css_text: Optional[str]) -> "InlineStyle":
        items: List[Tuple[str, str]] = []
        for chunk in split_declarations(css_text or ""):
            if ":" not in chunk:
                continue
            name, value = chunk.split(":", 1)
            name = name.strip()
            if name:
                items.append((name, value.strip()))
        return cls(items)

    @property
    def css_text(self) -> str:
        return " ".join(f"{name}: {value};" for name, value in self._items)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._items)

    def get(self, name: str) -> Optional[str]:
        key = name.lower()
        for n, v in reversed(self._items):
            if n.lower() == key:
                return v
        return None

    def set(self, name: str, value: str) -> None:
        key = name.lower()
        for idx in range(len(self._items) - 1, -1, -1):
            n, v = self._items[idx]
            if n.lower() == key:
                if v != value:
                    self._items[idx] = (n, value)
                    self.modified = True
                return
        self._items.append((name, value))
        self.modified = True

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


@dataclass
class ElementColorContext:
    """Color state inherited from the closest processed ancestor (or self)."""

    background: Optional[str] = None
    text: Optional[str] = None
    original_background: Optional[str] = None
    original_text: Optional[str] = None
    has_background_image: bool = False


@dataclass(frozen=True)
class ContextUpdate:
    """One write to apply to an element and every descendant.

    ``field`` names an `ElementColorContext` attribute. The special field
    ``clear_background_image`` resets the image flag where it is set.
    """

    field: str
    value: Any = None


@dataclass(eq=False)
class Element:
    tag_name: str
    style: InlineStyle = field(default_factory=InlineStyle)
    classes: List[str] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    kind: ElementKind = ElementKind.HTML
    rect: Optional[Rect] = None
    rect_provider: Optional[Callable[["Element"], Rect]] = field(default=None, repr=False)
    children: List["Element"] = field(default_factory=list, repr=False)
    parent: Optional["Element"] = field(default=None, repr=False)
    context: ElementColorContext = field(default_factory=ElementColorContext, repr=False)
    visible: bool = True
    source: Any = field(default=None, repr=False)  # adapter-specific handle (e.g. bs4 Tag)

    def __post_init__(self) -> None:
        self.tag_name = self.tag_name.upper()
        for child in self.children:
            child.parent = self

    # Tree -------------------------------------------------------------
    def append(self, child: "Element") -> "Element":
        child.parent = self
        self.children.append(child)
        return child

    def iter_subtree(self) -> Iterator["Element"]:
        """Yield this element and all descendants in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    # Content / geometry -----------------------------------------------
    def has_text_node(self) -> bool:
        return bool(self.text and self.text.strip())

    def bounding_rect(self) -> Rect:
        if self.rect_provider is not None:
            return self.rect_provider(self)
        return self.rect or Rect()

    # Classes / attributes ---------------------------------------------
    def add_class(self, name: str) -> None:
        if name not in self.classes:
            self.classes.append(name)

    def remove_classes_matching(self, pattern: "re.Pattern[str]") -> List[str]:
        removed = [c for c in self.classes if pattern.match(c)]
        if removed:
            self.classes = [c for c in self.classes if c not in removed]
        return removed

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name.lower())

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name.lower()] = value

    def show(self) -> None:
        self.visible = True


def apply_context_updates(element: Element, updates: Iterable[ContextUpdate]) -> None:
    """Write ``updates`` onto ``element`` and its whole subtree, in order."""
    updates = list(updates)
    if not updates:
        return
    for node in element.iter_subtree():
        ctx = node.context
        for upd in updates:
            if upd.field == "clear_background_image":
                ctx.has_background_image = False
            else:
                setattr(ctx, upd.field, upd.value)
