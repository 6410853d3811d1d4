"""BeautifulSoup bridge between static HTML and the element model.

`parse_html` builds `Element` objects for every rendered tag (document order)
and keeps the originating bs4 ``Tag`` on ``Element.source``. After a run,
`write_back` copies classes / inline style / data attributes back onto the
tags and `inject_style` adds the generated stylesheet as a ``<style>`` tag.

Static markup has no geometry. Callers either pass ``rect_for`` (tag -> Rect)
or use `flow_layout`, which stacks text-bearing elements one line each and lets
containers span their descendants. That is enough for first-paint splitting
and overlap checks in the CLI; it is not a renderer.

Design Choices:
 - ``html.parser`` backend, the same one used for the rest of the parsing.
 - ``head``/``script``/``style`` and similar non-rendered tags are skipped
   together with their subtree.
 - Everything inside ``<svg>`` is tagged `ElementKind.SVG` at ingestion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag  # type: ignore

from .element import Element, ElementKind, InlineStyle, Rect

__all__ = [
    "HtmlDocument",
    "parse_html",
    "element_from_tag",
    "flow_layout",
    "write_back",
    "inject_style",
]

NON_RENDERED_TAGS = frozenset(
    {"head", "script", "style", "meta", "link", "title", "noscript", "template", "base"}
)

STYLE_MARKER_ATTR = "data-darkmode"


@dataclass
class HtmlDocument:
    soup: BeautifulSoup
    roots: List[Element] = field(default_factory=list)
    elements: List[Element] = field(default_factory=list)

    def render(self) -> str:
        return str(self.soup)


def _direct_text(tag: Tag) -> str:
    parts = [
        str(child)
        for child in tag.children
        if isinstance(child, NavigableString) and not isinstance(child, Comment)
    ]
    return "".join(parts).strip()


def _attr_text(value) -> str:
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def element_from_tag(tag: Tag, *, in_svg: bool = False, rect_for: Optional[Callable[[Tag], Rect]] = None) -> Element:
    """Build a single element (no children) from ``tag``."""
    kind = ElementKind.SVG if in_svg or tag.name.lower() == "svg" else ElementKind.HTML
    attributes = {
        name.lower(): _attr_text(value) for name, value in tag.attrs.items() if name.lower() not in ("class", "style")
    }
    element = Element(
        tag_name=tag.name,
        style=InlineStyle.parse(tag.get("style")),
        classes=list(tag.get("class") or []),
        attributes=attributes,
        text=_direct_text(tag),
        kind=kind,
        rect=rect_for(tag) if rect_for else None,
        source=tag,
    )
    return element


def parse_html(html: str, *, rect_for: Optional[Callable[[Tag], Rect]] = None) -> HtmlDocument:
    """Parse ``html`` into an `HtmlDocument` with elements in document order.

    Conversion starts at ``<body>`` when present, otherwise at the top-level
    tags of the fragment.
    """
    soup = BeautifulSoup(html, "html.parser")
    doc = HtmlDocument(soup=soup)
    body = soup.find("body")
    top_level = [body] if body is not None else [c for c in soup.children if isinstance(c, Tag)]

    def visit(tag: Tag, parent: Optional[Element], in_svg: bool) -> None:
        if tag.name.lower() in NON_RENDERED_TAGS:
            return
        element = element_from_tag(tag, in_svg=in_svg, rect_for=rect_for)
        doc.elements.append(element)
        if parent is None:
            doc.roots.append(element)
        else:
            parent.append(element)
        child_svg = element.kind is ElementKind.SVG
        for child in tag.children:
            if isinstance(child, Tag):
                visit(child, element, child_svg)

    for tag in top_level:
        visit(tag, None, False)
    return doc


def flow_layout(
    roots: Iterable[Element], *, line_height: float = 24.0, width: float = 800.0, margin: float = 8.0
) -> float:
    """Assign stacked rectangles to ``roots`` and their subtrees.

    Layout starts ``margin`` below the viewport top, like the default body
    margin, so the outermost container begins inside the first screen. Each
    element with direct text takes one line at the current offset; containers
    span from their first to their last descendant line. Returns the bottom of
    the last line.
    """
    offset = margin

    def place(element: Element) -> None:
        nonlocal offset
        top = offset
        if element.has_text_node():
            offset += line_height
        for child in element.children:
            place(child)
        element.rect = Rect(top=top, left=0.0, bottom=offset, right=width)

    for root in roots:
        place(root)
    return offset


def write_back(doc: HtmlDocument) -> None:
    """Copy classes, attributes and changed inline styles onto the source tags.

    A ``style`` attribute is only rewritten when the engine edited it, so author
    markup the engine never touched is kept as written.
    """
    for element in doc.elements:
        tag = element.source
        if tag is None:
            continue
        if element.classes:
            tag["class"] = list(element.classes)
        elif "class" in tag.attrs:
            del tag["class"]
        if element.style.modified:
            tag["style"] = element.style.css_text
        for name, value in element.attributes.items():
            tag[name] = value


def inject_style(doc: HtmlDocument, css: str, *, first_paint: bool = False) -> Optional[Tag]:
    """Append ``css`` as a ``<style>`` tag to ``<head>`` (or the document start)."""
    if not css:
        return None
    style = doc.soup.new_tag("style")
    style[STYLE_MARKER_ATTR] = "first-paint" if first_paint else "remaining"
    style.string = css
    head = doc.soup.find("head")
    if head is not None:
        head.append(style)
    else:
        doc.soup.insert(0, style)
    return style
