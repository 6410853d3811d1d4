"""Inline style declaration extraction.

Turns an element's inline style into the ordered, role-tagged list of
declarations the synthesizer processes, together with the per-element flags
it needs (explicit text color, explicit background, background image) and the
``background-position`` / ``background-size`` values used to realign image
layers.

Ordering: ``color`` is processed last and ``background-image`` after
``background-color``. Text color defaulting and image layering both depend on
the already resolved background state.

Legacy tables: ``TABLE/TR/TD/TH`` without an inline background get a leading
``background-color`` declaration derived from a known editor class or the
``bgcolor`` attribute.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from darkmode.color.color_model import parse_color
from darkmode.color.css_syntax import has_url, strip_important
from darkmode.config import settings
from darkmode.dom.element import Element
from darkmode.errors import ColorParseError
from .brightness import Role

__all__ = [
    "Declaration",
    "ExtractedStyle",
    "COLOR_PROPERTIES",
    "extract_declarations",
    "table_background_color",
]

_logger = logging.getLogger(__name__)

COLOR_PROPERTIES = frozenset(
    {
        "-webkit-border-image",
        "border-image",
        "color",
        "background-color",
        "background-image",
        "background",
        "border",
        "border-top",
        "border-right",
        "border-bottom",
        "border-left",
        "border-color",
        "border-top-color",
        "border-right-color",
        "border-bottom-color",
        "border-left-color",
    }
)

_BORDER_IMAGE_RE = re.compile(r"^(-webkit-)?border-image")
_ORDER = {"background-image": 1, "color": 2}


@dataclass(frozen=True)
class Declaration:
    name: str
    value: str  # without !important
    role: Role
    important: bool = False

    @property
    def raw_value(self) -> str:
        return f"{self.value} !important" if self.important else self.value


@dataclass
class ExtractedStyle:
    declarations: List[Declaration] = field(default_factory=list)
    has_inline_color: bool = False
    has_inline_background: bool = False
    has_inline_background_image: bool = False
    background_position: Optional[str] = None
    background_size: Optional[str] = None


def _role_for(name: str) -> Role:
    if name == "color":
        return Role.TEXT
    if name.startswith("background"):
        return Role.BACKGROUND
    if name.startswith("border"):
        return Role.BORDER
    if name == "-webkit-border-image":
        return Role.IMAGE
    return Role.OTHER


def table_background_color(element: Element) -> Optional[str]:
    """Background color implied by legacy table markup, as ``rgb()`` text."""
    color = None
    for cls in element.classes:
        if cls in settings.TABLE_CLASS_COLORS:
            color = settings.TABLE_CLASS_COLORS[cls]
    if not color:
        color = element.get_attribute("bgcolor")
    if not color:
        return None
    try:
        return parse_color(color).to_css()
    except ColorParseError:
        _logger.debug("ignoring unparseable bgcolor %r on %s", color, element.tag_name)
        return None


def extract_declarations(element: Element) -> ExtractedStyle:
    out = ExtractedStyle()
    latest: Dict[str, Declaration] = {}

    for raw_name, raw_value in element.style.items():
        name = raw_name.strip().lower()
        value, important = strip_important(raw_value.strip())
        if name == "color":
            out.has_inline_color = True
        elif "background" in name:
            out.has_inline_background = True
            if name == "background-position":
                out.background_position = value
            elif name == "background-size":
                out.background_size = value
        if ("background" in name or _BORDER_IMAGE_RE.match(name)) and has_url(value):
            out.has_inline_background_image = True

        if name not in COLOR_PROPERTIES:
            continue
        latest.pop(name, None)  # later duplicates win and keep their position
        latest[name] = Declaration(name=name, value=value, role=_role_for(name), important=important)

    declarations = sorted(latest.values(), key=lambda d: _ORDER.get(d.name, 0))

    if element.tag_name in settings.TABLE_NAMES and not out.has_inline_background:
        color = table_background_color(element)
        if color:
            declarations.insert(0, Declaration("background-color", color, Role.BACKGROUND))
            out.has_inline_background = True

    out.declarations = declarations
    return out
