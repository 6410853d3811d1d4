"""Element model and the HTML adapter."""

from .element import (  # noqa: F401
    ContextUpdate,
    Element,
    ElementColorContext,
    ElementKind,
    InlineStyle,
    Rect,
    apply_context_updates,
)

__all__ = [
    "ContextUpdate",
    "Element",
    "ElementColorContext",
    "ElementKind",
    "InlineStyle",
    "Rect",
    "apply_context_updates",
]
