"""Value-level CSS helpers shared by the extractor and the synthesizer.

Everything here works on raw declaration value strings. Colors are brought into
a single functional ``rgb()/rgba()`` form so the synthesizer only has to look
for one syntax; ``url(...)`` segments are never rewritten.
"""

from __future__ import annotations

import re
from typing import Callable, List

from darkmode.errors import ColorParseError
from .color_model import parse_color
from .color_names import COLOR_NAMES

__all__ = [
    "COLOR_FUNC_RE",
    "URL_RE",
    "has_url",
    "is_gradient",
    "strip_important",
    "normalize_colors",
    "find_colors",
    "replace_colors",
]

COLOR_FUNC_RE = re.compile(r"rgba?\([^)]+\)", re.IGNORECASE)
URL_RE = re.compile(r"url\([^)]*\)", re.IGNORECASE)
IMPORTANT_RE = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)
GRADIENT_RE = re.compile(r"gradient\(", re.IGNORECASE)

# Longest alternatives first so 'darkred' is not matched as 'red'.
_NAMES = sorted(COLOR_NAMES, key=len, reverse=True)
NAME_RE = re.compile(r"(?<![\w#.-])(" + "|".join(_NAMES) + r")(?![\w-])", re.IGNORECASE)
HEX_RE = re.compile(r"#(?:[0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{4}|[0-9a-fA-F]{3})(?![0-9a-zA-Z])")
HSL_FUNC_RE = re.compile(r"hsla?\([^)]+\)", re.IGNORECASE)


def has_url(value: str) -> bool:
    return bool(URL_RE.search(value))


def is_gradient(value: str) -> bool:
    """True when a ``*-gradient(...)`` function appears outside ``url(...)``."""
    found: List[bool] = []

    def scan(segment: str) -> str:
        found.append(bool(GRADIENT_RE.search(segment)))
        return segment

    _map_outside_urls(value, scan)
    return any(found)


def strip_important(value: str) -> tuple[str, bool]:
    """Return ``(value_without_important, had_important)``."""
    stripped = IMPORTANT_RE.sub("", value)
    return stripped.strip(), stripped != value


def _to_rgb_css(match: "re.Match[str]") -> str:
    try:
        return parse_color(match.group(0)).to_css()
    except ColorParseError:
        return match.group(0)


def _normalize_segment(segment: str) -> str:
    segment = NAME_RE.sub(_to_rgb_css, segment)
    segment = HEX_RE.sub(_to_rgb_css, segment)
    return HSL_FUNC_RE.sub(_to_rgb_css, segment)


def _map_outside_urls(value: str, fn: Callable[[str], str]) -> str:
    out: List[str] = []
    pos = 0
    for m in URL_RE.finditer(value):
        out.append(fn(value[pos : m.start()]))
        out.append(m.group(0))
        pos = m.end()
    out.append(fn(value[pos:]))
    return "".join(out)


def normalize_colors(value: str) -> str:
    """Rewrite keyword, hex and hsl colors in ``value`` as ``rgb()/rgba()``.

    Unparseable color-like tokens are left untouched.
    """
    return _map_outside_urls(value, _normalize_segment)


def find_colors(value: str) -> List[str]:
    """Return every ``rgb()/rgba()`` literal outside ``url(...)`` segments."""
    found: List[str] = []

    def collect(segment: str) -> str:
        found.extend(COLOR_FUNC_RE.findall(segment))
        return segment

    _map_outside_urls(value, collect)
    return found


def replace_colors(value: str, fn: Callable[[str], str]) -> str:
    """Replace every ``rgb()/rgba()`` literal outside urls with ``fn(literal)``."""
    return _map_outside_urls(value, lambda seg: COLOR_FUNC_RE.sub(lambda m: fn(m.group(0)), seg))
