"""Color model used by the brightness adjuster.

Provides an immutable RGBA value type plus the small set of operations the
engine needs:

- Parsing CSS color syntax (rgb/rgba, hsl/hsla, hex, keywords) into `Color`
- Formatting back to ``rgb(r, g, b)`` / ``rgba(r, g, b, a)``
- RGB <-> HSL conversion (hue in degrees, saturation / lightness in percent)
- Perceived brightness using the 299/587/114 luma weights
- Alpha-aware mixing and alpha compositing

Channels are kept as floats so chained adjustments do not accumulate rounding
error; rounding happens only when formatting. Out-of-range channels are not
rejected here; callers clamp.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from darkmode.errors import ColorParseError
from .color_names import COLOR_NAMES

__all__ = [
    "Color",
    "parse_color",
    "rgb_to_hsl",
    "hsl_to_rgb",
    "perceived_brightness",
    "LUMA_WEIGHTS",
]

LUMA_WEIGHTS = (299, 587, 114)  # out of 1000

_EPS = 1e-9
_NUM = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_FUNC_RE = re.compile(r"^(rgba?|hsla?)\(\s*(.*?)\s*\)$", re.IGNORECASE)
_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_TOKEN_RE = re.compile(rf"({_NUM})(%|deg|turn|rad)?", re.IGNORECASE)


def _clamp(v: float, lo: float, hi: float) -> float:
    if v != v:  # NaN
        return lo
    return max(lo, min(hi, v))


def perceived_brightness(r: float, g: float, b: float) -> float:
    """Perceived brightness (0..255) per https://www.w3.org/TR/AERT/#color-contrast."""
    return (r * LUMA_WEIGHTS[0] + g * LUMA_WEIGHTS[1] + b * LUMA_WEIGHTS[2]) / 1000


def rgb_to_hsl(r: float, g: float, b: float) -> Tuple[float, float, float]:
    """Convert RGB (0..255) to HSL (degrees, percent, percent)."""
    r_f, g_f, b_f = r / 255.0, g / 255.0, b / 255.0
    cmax = max(r_f, g_f, b_f)
    cmin = min(r_f, g_f, b_f)
    delta = cmax - cmin
    light = (cmax + cmin) / 2
    if delta < _EPS:
        return 0.0, 0.0, light * 100
    if light <= 0.5:
        sat = delta / (cmax + cmin)
    else:
        sat = delta / (2 - cmax - cmin)
    if cmax == r_f:
        hue = (g_f - b_f) / delta
    elif cmax == g_f:
        hue = 2 + (b_f - r_f) / delta
    else:
        hue = 4 + (r_f - g_f) / delta
    hue = (hue * 60) % 360
    return hue, sat * 100, light * 100


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[float, float, float]:
    """Convert HSL (degrees, percent, percent) to RGB floats (0..255)."""
    h = h % 360
    s = _clamp(s, 0, 100) / 100
    l = _clamp(l, 0, 100) / 100
    if s == 0:
        v = l * 255
        return v, v, v
    chroma = (1 - abs(2 * l - 1)) * s
    x = chroma * (1 - abs((h / 60) % 2 - 1))
    m = l - chroma / 2
    if h < 60:
        r_p, g_p, b_p = chroma, x, 0.0
    elif h < 120:
        r_p, g_p, b_p = x, chroma, 0.0
    elif h < 180:
        r_p, g_p, b_p = 0.0, chroma, x
    elif h < 240:
        r_p, g_p, b_p = 0.0, x, chroma
    elif h < 300:
        r_p, g_p, b_p = x, 0.0, chroma
    else:
        r_p, g_p, b_p = chroma, 0.0, x
    return (r_p + m) * 255, (g_p + m) * 255, (b_p + m) * 255


@dataclass(frozen=True)
class Color:
    r: float
    g: float
    b: float
    alpha: float = 1.0

    # Construction -----------------------------------------------------
    @classmethod
    def from_rgb(cls, r: float, g: float, b: float, alpha: float = 1.0) -> "Color":
        return cls(
            _clamp(r, 0, 255), _clamp(g, 0, 255), _clamp(b, 0, 255), _clamp(alpha, 0, 1)
        )

    @classmethod
    def from_hsl(cls, h: float, s: float, l: float, alpha: float = 1.0) -> "Color":
        r, g, b = hsl_to_rgb(h, s, l)
        return cls.from_rgb(r, g, b, alpha)

    # Derived values ---------------------------------------------------
    @property
    def rgb(self) -> Tuple[float, float, float]:
        return self.r, self.g, self.b

    @property
    def hsl(self) -> Tuple[float, float, float]:
        return rgb_to_hsl(self.r, self.g, self.b)

    @property
    def lightness(self) -> float:
        return self.hsl[2]

    @property
    def weighted_sum(self) -> float:
        """Sum of channels weighted by 299/587/114 (1000 x perceived brightness)."""
        return self.r * LUMA_WEIGHTS[0] + self.g * LUMA_WEIGHTS[1] + self.b * LUMA_WEIGHTS[2]

    @property
    def brightness(self) -> float:
        return perceived_brightness(self.r, self.g, self.b)

    def is_achromatic(self) -> bool:
        return self.hsl[1] == 0

    # Transformations --------------------------------------------------
    def with_alpha(self, alpha: float) -> "Color":
        return Color(self.r, self.g, self.b, _clamp(alpha, 0, 1))

    def with_lightness(self, lightness: float) -> "Color":
        h, s, _ = self.hsl
        return Color.from_hsl(h, s, lightness, self.alpha)

    def mix(self, other: "Color", weight: float = 0.5) -> "Color":
        """Mix ``other`` into this color.

        ``weight`` is the share of ``other``. The channel weights account for
        the alpha difference so a translucent stop pulls less than an opaque one.
        """
        p = weight
        w = 2 * p - 1
        a = other.alpha - self.alpha
        if w * a == -1:
            w1 = (w + 1) / 2
        else:
            w1 = ((w + a) / (1 + w * a) + 1) / 2
        w2 = 1 - w1
        return Color.from_rgb(
            w1 * other.r + w2 * self.r,
            w1 * other.g + w2 * self.g,
            w1 * other.b + w2 * self.b,
            other.alpha * p + self.alpha * (1 - p),
        )

    def composite_over(self, backdrop: "Color") -> "Color":
        """Composite this color over ``backdrop`` (source-over)."""
        af = self.alpha
        ab = backdrop.alpha
        out_a = af + ab * (1 - af)
        if out_a == 0:
            return Color(0.0, 0.0, 0.0, 0.0)
        return Color.from_rgb(
            (self.r * af + backdrop.r * ab * (1 - af)) / out_a,
            (self.g * af + backdrop.g * ab * (1 - af)) / out_a,
            (self.b * af + backdrop.b * ab * (1 - af)) / out_a,
            out_a,
        )

    # Formatting -------------------------------------------------------
    def to_css(self) -> str:
        r, g, b = (int(round(_clamp(v, 0, 255))) for v in self.rgb)
        if self.alpha >= 1:
            return f"rgb({r}, {g}, {b})"
        return f"rgba({r}, {g}, {b}, {_format_alpha(self.alpha)})"

    def __str__(self) -> str:
        return self.to_css()


def _format_alpha(alpha: float) -> str:
    return f"{round(alpha, 4):g}"


def _parse_hex(value: str) -> Color:
    m = _HEX_RE.match(value)
    if not m:
        raise ColorParseError(f"invalid hex color: {value}", context={"value": value})
    digits = m.group(1)
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
    a = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
    return Color.from_rgb(r, g, b, a)


def _channel(token: Tuple[str, str], scale: float) -> float:
    number, unit = token
    v = float(number)
    if unit == "%":
        return v * scale / 100
    return v


def _hue(token: Tuple[str, str]) -> float:
    number, unit = token
    v = float(number)
    unit = unit.lower()
    if unit == "turn":
        return v * 360
    if unit == "rad":
        return v * 180 / 3.141592653589793
    return v


def _parse_function(value: str) -> Color:
    m = _FUNC_RE.match(value)
    if not m:
        raise ColorParseError(f"unsupported color syntax: {value}", context={"value": value})
    name = m.group(1).lower()
    body = m.group(2)
    parts = [p for p in re.split(r"[\s,/]+", body) if p]
    tokens = []
    for part in parts:
        t = _TOKEN_RE.fullmatch(part)
        if not t:
            raise ColorParseError(f"invalid color component {part!r} in {value}", context={"value": value})
        tokens.append((t.group(1), t.group(2) or ""))
    if len(tokens) not in (3, 4):
        raise ColorParseError(f"expected 3 or 4 components in {value}", context={"value": value})
    alpha = _channel(tokens[3], 1.0) if len(tokens) == 4 else 1.0
    if name.startswith("rgb"):
        r, g, b = (_channel(t, 255.0) for t in tokens[:3])
        return Color.from_rgb(r, g, b, alpha)
    h = _hue(tokens[0])
    s = float(tokens[1][0])
    l = float(tokens[2][0])
    return Color.from_hsl(h, s, l, alpha)


def parse_color(value: str) -> Color:
    """Parse a CSS color string.

    Raises `ColorParseError` for anything that is not a color.
    """
    if not isinstance(value, str):
        raise ColorParseError("color must be a string", context={"value": value})
    v = value.strip()
    if not v:
        raise ColorParseError("empty color value")
    lower = v.lower()
    if lower == "transparent":
        return Color(0.0, 0.0, 0.0, 0.0)
    if lower in COLOR_NAMES:
        r, g, b = COLOR_NAMES[lower]
        return Color(float(r), float(g), float(b))
    if v.startswith("#"):
        return _parse_hex(v)
    return _parse_function(v)
