"""Brightness adjustment for dark mode colors.

Background rules
----------------
 - White / light gray backgrounds become dark: achromatic colors lighter than
   40% and anything brighter than 250 get their lightness inverted around the
   dark canvas (new L = min(100, 114 - L)).
 - Other bright backgrounds are capped at a perceived brightness of 190 by
   scaling all channels uniformly (chroma ratio preserved).
 - Very dark backgrounds (L < 26%) are raised to 26% so they stay visible.
 - When the author set no text color, a readable text color is derived against
   the new background and emitted alongside it.

Text / border rules
-------------------
 - Colors over a background image are left alone (image luminance is unknown).
 - Near-white colors (brightness >= 250) are kept as intentionally bright.
 - Over a dark background (blended brightness <= 60) text darker than 75 is
   lifted: lightness is mirrored (90 - L) and, if still too dark, the channels
   are scaled to hit exactly 75.
 - Otherwise a minimum brightness gap of 60 to the background is enforced.

Perceived brightness: https://www.w3.org/TR/AERT/#color-contrast
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from darkmode.color.color_model import Color, hsl_to_rgb, parse_color, perceived_brightness
from darkmode.config import settings
from darkmode.errors import ColorParseError

__all__ = [
    "Role",
    "AdjustContext",
    "Adjustment",
    "adjust",
    "boost_to_brightness",
]

_ZERO_EPS = 1e-9


class Role(str, Enum):
    BACKGROUND = "background"
    TEXT = "text"
    BORDER = "border"
    IMAGE = "image"
    OTHER = "other"


@dataclass(frozen=True)
class AdjustContext:
    """Inputs the adjuster reads besides the color itself.

    ``parent_background`` overrides the inherited ``background`` when set.
    """

    parent_background: Optional[Color] = None
    background: Optional[str] = None
    text: Optional[str] = None
    has_background_image: bool = False
    has_inline_color: bool = False


@dataclass
class Adjustment:
    color: Optional[Color] = None  # None means unchanged
    extra: List[Tuple[str, str]] = field(default_factory=list)
    clears_background_image: bool = False

    @property
    def changed(self) -> bool:
        return self.color is not None


def adjust(color: Color, role: Role, context: AdjustContext = AdjustContext()) -> Adjustment:
    """Adjust ``color`` for dark mode according to its ``role``.

    Roles other than background / text / border are returned unchanged.
    """
    if role is Role.BACKGROUND:
        return _adjust_background(color, context)
    if role in (Role.TEXT, Role.BORDER):
        return Adjustment(color=_adjust_text(color, context))
    return Adjustment()


def _adjust_background(color: Color, ctx: AdjustContext) -> Adjustment:
    clears = ctx.has_background_image and color.alpha >= settings.BG_IMAGE_CLEAR_ALPHA
    h, s, l = color.hsl
    y = color.brightness
    new: Optional[Color] = None

    if (s == 0 and l > settings.ACHROMATIC_MIN_LIGHTNESS) or y > settings.WHITE_COLOR_BRIGHTNESS:
        new = Color.from_hsl(h, s, min(100, 100 + settings.DARK_CANVAS_LIGHTNESS - l))
    elif y > settings.LIMIT_BRIGHT:
        ratio = settings.LIMIT_BRIGHT * 1000 / color.weighted_sum
        new = Color.from_rgb(color.r * ratio, color.g * ratio, color.b * ratio)
    elif l < settings.BG_MIN_LIGHTNESS:
        new = Color.from_hsl(h, s, settings.BG_MIN_LIGHTNESS)

    if new is not None:
        new = new.with_alpha(color.alpha)

    extra: List[Tuple[str, str]] = []
    if not ctx.has_inline_color:
        parent_text = ctx.text or settings.TEXT_COLOR
        text_ctx = AdjustContext(
            parent_background=new or color,
            has_background_image=ctx.has_background_image and not clears,
        )
        try:
            text_color = _adjust_text(parse_color(parent_text), text_ctx)
        except ColorParseError:
            text_color = None
        extra.append(("color", text_color.to_css() if text_color else parent_text))

    return Adjustment(color=new, extra=extra, clears_background_image=clears)


def _resolve_parent_background(ctx: AdjustContext) -> Color:
    if ctx.parent_background is not None:
        return ctx.parent_background
    if ctx.background:
        try:
            return parse_color(ctx.background)
        except ColorParseError:
            pass
    return parse_color(settings.DEFAULT_DARK_BGCOLOR)


def _adjust_text(color: Color, ctx: AdjustContext) -> Optional[Color]:
    if ctx.has_background_image:
        return None

    y = color.brightness
    if y >= settings.WHITE_COLOR_BRIGHTNESS:
        return None

    parent_bg = _resolve_parent_background(ctx)
    blended = parent_bg.brightness * parent_bg.alpha + settings.DEFAULT_DARK_BGCOLOR_BRIGHTNESS * (
        1 - parent_bg.alpha
    )
    h, s, l = color.hsl
    new: Optional[Color] = None

    if blended <= settings.LIMIT_LOW_BGCOLOR_BRIGHTNESS and y < settings.LIMIT_LOW_TEXT_BRIGHT:
        rgb = color.rgb
        if l <= settings.ACHROMATIC_MIN_LIGHTNESS:
            l = settings.MIRROR_LIGHTNESS - l
            rgb = hsl_to_rgb(h, s, l)
            y = perceived_brightness(*rgb)
        if y >= settings.LIMIT_LOW_TEXT_BRIGHT:
            new = Color.from_hsl(h, s, l)
        else:
            new = boost_to_brightness(rgb, settings.LIMIT_LOW_TEXT_BRIGHT)
    elif abs(blended - y) < settings.LIMIT_OFFSET_BRIGHTNESS:
        if blended > 100:
            mirrored = settings.MIRROR_LIGHTNESS - l
            tmp_rgb = hsl_to_rgb(h, s, mirrored)
            # Minimal patch over the mirrored color: it may still sit too close.
            if blended - perceived_brightness(*tmp_rgb) < settings.LIMIT_OFFSET_BRIGHTNESS:
                new = boost_to_brightness(tmp_rgb, blended - settings.LIMIT_OFFSET_BRIGHTNESS)
            else:
                new = Color.from_hsl(h, s, mirrored)
        else:
            new = Color.from_hsl(h, s, parent_bg.lightness + settings.TEXT_LIGHTNESS_LIFT)

    return new.with_alpha(color.alpha) if new is not None else None


def boost_to_brightness(rgb: Tuple[float, float, float], target: float) -> Color:
    """Scale ``rgb`` so its perceived brightness becomes ``target``.

    Channels are capped at 255. When a channel is pinned at 0 or 255 the luma
    equation is solved for one remaining channel so the target is met exactly.
    Black has no direction to scale in and is returned as is.
    """
    r, g, b = rgb
    if r == 0 and g == 0 and b == 0:
        return Color.from_rgb(r, g, b)
    goal = target * 1000
    ratio = goal / (r * 299 + g * 587 + b * 114)
    nr = min(255.0, r * ratio)
    ng = min(255.0, g * ratio)
    nb = min(255.0, b * ratio)

    if abs(ng) < _ZERO_EPS:
        ng = (goal - nr * 299 - nb * 114) / 587
    elif abs(nr) < _ZERO_EPS:
        nr = (goal - ng * 587 - nb * 114) / 299
    elif abs(nb) < _ZERO_EPS:
        nb = (goal - nr * 299 - ng * 587) / 114
    elif nr == 255 or nb == 255:
        ng = (goal - nr * 299 - nb * 114) / 587
    elif ng == 255:
        nb = (goal - nr * 299 - ng * 587) / 114
    return Color.from_rgb(nr, ng, nb)
