"""Per-element dark mode rule synthesis.

For every color-relevant inline declaration of an element the synthesizer:

 - rewrites keyword / hex / hsl colors to ``rgb()`` form and drops ``!important``
 - reduces gradients to one mixed color and defers the result to the
   `PendingLayerStack` (gradients matter where text overlaps them)
 - runs every other embedded color through the brightness adjuster
 - records how the element's background / text color was decided so
   descendants can be adjusted against it (`SynthesisResult.context_updates`)
 - compensates background and border images with a translucent dark overlay
   plus a fallback layer of the best known original background color

All immediate declarations end up in one rule scoped to a freshly minted class.
Text-bearing elements then release (or queue for) any pending layers they
overlap.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import List, Optional

from darkmode.color.color_model import Color, parse_color
from darkmode.color.css_syntax import find_colors, has_url, is_gradient, normalize_colors, replace_colors
from darkmode.config import DarkmodeConfig, settings
from darkmode.dom.element import ContextUpdate, Element, ElementColorContext, ElementKind
from darkmode.errors import ColorParseError
from .brightness import AdjustContext, Role, adjust
from .css import CssWriter
from .declarations import Declaration, ExtractedStyle, extract_declarations
from .layers import PendingLayer, PendingLayerStack, TextElementQueue
from darkmode.utils.naming import ClassNameSequence

__all__ = ["SynthesisResult", "RuleSynthesizer", "mix_gradient_stops"]

_logger = logging.getLogger(__name__)

_BORDER_IMAGE_RE = re.compile(r"^(-webkit-)?border-image")

# Image-only properties cannot hold a plain color; the flat color moves here.
_FLAT_COLOR_TARGETS = {
    "background-image": "background-color",
    "border-image": "border-color",
    "-webkit-border-image": "border-color",
}


@dataclass
class SynthesisResult:
    element: Element
    css: str = ""
    class_name: Optional[str] = None
    context_updates: List[ContextUpdate] = field(default_factory=list)
    element_context: Optional[ElementColorContext] = None
    matched_layers: List[PendingLayer] = field(default_factory=list)

    @property
    def produced_rule(self) -> bool:
        return self.class_name is not None


def mix_gradient_stops(stops: List[str]) -> Optional[Color]:
    """Reduce gradient stops to one color.

    The first remaining stop is mixed with the last remaining one until a
    single color is left. Returns None when a stop cannot be parsed.
    """
    try:
        colors = [parse_color(s) for s in stops]
    except ColorParseError:
        return None
    if not colors:
        return None
    mixed = colors.pop(0)
    while colors:
        mixed = mixed.mix(colors.pop())
    return mixed


class _ElementPass:
    """Mutable state for converting a single element."""

    def __init__(self, element: Element, extracted: ExtractedStyle) -> None:
        self.element = element
        self.extracted = extracted
        self.ctx = replace(element.context)
        self.updates: List[ContextUpdate] = []
        self.css_kv = ""

    def record(self, name: str, value) -> None:
        setattr(self.ctx, name, value)
        self.updates.append(ContextUpdate(name, value))

    def adjust_context(self) -> AdjustContext:
        return AdjustContext(
            background=self.ctx.background,
            text=self.ctx.text,
            has_background_image=self.ctx.has_background_image,
            has_inline_color=self.extracted.has_inline_color,
        )


class RuleSynthesizer:
    def __init__(
        self,
        config: DarkmodeConfig,
        writer: CssWriter,
        layers: PendingLayerStack,
        text_queue: TextElementQueue,
        sequence: Optional[ClassNameSequence] = None,
    ) -> None:
        self._config = config
        self._writer = writer
        self._layers = layers
        self._text_queue = text_queue
        self._sequence = sequence or ClassNameSequence()

    def convert(self, element: Element) -> SynthesisResult:
        result = SynthesisResult(element=element)
        if self._config.is_whitelisted(element.tag_name):
            return result

        state = _ElementPass(element, extract_declarations(element))
        for decl in state.extracted.declarations:
            self._convert_declaration(state, decl)

        css = ""
        if state.css_kv:
            if self._config.backup_inline_style:
                element.set_attribute("data-style", element.style.css_text)
            result.class_name = self._sequence.next()
            element.add_class(result.class_name)
            css += self._writer.gen_css(result.class_name, state.css_kv)

        result.context_updates = state.updates
        result.element_context = state.ctx

        if element.has_text_node():
            if self._config.delay_bg_judge:
                self._text_queue.push(element)
            else:
                self._layers.resolve(element, result.matched_layers.append)
                for layer in result.matched_layers:
                    css += self._writer.gen_css(layer.class_name, layer.css_kv)

        result.css = css
        return result

    # Declarations -----------------------------------------------------
    def _convert_declaration(self, state: _ElementPass, decl: Declaration) -> None:
        kv = self._writer.gen_css_kv
        key = decl.name
        value = normalize_colors(decl.value)
        gradient = is_gradient(value)
        changed = False
        flat_color: Optional[str] = None

        if not state.extracted.has_inline_background_image and find_colors(value):
            mixed = mix_gradient_stops(find_colors(value)) if gradient else None
            if mixed is not None:
                flat_color = self._adjust_color(state, decl.role, mixed)
                changed = True
            else:
                value, changed = self._adjust_in_place(state, decl.role, value)

        if state.element.kind is not ElementKind.SVG:
            value, image_changed = self._compensate_image(state, key, value)
            changed = changed or image_changed

        if not changed:
            return
        if decl.important:
            state.element.style.set(key, decl.value)
        if flat_color is not None:
            target = _FLAT_COLOR_TARGETS.get(key)
            if target:
                fragment = kv(key, "none") + kv(target, flat_color)
            else:
                fragment = kv(key, flat_color)
            self._layers.push(state.element, fragment)
        elif gradient:
            self._layers.push(state.element, kv(key, value))
        else:
            state.css_kv += kv(key, value)

    def _adjust_in_place(self, state: _ElementPass, role: Role, value: str) -> tuple[str, bool]:
        changed = False

        def substitute(literal: str) -> str:
            nonlocal changed
            try:
                color = parse_color(literal)
            except ColorParseError:
                _logger.debug("leaving unparseable color %r untouched", literal)
                return literal
            adjusted = self._adjust_color(state, role, color, original=literal)
            if adjusted != literal:
                changed = True
            return adjusted

        return replace_colors(value, substitute), changed

    def _adjust_color(self, state: _ElementPass, role: Role, color: Color, original: Optional[str] = None) -> str:
        """Adjust one color, emit side declarations and record context changes."""
        original = original if original is not None else color.to_css()
        outcome = adjust(color, role, state.adjust_context())
        if outcome.clears_background_image:
            state.ctx.has_background_image = False
        for name, extra_value in outcome.extra:
            state.css_kv += self._writer.gen_css_kv(name, extra_value)

        result = outcome.color.to_css() if outcome.color is not None else original
        if role is Role.BACKGROUND:
            state.record("background", result)
            state.record("original_background", original)
            if _alpha_of(result) >= settings.BG_IMAGE_CLEAR_ALPHA:
                state.ctx.has_background_image = False
                state.updates.append(ContextUpdate("clear_background_image"))
        elif role is Role.TEXT:
            state.record("text", result)
            state.record("original_text", original)
        return result

    def _compensate_image(self, state: _ElementPass, key: str, value: str) -> tuple[str, bool]:
        is_background = key.startswith("background")
        is_border_image = bool(_BORDER_IMAGE_RE.match(key))
        if not (is_background or is_border_image) or not has_url(value):
            return value, False

        kv = self._writer.gen_css_kv
        extracted = state.extracted
        cover = settings.GRAY_MASK_COLOR
        fallback = state.ctx.original_background or settings.DEFAULT_LIGHT_BGCOLOR
        fallback_layer = f"linear-gradient({fallback}, {fallback})"
        if not state.ctx.has_background_image:
            state.record("has_background_image", True)

        if is_background:
            value = f"linear-gradient({cover}, {cover}),{value}"
            layer_kv = kv(key, f"{value},{fallback_layer}")
            if extracted.background_position:
                position = f"top left,{extracted.background_position}"
                state.css_kv += kv("background-position", position)
                layer_kv += kv("background-position", f"{position},top left")
            if extracted.background_size:
                size = f"100%,{extracted.background_size}"
                state.css_kv += kv("background-size", size)
                layer_kv += kv("background-size", f"{size},100%")
            self._layers.push(state.element, layer_kv)
        elif not extracted.has_inline_background:
            # border-image has no layers: compensate with a background instead
            self._layers.push(
                state.element,
                kv("background-image", f"linear-gradient({cover}, {cover}),{fallback_layer}"),
            )

        if not extracted.has_inline_color:
            text_color = state.ctx.original_text or settings.TEXT_COLOR
            state.css_kv += kv("color", text_color)
            state.record("text", text_color)
        return value, True


def _alpha_of(css_color: str) -> float:
    try:
        return parse_color(css_color).alpha
    except ColorParseError:
        return 1.0
