"""Conversion engine: brightness decisions, rule synthesis, layers, output."""

from .brightness import AdjustContext, Adjustment, Role, adjust, boost_to_brightness  # noqa: F401
from .css import CssWriter, StyleSheet, StyleSink  # noqa: F401
from .declarations import Declaration, ExtractedStyle, extract_declarations  # noqa: F401
from .layers import PendingLayer, PendingLayerStack, TextElementQueue  # noqa: F401
from .scheduler import ConversionScheduler, PassReport, Position  # noqa: F401
from .synthesizer import RuleSynthesizer, SynthesisResult, mix_gradient_stops  # noqa: F401

__all__ = [
    "AdjustContext",
    "Adjustment",
    "Role",
    "adjust",
    "boost_to_brightness",
    "CssWriter",
    "StyleSheet",
    "StyleSink",
    "Declaration",
    "ExtractedStyle",
    "extract_declarations",
    "PendingLayer",
    "PendingLayerStack",
    "TextElementQueue",
    "ConversionScheduler",
    "PassReport",
    "Position",
    "RuleSynthesizer",
    "SynthesisResult",
    "mix_gradient_stops",
]
