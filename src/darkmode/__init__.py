"""Dark mode color remapping and CSS rule synthesis.

Typical use::

    from darkmode import Darkmode, Element, InlineStyle

    dm = Darkmode()
    dm.run(elements, mode="dark")
    print(dm.stylesheet)
"""

from .config import DarkmodeConfig  # noqa: F401
from .darkmode import Darkmode  # noqa: F401
from .dom.element import Element, ElementKind, InlineStyle, Rect  # noqa: F401
from .engine.scheduler import ConversionScheduler, PassReport  # noqa: F401
from .errors import ColorParseError, ConversionError, DarkmodeError  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "Darkmode",
    "DarkmodeConfig",
    "ConversionScheduler",
    "PassReport",
    "Element",
    "ElementKind",
    "InlineStyle",
    "Rect",
    "DarkmodeError",
    "ColorParseError",
    "ConversionError",
    "__version__",
]
