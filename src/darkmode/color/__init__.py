"""Color model and CSS color value helpers."""

from .color_model import (  # noqa: F401
    Color,
    parse_color,
    perceived_brightness,
    rgb_to_hsl,
    hsl_to_rgb,
)
from .color_names import COLOR_NAMES  # noqa: F401
from .css_syntax import (  # noqa: F401
    normalize_colors,
    find_colors,
    replace_colors,
    has_url,
    is_gradient,
    strip_important,
)
