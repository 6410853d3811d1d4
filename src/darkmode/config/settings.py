"""Global configuration and constants for the dark mode conversion engine."""

from __future__ import annotations

import os
from typing import Final

MEDIA_QUERY: Final = "(prefers-color-scheme: dark)"
CLASS_PREFIX: Final = "js_darkmode__"
BG_CLASS_PREFIX: Final = f"{CLASS_PREFIX}bg__"
TEXT_CLASS_PREFIX: Final = f"{CLASS_PREFIX}text__"
HTML_CLASS: Final = "data_color_scheme_dark"  # added to <html> when dark mode is forced

TEXT_COLOR: Final = "rgb(25,25,25)"  # light-mode default text color
DEFAULT_DARK_BGCOLOR: Final = "#191919"
DEFAULT_LIGHT_BGCOLOR: Final = "#fff"
GRAY_MASK_COLOR: Final = "rgba(0,0,0,0.1)"  # overlay laid over background images

DEFAULT_DARK_BGCOLOR_BRIGHTNESS: Final = 25
LIMIT_LOW_BGCOLOR_BRIGHTNESS: Final = 60

# Brightness adjustment thresholds (perceived brightness is 0..255, lightness 0..100)
WHITE_COLOR_BRIGHTNESS: Final = 250
LIMIT_BRIGHT: Final = 190
LIMIT_LOW_TEXT_BRIGHT: Final = 75
LIMIT_OFFSET_BRIGHTNESS: Final = 60
BG_MIN_LIGHTNESS: Final = 26
ACHROMATIC_MIN_LIGHTNESS: Final = 40
DARK_CANVAS_LIGHTNESS: Final = 14
MIRROR_LIGHTNESS: Final = 90
TEXT_LIGHTNESS_LIFT: Final = 40
BG_IMAGE_CLEAR_ALPHA: Final = 0.05

TABLE_NAMES: Final = ("TABLE", "TR", "TD", "TH")  # tags honouring the legacy bgcolor attribute
TABLE_CLASS_COLORS: Final = {
    "ue-table-interlace-color-single": "#fcfcfc",
    "ue-table-interlace-color-double": "#f7faff",
}
DEFAULT_WHITELIST_TAG_NAMES: Final = ("MPCPS", "IFRAME")

DEFAULT_PAGE_HEIGHT: Final = int(os.environ.get("DARKMODE_PAGE_HEIGHT", "800"))
