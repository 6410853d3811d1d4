"""Configuration: static settings and per-run options."""

from . import settings  # noqa: F401
from .options import DarkmodeConfig, VALID_MODES  # noqa: F401
