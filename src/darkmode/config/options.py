"""Runtime options for a dark mode conversion run.

`DarkmodeConfig` mirrors the options accepted by `Darkmode.init`:

 - ``mode``: force ``"dark"`` or ``"light"``; empty means follow the color scheme
 - ``whitelist_tag_names``: tag names never converted (upper-cased, de-duplicated)
 - ``need_judge_first_page``: split output into first-paint / remaining stylesheets
 - ``delay_bg_judge``: park text elements until `convert_bg` is called
 - ``container``: element whose descendants are converted later (delayed runs)
 - ``page_height``: viewport height used for first-paint classification
 - ``backup_inline_style``: copy the authored inline style into ``data-style``
 - ``error``: callback receiving `ConversionError` for per-element faults
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Iterable, Optional, Tuple

from . import settings

__all__ = ["DarkmodeConfig", "VALID_MODES"]

VALID_MODES = ("", "dark", "light")


@dataclass
class DarkmodeConfig:
    mode: str = ""
    whitelist_tag_names: Tuple[str, ...] = settings.DEFAULT_WHITELIST_TAG_NAMES
    need_judge_first_page: bool = True
    delay_bg_judge: bool = False
    container: Any = None
    page_height: int = settings.DEFAULT_PAGE_HEIGHT
    backup_inline_style: bool = False
    error: Optional[Callable[[Exception], None]] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.mode not in VALID_MODES:
            raise ValueError(f"mode must be one of {VALID_MODES!r}, got {self.mode!r}")
        self.whitelist_tag_names = _merge_tag_names((), self.whitelist_tag_names)

    def is_whitelisted(self, tag_name: str) -> bool:
        return tag_name.upper() in self.whitelist_tag_names

    def update(self, **options: Any) -> "DarkmodeConfig":
        """Apply ``options`` in place and return self.

        Whitelisted tag names are appended to the existing list rather than
        replacing it. Unknown option names raise ``TypeError``.
        """
        extra_tags: Iterable[str] = options.pop("whitelist_tag_names", None) or ()
        unknown = sorted(set(options) - {f.name for f in fields(self)})
        if unknown:
            raise TypeError(f"unknown darkmode option(s): {', '.join(unknown)}")
        if "mode" in options and options["mode"] not in VALID_MODES:
            raise ValueError(f"mode must be one of {VALID_MODES!r}, got {options['mode']!r}")
        for name, value in options.items():
            setattr(self, name, value)
        self.whitelist_tag_names = _merge_tag_names(self.whitelist_tag_names, extra_tags)
        return self


def _merge_tag_names(existing: Iterable[str], extra: Iterable[str]) -> Tuple[str, ...]:
    out: list[str] = []
    for name in list(existing) + list(extra):
        upper = name.upper()
        if upper not in out:
            out.append(upper)
    return tuple(out)
