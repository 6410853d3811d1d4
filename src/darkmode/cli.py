"""CLI to generate the dark mode stylesheet for a static HTML file."""
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from darkmode.config import DarkmodeConfig, settings
from darkmode.darkmode import Darkmode
from darkmode.dom.html_adapter import flow_layout, inject_style, parse_html, write_back


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="darkmode-css", description="Generate dark mode CSS for an HTML file")
    p.add_argument("file", help="HTML file to convert")
    p.add_argument(
        "--page-height",
        type=int,
        default=settings.DEFAULT_PAGE_HEIGHT,
        help="Viewport height used for the first-paint split (default: %(default)s)",
    )
    p.add_argument("--mode", choices=("dark", "light"), default="", help="Force a color scheme")
    p.add_argument("--inline", action="store_true", help="Print the HTML with classes and an injected <style>")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        with open(args.file, "r", encoding="utf-8") as fh:
            html = fh.read()
    except OSError as e:
        print(f"darkmode-css: cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    doc = parse_html(html)
    flow_layout(doc.roots)
    sheets: List[tuple[str, bool]] = []
    config = DarkmodeConfig(mode=args.mode, page_height=args.page_height)
    dm = Darkmode(config, sink=lambda css, first_paint: sheets.append((css, first_paint)))
    # Without a forced mode the output targets the dark scheme behind its media query.
    dm.prefers_dark = True
    dm.convert(doc.elements)

    if args.inline:
        write_back(doc)
        for css, first_paint in sheets:
            inject_style(doc, css, first_paint=first_paint)
        print(doc.render())
    else:
        for css, _ in sheets:
            print(css)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
