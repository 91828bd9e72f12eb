#!/usr/bin/env python3
"""Convert text with ANSI color codes into HTML with inline styles."""

from __future__ import annotations

import argparse
import html
import json
import sys
from pathlib import Path
from typing import Sequence

import sgr_settings
from sgr_render import PaletteError, RenderResult, convert

_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{title}</title></head>
<body>
<pre class="terminal">{body}</pre>
</body>
</html>
"""


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render ANSI SGR colored text as HTML")
    parser.add_argument("path", nargs="?", default="-", help="Input file, '-' for stdin")
    parser.add_argument("--format", choices=("html", "json"), default="html")
    parser.add_argument("-o", "--output", default="", help="Write to this file instead of stdout")
    parser.add_argument("--page", action="store_true", help="Wrap HTML in a standalone <pre> page")
    parser.add_argument("--strict", action="store_true", help="Exit 1 if any parameter failed to decode")
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not print diagnostics")
    parser.add_argument("--log-level", default="", help="Override SGR_LOG_LEVEL")
    return parser.parse_args(argv)


def read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def format_result(result: RenderResult, fmt: str, page: bool, title: str) -> str:
    if fmt == "json":
        payload = {"spans": result.to_runs(), "diagnostics": result.diagnostics}
        return json.dumps(payload, ensure_ascii=False) + "\n"
    markup = result.to_html()
    if page:
        return _PAGE.format(title=html.escape(title), body=markup)
    return markup


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    # Diagnostics are printed below; keep the logger from repeating them.
    sgr_settings.configure_logging(args.log_level or "ERROR")

    try:
        raw = read_input(args.path)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {args.path}: {exc}", file=sys.stderr)
        return 2

    try:
        result = convert(raw)
    except PaletteError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if not args.quiet:
        for message in result.diagnostics:
            print(f"warning: {message}", file=sys.stderr)

    title = "stdin" if args.path == "-" else Path(args.path).name
    text = format_result(result, args.format, args.page, title)
    if args.output:
        try:
            Path(args.output).write_text(text, encoding="utf-8")
        except OSError as exc:
            print(f"error: cannot write {args.output}: {exc}", file=sys.stderr)
            return 2
    else:
        sys.stdout.write(text)

    if args.strict and result.diagnostics:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
