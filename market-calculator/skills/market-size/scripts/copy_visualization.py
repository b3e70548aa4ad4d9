#!/usr/bin/env python3
# /// script
# requires-python = ">=3.10"
# dependencies = []
# ///
"""
Copy a rendered market size visualization to the clipboard as an image.

Accepts the SVG from `visualize.py --svg`, or the HTML page (the first
<svg> element is used). Uses wl-copy (Wayland) or xclip (X11).

Usage:
    python visualize.py --input market.json --svg | python copy_visualization.py
    python copy_visualization.py --file market.svg --pretty

The clipboard receives the vector image as image/svg+xml, not PNG. Many
paste targets (chat apps, slide editors, some browsers) ignore SVG
clipboard data; paste into an SVG-aware editor, or save the output of
`visualize.py --svg` and insert the file instead.

Output: JSON outcome to stdout, failure cause to stderr.
Exit code 0 when copied, 1 otherwise.
"""

from __future__ import annotations

import argparse
import json
import os
import re
import shutil
import subprocess
import sys
from collections.abc import Callable
from typing import Any

SVG_MIME = "image/svg+xml"

SUCCESS_MESSAGE = "Visualization copied to clipboard!"
FAILURE_MESSAGE = "Failed to copy visualization. Please try again."

CLIPBOARD_TIMEOUT_S = 10

# Tried in order; "{mime}" is replaced with the content type
CLIPBOARD_COMMANDS: list[list[str]] = [
    ["wl-copy", "--type", "{mime}"],
    ["xclip", "-selection", "clipboard", "-t", "{mime}", "-i"],
]

_SVG_RE = re.compile(r"<svg\b.*?</svg>", re.DOTALL | re.IGNORECASE)

ClipboardWriter = Callable[[bytes, str], None]


class ClipboardError(Exception):
    """Raised when the image could not be placed on the clipboard."""


def _write_output(data: str, output_path: str | None) -> None:
    """Write JSON string to file or stdout."""
    if output_path:
        abs_path = os.path.abspath(output_path)
        parent = os.path.dirname(abs_path)
        if parent == "/":
            print(f"Error: output path resolves to root directory: {output_path}", file=sys.stderr)
            sys.exit(1)
        os.makedirs(parent, exist_ok=True)
        with open(abs_path, "w", encoding="utf-8") as f:
            f.write(data)
    else:
        sys.stdout.write(data)


def extract_svg(text: str) -> str:
    """Return the first <svg> element in text (bare SVG or an HTML page)."""
    match = _SVG_RE.search(text)
    if match is None:
        raise ClipboardError("no <svg> element found in input")
    return match.group(0)


def system_clipboard(data: bytes, mime_type: str) -> None:
    """Write bytes to the system clipboard with the first available command."""
    for template in CLIPBOARD_COMMANDS:
        if shutil.which(template[0]) is None:
            continue
        cmd = [part.replace("{mime}", mime_type) for part in template]
        result = subprocess.run(cmd, input=data, capture_output=True, timeout=CLIPBOARD_TIMEOUT_S)
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise ClipboardError(f"{template[0]} exited with {result.returncode}: {stderr}")
        return
    names = ", ".join(t[0] for t in CLIPBOARD_COMMANDS)
    raise ClipboardError(f"no clipboard command found (tried {names})")


def copy_visualization(text: str, writer: ClipboardWriter | None = None) -> dict[str, Any]:
    """Place the visualization on the clipboard and report the outcome.

    Failures are caught here and reported, never raised.
    """
    write = writer or system_clipboard
    try:
        svg = extract_svg(text)
        payload = svg.encode("utf-8")
        write(payload, SVG_MIME)
    except Exception as e:
        print(f"Error: Failed to copy: {e}", file=sys.stderr)
        return {"copied": False, "message": FAILURE_MESSAGE}
    return {
        "copied": True,
        "message": SUCCESS_MESSAGE,
        "mime_type": SVG_MIME,
        "bytes": len(payload),
    }


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Copy a market size visualization to the clipboard",
        epilog="The image is copied as image/svg+xml, not PNG; paste targets without SVG support ignore it.",
    )
    p.add_argument("-f", "--file", help="SVG or HTML file (default: stdin)")
    p.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    p.add_argument("-o", "--output", help="Write JSON outcome to file instead of stdout")
    return p.parse_args()


def main() -> None:
    args = parse_args()

    if args.file:
        if not os.path.isfile(args.file):
            print(f"Error: file not found: {args.file}", file=sys.stderr)
            sys.exit(1)
        with open(args.file, encoding="utf-8") as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    outcome = copy_visualization(text)

    indent = 2 if args.pretty else None
    _write_output(json.dumps(outcome, indent=indent) + "\n", args.output)
    if not outcome["copied"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
