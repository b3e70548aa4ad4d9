#!/usr/bin/env python3
# /// script
# requires-python = ">=3.10"
# dependencies = []
# ///
"""
Render market size calculations as concentric circles.

Reads the JSON written by market_calculator.py and outputs either a
standalone SVG image (--svg) or a self-contained HTML page.

Usage:
    python visualize.py --input market.json
    python visualize.py --input market.json --svg -o market.svg
    python market_calculator.py ... | python visualize.py --svg
"""

from __future__ import annotations

import argparse
import html
import json
import math
import os
import sys
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

# ---------------------------------------------------------------------------
# Input loading
# ---------------------------------------------------------------------------

_CORRUPT: dict[str, Any] = {"__corrupt__": True}


def _load_calculation(text: str) -> dict[str, Any] | None:
    """Parse calculation JSON. Returns None if empty, _CORRUPT if unusable."""
    if not text.strip():
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return _CORRUPT
    if not isinstance(data, dict):
        return _CORRUPT
    return data


def _as_dict(value: Any) -> dict[str, Any]:
    """Coerce to dict -- returns {} if not a dict."""
    return value if isinstance(value, dict) else {}


def _write_output(data: str, output_path: str | None) -> None:
    """Write SVG/HTML string to file or stdout."""
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


# ---------------------------------------------------------------------------
# HTML / SVG safety helpers
# ---------------------------------------------------------------------------


def _esc(text: Any) -> str:
    """Escape text for HTML/SVG interpolation."""
    return html.escape(str(text), quote=True)


def _num(value: Any, default: float = 0.0) -> float:
    """Safe numeric coercion for SVG coordinates."""
    try:
        result = float(value)
        if not math.isfinite(result):
            return default
        return result
    except (TypeError, ValueError):
        return default


# ---------------------------------------------------------------------------
# Formatting and geometry (duplicated from market_calculator.py per PEP 723)
# ---------------------------------------------------------------------------

TAM_RADIUS = 225.0


def _to_fixed(value: float, places: int) -> str:
    """Fixed-point text, ties rounded up on the exact binary value."""
    with localcontext() as ctx:
        ctx.prec = 400
        exp = Decimal(10) ** -places
        return str(Decimal(value).quantize(exp, rounding=ROUND_HALF_UP))


def _fmt_usd(value: float) -> str:
    """Format a number as compact USD currency string."""
    value = _num(value)
    magnitude = abs(value)
    if magnitude >= 1e9:
        text = f"${_to_fixed(magnitude / 1e9, 1)}B"
    elif magnitude >= 1e6:
        text = f"${_to_fixed(magnitude / 1e6, 1)}M"
    elif magnitude >= 1e3:
        text = f"${_to_fixed(magnitude / 1e3, 1)}K"
    else:
        text = f"${_to_fixed(magnitude, 0)}"
    if value < 0 and text != "$0":
        return "-" + text
    return text


def _radius(value: float, tam: float) -> float:
    """Radius for an area proportional to value / tam."""
    ratio = value / tam if tam != 0 else 0.0
    return _num(TAM_RADIUS * math.sqrt(max(ratio, 0.0)))


def _metric_value(data: dict[str, Any], metric: str) -> float:
    m = _as_dict(data.get(metric))
    return _num(m.get("raw_value", m.get("value", 0)))


# ---------------------------------------------------------------------------
# Color scheme and layout
# ---------------------------------------------------------------------------

_CIRCLE_COLORS = {
    "tam": "#0088FE",
    "sam": "#00C49F",
    "som": "#FFBB28",
}

_CLR_TEXT = "#1f2937"
_CLR_MUTED = "#9ca3af"

_VIEW_W = 500.0
_FRAME_H = 500.0  # circle frame, matches the 0 0 500 500 design grid
_TITLE_H = 40.0
_LEGEND_H = 100.0

# (cx, cy) per circle, all horizontally centered
_CIRCLE_CENTERS = {
    "tam": (250.0, 250.0),
    "sam": (250.0, 325.0),
    "som": (250.0, 400.0),
}

# Baselines of (metric name, formatted value) inside the circle frame
_LABEL_Y = {
    "tam": (57.72, 84.72),
    "sam": (210.5, 237.5),
    "som": (392.5, 419.5),
}

DEFAULT_SCALE = 2.0


# ---------------------------------------------------------------------------
# SVG
# ---------------------------------------------------------------------------


def _svg_circles(tam: float, sam: float, som: float) -> list[str]:
    radii = {
        "tam": TAM_RADIUS,
        "sam": _radius(sam, tam),
        "som": _radius(som, tam),
    }
    values = {"tam": tam, "sam": sam, "som": som}

    parts: list[str] = []
    for metric in ("tam", "sam", "som"):
        cx, cy = _CIRCLE_CENTERS[metric]
        parts.append(
            f'<circle cx="{cx:.2f}" cy="{cy:.2f}" r="{_num(radii[metric]):.2f}" '
            f'fill="{_CIRCLE_COLORS[metric]}" data-metric="{metric}" />'
        )
    for metric in ("tam", "sam", "som"):
        name_y, value_y = _LABEL_Y[metric]
        parts.append(
            f'<text x="250" y="{name_y:.2f}" text-anchor="middle" fill="#FFFFFF" '
            f'font-family="Arial-BoldMT, Arial" font-weight="bold" font-size="20">{metric.upper()}</text>'
        )
        parts.append(
            f'<text x="250" y="{value_y:.2f}" text-anchor="middle" fill="#FFFFFF" '
            f'font-family="Arial-BoldMT, Arial" font-weight="bold" font-size="25">'
            f"{_esc(_fmt_usd(values[metric]))}</text>"
        )
    return parts


def _svg_legend(tam: float, sam: float, som: float, top: float) -> list[str]:
    parts: list[str] = []
    values = {"tam": tam, "sam": sam, "som": som}
    for i, metric in enumerate(("tam", "sam", "som")):
        y = _num(top + 30 + i * 28)
        parts.append(f'<circle cx="28" cy="{y:.2f}" r="8" fill="{_CIRCLE_COLORS[metric]}" />')
        parts.append(
            f'<text x="44" y="{y:.2f}" dominant-baseline="central" font-family="Arial" '
            f'font-size="16" font-weight="bold" fill="{_CLR_TEXT}">{metric.upper()}:</text>'
        )
        parts.append(
            f'<text x="472" y="{y:.2f}" dominant-baseline="central" text-anchor="end" '
            f'font-family="Arial" font-size="16" fill="{_CLR_TEXT}">{_esc(_fmt_usd(values[metric]))}</text>'
        )
    return parts


def render_svg(data: dict[str, Any] | None, scale: float = DEFAULT_SCALE) -> str:
    """Render the visualization panel (title, circles, legend) as one SVG."""
    scale = _num(scale, DEFAULT_SCALE)

    if data is None or data is _CORRUPT:
        message = "No data available" if data is None else "Data unavailable"
        return (
            f'<svg width="{_VIEW_W * scale:.0f}" height="{100 * scale:.0f}" viewBox="0 0 {_VIEW_W:.0f} 100" '
            f'xmlns="http://www.w3.org/2000/svg">\n'
            f'<rect width="100%" height="100%" fill="#ffffff" />\n'
            f'<text x="250" y="50" text-anchor="middle" fill="{_CLR_MUTED}">{message}</text>\n'
            "</svg>"
        )

    tam = _metric_value(data, "tam")
    sam = _metric_value(data, "sam")
    som = _metric_value(data, "som")
    title = data.get("title")
    title = title.strip() if isinstance(title, str) else ""

    top = _TITLE_H if title else 0.0
    view_h = top + _FRAME_H + _LEGEND_H

    parts = [
        f'<svg width="{_VIEW_W * scale:.0f}" height="{view_h * scale:.0f}" '
        f'viewBox="0 0 {_VIEW_W:.0f} {view_h:.0f}" xmlns="http://www.w3.org/2000/svg">',
        '<rect width="100%" height="100%" fill="#ffffff" />',
    ]
    if title:
        parts.append(
            f'<text x="16" y="28" font-family="Arial" font-size="20" font-weight="bold" '
            f'fill="{_CLR_TEXT}">{_esc(title)}</text>'
        )
    parts.append(f'<g transform="translate(0 {top:.0f})">')
    parts.extend(_svg_circles(tam, sam, som))
    parts.append("</g>")
    parts.extend(_svg_legend(tam, sam, som, top + _FRAME_H))
    parts.append("</svg>")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# HTML page
# ---------------------------------------------------------------------------


def _css() -> str:
    """Return inline CSS for the page."""
    return """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto,
                         Helvetica, Arial, sans-serif;
            line-height: 1.6;
            color: #1f2937;
            background: #f9fafb;
            padding: 2rem;
            max-width: 960px;
            margin: 0 auto;
        }
        header h1 { font-size: 1.75rem; margin-bottom: 2rem; }
        main {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(320px, 1fr));
            gap: 2rem;
        }
        main section {
            background: #ffffff;
            border-radius: 0.5rem;
            box-shadow: 0 1px 3px rgba(0, 0, 0, 0.1);
            padding: 1.5rem;
        }
        main section h2 { font-size: 1.25rem; margin-bottom: 1rem; }
        table { width: 100%; border-collapse: collapse; font-size: 0.9rem; }
        th { text-align: left; font-weight: 500; padding: 0.4rem 0.5rem 0.4rem 0; }
        td { text-align: right; padding: 0.4rem 0; }
        tr + tr { border-top: 1px solid #e5e7eb; }
        .hint { color: #6b7280; font-size: 0.75rem; font-style: italic; font-weight: 300; }
        .visualization svg { width: 100%; height: auto; }
        .placeholder {
            text-align: center;
            color: #9ca3af;
            font-style: italic;
            padding: 2rem;
            background: #f3f4f6;
            border-radius: 0.25rem;
        }
        @media print {
            body { background: #fff; padding: 0; }
            main section { box-shadow: none; border: 1px solid #ccc; }
        }
    """


_INPUT_ROWS = [
    ("total_customers", "Total Potential Customers", ""),
    ("revenue_per_customer", "Revenue Per Customer (Annual)", ""),
    (
        "sam_percentage",
        "SAM Percentage (%)",
        "Estimate the % of the TAM that your business can realistically serve, "
        "given your resources and capabilities.",
    ),
    (
        "som_percentage",
        "SOM Percentage (%)",
        "The portion of SAM that you can realistically capture given current market share and competition.",
    ),
]


def _input_table(data: dict[str, Any]) -> str:
    inputs = _as_dict(data.get("inputs"))
    title = data.get("title") if isinstance(data.get("title"), str) else ""
    rows = [f"<tr><th>Chart Title</th><td>{_esc(title)}</td></tr>"]
    for key, label, hint in _INPUT_ROWS:
        raw = inputs.get(key, "")
        hint_html = f'<br><span class="hint">{_esc(hint)}</span>' if hint else ""
        rows.append(f"<tr><th>{_esc(label)}{hint_html}</th><td>{_esc('' if raw is None else raw)}</td></tr>")
    return "<table>\n" + "\n".join(rows) + "\n</table>"


def compose_html(data: dict[str, Any] | None, scale: float = DEFAULT_SCALE) -> str:
    """Compose the full HTML page around the SVG visualization."""
    if data is None:
        inputs_html = '<div class="placeholder">No data available</div>'
    elif data is _CORRUPT:
        inputs_html = '<div class="placeholder">Data unavailable</div>'
    else:
        inputs_html = _input_table(data)

    svg = render_svg(data, scale)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Market Size Calculator</title>
    <style>{_css()}</style>
</head>
<body>
    <header>
        <h1>Market Size Calculator</h1>
    </header>
    <main>
        <section>
            <h2>Input Data</h2>
            {inputs_html}
        </section>
        <section class="visualization">
            {svg}
        </section>
    </main>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    p = argparse.ArgumentParser(description="Render market size calculations as concentric circles")
    p.add_argument("-i", "--input", help="Calculation JSON file (default: stdin)")
    p.add_argument("--svg", action="store_true", help="Output only the standalone SVG image")
    p.add_argument("--scale", type=float, default=DEFAULT_SCALE, help="SVG pixel scale (default: 2)")
    p.add_argument("--pretty", action="store_true", help="Accepted for compatibility (no-op)")
    p.add_argument("-o", "--output", help="Write output to file instead of stdout")
    return p.parse_args()


def main() -> None:
    """Entry point."""
    args = parse_args()

    if not math.isfinite(args.scale) or args.scale <= 0:
        print(f"Error: scale must be a positive number (got {args.scale})", file=sys.stderr)
        sys.exit(1)

    if args.input:
        if not os.path.isfile(args.input):
            print(f"Error: input file not found: {args.input}", file=sys.stderr)
            sys.exit(1)
        with open(args.input, encoding="utf-8") as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    data = _load_calculation(text)

    if args.svg:
        output = render_svg(data, args.scale) + "\n"
    else:
        output = compose_html(data, args.scale)
    _write_output(output, args.output)


if __name__ == "__main__":
    main()
