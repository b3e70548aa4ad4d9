#!/usr/bin/env python3
# /// script
# requires-python = ">=3.10"
# dependencies = []
# ///
"""
TAM/SAM/SOM market size calculator.

Derives TAM, SAM and SOM from total customers, revenue per customer and two
percentages, formats them as compact currency, and sizes three concentric
circles so that circle area is proportional to value.

Usage:
    python market_calculator.py --title "EV Batteries in LATAM" \
        --total-customers 100000 --revenue-per-customer 50 \
        --sam-percentage 20 --som-percentage 10 --pretty

    echo '{"total_customers": "100000", "revenue_per_customer": "50", ...}' \
        | python market_calculator.py --stdin

Output: JSON to stdout, warnings to stderr.
"""

from __future__ import annotations

import argparse
import json
import math
import os
import re
import sys
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

TAM_RADIUS = 225.0

NUMERIC_FIELDS = (
    "total_customers",
    "revenue_per_customer",
    "sam_percentage",
    "som_percentage",
)
INPUT_FIELDS = ("title",) + NUMERIC_FIELDS

PCT_FIELDS = {"sam_percentage", "som_percentage"}

# Plain ASCII decimal/exponent notation; no digit separators, no "inf"/"nan"
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

FORMULAS = {
    "tam": "total_customers * revenue_per_customer",
    "sam": "tam * sam_percentage / 100",
    "som": "sam * som_percentage / 100",
}


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


def fmt(value: float) -> float:
    """Round to 2 decimal places for currency values."""
    return round(value, 2)


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class MarketInputs:
    """Raw form fields. Numeric fields stay as text until a calculation runs."""

    title: str = ""
    total_customers: str = ""
    revenue_per_customer: str = ""
    sam_percentage: str = ""
    som_percentage: str = ""


@dataclass(frozen=True)
class MarketResult:
    tam: float = 0.0
    sam: float = 0.0
    som: float = 0.0


@dataclass(frozen=True)
class MarketRadii:
    tam: float = TAM_RADIUS
    sam: float = 0.0
    som: float = 0.0


# ---------------------------------------------------------------------------
# Derivation, formatting, geometry
# ---------------------------------------------------------------------------


def parse_number(text: Any) -> float:
    """Parse numeric-as-text. Empty, malformed or non-finite text is 0.0."""
    if text is None:
        return 0.0
    raw = str(text).strip()
    if not _NUMBER_RE.fullmatch(raw):
        return 0.0
    return _finite(float(raw))


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _to_fixed(value: float, places: int) -> str:
    """Fixed-point text, ties rounded up on the exact binary value."""
    with localcontext() as ctx:
        ctx.prec = 400  # wide enough for any finite float
        exp = Decimal(10) ** -places
        return str(Decimal(value).quantize(exp, rounding=ROUND_HALF_UP))


def derive(inputs: MarketInputs) -> MarketResult:
    """Compute TAM, SAM and SOM. Out-of-range inputs are not clamped."""
    customers = parse_number(inputs.total_customers)
    revenue = parse_number(inputs.revenue_per_customer)
    sam_pct = parse_number(inputs.sam_percentage)
    som_pct = parse_number(inputs.som_percentage)

    tam = _finite(customers * revenue)
    sam = _finite(tam * (sam_pct / 100))
    som = _finite(sam * (som_pct / 100))
    return MarketResult(tam=tam, sam=sam, som=som)


def format_currency(value: float) -> str:
    """Format a number as a compact dollar string ($1.5K, $2.5M, $3.2B).

    Thresholds compare the magnitude; a negative value keeps a leading
    minus sign unless it displays as $0. Ties round up ($1.25M -> $1.3M).
    """
    value = _finite(float(value))
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


def _ratio_radius(value: float, tam: float, tam_radius: float) -> float:
    ratio = value / tam if tam != 0 else 0.0
    # sqrt keeps circle *area* proportional to value
    return tam_radius * math.sqrt(max(ratio, 0.0))


def compute_radii(result: MarketResult, tam_radius: float = TAM_RADIUS) -> MarketRadii:
    """Map TAM/SAM/SOM to circle radii, TAM fixed at ``tam_radius``."""
    return MarketRadii(
        tam=tam_radius,
        sam=_finite(_ratio_radius(result.sam, result.tam, tam_radius)),
        som=_finite(_ratio_radius(result.som, result.tam, tam_radius)),
    )


def check_inputs(inputs: MarketInputs) -> list[str]:
    """Return warnings for inputs outside their intended domain.

    The values are still used as-is; these are advisory only.
    """
    warnings: list[str] = []
    for name in NUMERIC_FIELDS:
        raw = getattr(inputs, name).strip()
        if not raw:
            continue
        if not _NUMBER_RE.fullmatch(raw):
            warnings.append(f"{name} is not numeric (got {raw!r}), treated as 0")
            continue
        value = float(raw)
        if not math.isfinite(value):
            warnings.append(f"{name} is not finite (got {raw!r}), treated as 0")
            continue
        if name in PCT_FIELDS:
            if value < 0:
                warnings.append(f"{name} is negative ({value:g}%)")
            elif value > 100:
                warnings.append(f"{name} exceeds 100% ({value:g}%)")
        elif value < 0:
            warnings.append(f"{name} is negative ({value:g})")
    return warnings


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


class MarketSession:
    """Form state for one calculator session.

    Inputs are edited field by field; ``calculate`` replaces the result
    wholesale. Nothing is recomputed until ``calculate`` is called.
    """

    def __init__(self) -> None:
        self.inputs = MarketInputs()
        self.result = MarketResult()

    def edit(self, field: str, value: Any) -> None:
        if field not in INPUT_FIELDS:
            raise ValueError(f"unknown input field: {field!r}")
        setattr(self.inputs, field, "" if value is None else str(value))

    def calculate(self) -> MarketResult:
        self.result = derive(self.inputs)
        return self.result

    def radii(self) -> MarketRadii:
        return compute_radii(self.result)

    def warnings(self) -> list[str]:
        return check_inputs(self.inputs)

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of the inputs and the last calculation."""
        radii = self.radii()
        out: dict[str, Any] = {
            "title": self.inputs.title,
            "inputs": {name: getattr(self.inputs, name) for name in NUMERIC_FIELDS},
        }
        for metric in ("tam", "sam", "som"):
            value = getattr(self.result, metric)
            out[metric] = {
                "value": fmt(value),
                "raw_value": value,
                "formatted": format_currency(value),
                "radius": fmt(getattr(radii, metric)),
                "formula": FORMULAS[metric],
            }
        out["warnings"] = self.warnings()
        return out


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="TAM/SAM/SOM market size calculator")
    p.add_argument("--stdin", action="store_true", help="Read JSON input from stdin")

    # Kept as raw text; malformed values fall back to 0 at calculation time
    p.add_argument("--title", help="Chart title, e.g. 'Electric Battery Market Opportunity in LATAM'")
    p.add_argument("--total-customers", help="Total potential customers")
    p.add_argument("--revenue-per-customer", help="Revenue per customer (annual, $)")
    p.add_argument(
        "--sam-percentage",
        help="%% of the TAM your business can realistically serve, given your resources and capabilities",
    )
    p.add_argument(
        "--som-percentage",
        help="%% of the SAM you can realistically capture given current market share and competition",
    )

    p.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    p.add_argument("-o", "--output", help="Write JSON to file instead of stdout")
    return p.parse_args()


def main() -> None:
    args = parse_args()
    session = MarketSession()

    if args.stdin:
        try:
            data = json.load(sys.stdin)
        except json.JSONDecodeError as e:
            print(f"Error: invalid JSON input: {e}", file=sys.stderr)
            sys.exit(1)
        if not isinstance(data, dict):
            print("Error: JSON input must be an object", file=sys.stderr)
            sys.exit(1)
        for name in INPUT_FIELDS:
            session.edit(name, data.get(name))
    else:
        for name in INPUT_FIELDS:
            session.edit(name, getattr(args, name))

    session.calculate()
    result = session.snapshot()

    for warning in result["warnings"]:
        print(f"Warning: {warning}", file=sys.stderr)

    indent = 2 if args.pretty else None
    out = json.dumps(result, indent=indent) + "\n"
    _write_output(out, args.output)


if __name__ == "__main__":
    main()
