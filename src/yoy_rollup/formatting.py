"""Display formatting for engine outputs (presentation layer only).

The engine returns raw floats; the CLI and dashboard format them here.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
import math

from yoy_rollup.models import VisualizationMetric

METRIC_LABELS: dict[VisualizationMetric, str] = {
    VisualizationMetric.NET_CHANGE: "Net Change ($)",
    VisualizationMetric.PERCENT_CHANGE: "Percent Change (%)",
    VisualizationMetric.YEAR1_NET: "Year 1 Net",
    VisualizationMetric.YEAR2_NET: "Year 2 Net",
}


def _round_half_up(value: float) -> int:
    return int(Decimal(repr(float(value))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(value: float) -> str:
    """Format as whole US dollars, e.g. `-1234.5` → `"-$1,235"`.

    Negative values keep their sign after rounding, so `-0.2` gives `"-$0"`.
    """
    if not math.isfinite(value):
        return str(value)
    rounded = _round_half_up(abs(value))
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    return f"{sign}${rounded:,}"


def compact_currency(value: float) -> str:
    """Format in thousands, e.g. `12345` → `"$12k"`, `-12345` → `"$-12k"`."""
    if not math.isfinite(value):
        return f"${value}k"
    return f"${_round_half_up(value / 1000)}k"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"


def format_metric(value: float, metric: VisualizationMetric, compact: bool = True) -> str:
    """Format a metric value: percentages as `12.34%`, amounts as currency."""
    if VisualizationMetric(metric) is VisualizationMetric.PERCENT_CHANGE:
        return format_percent(value)
    return compact_currency(value) if compact else format_currency(value)
