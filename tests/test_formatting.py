from __future__ import annotations

from yoy_rollup.formatting import compact_currency, format_currency, format_metric, format_percent
from yoy_rollup.models import VisualizationMetric


def test_format_currency_whole_dollars() -> None:
    assert format_currency(1234.5) == "$1,235"
    assert format_currency(-1234.5) == "-$1,235"
    assert format_currency(0) == "$0"
    assert format_currency(-0.2) == "-$0"
    assert format_currency(0.2) == "$0"
    assert format_currency(-0.0) == "-$0"


def test_compact_currency_thousands() -> None:
    assert compact_currency(12345) == "$12k"
    assert compact_currency(12500) == "$13k"
    assert compact_currency(-12345) == "$-12k"
    assert compact_currency(0) == "$0k"


def test_format_metric() -> None:
    assert format_percent(50) == "50.00%"
    assert format_metric(300, VisualizationMetric.PERCENT_CHANGE) == "300.00%"
    assert format_metric(150000, VisualizationMetric.NET_CHANGE) == "$150k"
    assert format_metric(150000, VisualizationMetric.NET_CHANGE, compact=False) == "$150,000"
