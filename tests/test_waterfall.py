from __future__ import annotations

from yoy_rollup.engine.waterfall import project
from yoy_rollup.models import SummaryRow


def _row(group: str, net_change: float) -> SummaryRow:
    return SummaryRow(
        group=group,
        year1_debits=0.0,
        year1_credits=0.0,
        year1_net=0.0,
        year2_debits=0.0,
        year2_credits=net_change,
        year2_net=net_change,
        net_change=net_change,
        percent_change=100.0 if net_change else 0.0,
    )


def test_waterfall_running_totals() -> None:
    segments = project([_row("a", 10), _row("b", -5), _row("c", 20)])
    assert [(s.range_start, s.range_end) for s in segments] == [(0, 10), (10, 5), (5, 25)]
    assert [s.group for s in segments] == ["a", "b", "c"]
    assert [s.net_change for s in segments] == [10, -5, 20]


def test_waterfall_keeps_input_order() -> None:
    segments = project([_row("z", 1), _row("a", 2)])
    assert [s.group for s in segments] == ["z", "a"]
    assert segments[-1].range_end == 3


def test_waterfall_empty() -> None:
    assert project([]) == []
