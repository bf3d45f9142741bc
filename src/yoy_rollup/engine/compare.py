"""Merge two years' aggregates into year-over-year summary rows."""
from __future__ import annotations

from typing import Mapping

from yoy_rollup.engine.aggregate import GroupTotals
from yoy_rollup.models import SummaryRow


def percent_change(net1: float, net2: float) -> float:
    """Return the percent change from `net1` to `net2`.

    Relative to the magnitude of `net1`, so the sign follows the net change
    even when `net1` is negative. A zero baseline yields 100 when `net2` is
    non-zero and 0 otherwise.
    """
    if net1 != 0:
        return ((net2 - net1) / abs(net1)) * 100
    if net2 != 0:
        return 100.0
    return 0.0


def compare(
    aggregate1: Mapping[str, GroupTotals],
    aggregate2: Mapping[str, GroupTotals],
) -> list[SummaryRow]:
    """Return one `SummaryRow` per key in either aggregate.

    Rows are ordered by group key (ordinal string order). A key missing
    from one year counts as zero debits and credits for that year.
    """
    rows: list[SummaryRow] = []
    for key in sorted(set(aggregate1) | set(aggregate2)):
        y1 = aggregate1[key] if key in aggregate1 else GroupTotals()
        y2 = aggregate2[key] if key in aggregate2 else GroupTotals()
        net1 = y1.credits - y1.debits
        net2 = y2.credits - y2.debits
        rows.append(
            SummaryRow(
                group=key,
                year1_debits=y1.debits,
                year1_credits=y1.credits,
                year1_net=net1,
                year2_debits=y2.debits,
                year2_credits=y2.credits,
                year2_net=net2,
                net_change=net2 - net1,
                percent_change=percent_change(net1, net2),
            )
        )
    return rows
