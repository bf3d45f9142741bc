"""Cumulative waterfall projection over ordered summary rows."""
from __future__ import annotations

from typing import Iterable

from yoy_rollup.models import SummaryRow, WaterfallSegment


def project(rows: Iterable[SummaryRow]) -> list[WaterfallSegment]:
    """Fold rows left to right into running-total segments.

    Each segment spans from the running total before the row to the total
    after adding its net change. Rows are not reordered; pass them in
    display order.
    """
    cumulative = 0.0
    segments: list[WaterfallSegment] = []
    for row in rows:
        start = cumulative
        cumulative += row.net_change
        segments.append(
            WaterfallSegment(
                group=row.group,
                net_change=row.net_change,
                range_start=start,
                range_end=cumulative,
            )
        )
    return segments
