"""Sorting and top-N selection over summary rows.

All sorts are stable: rows that compare equal keep their input order in
both directions.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from yoy_rollup.models import METRIC_FIELDS, SortDirection, SummaryRow, VisualizationMetric

GROUP_FIELD = "group"

NUMERIC_FIELDS = (
    "year1_debits",
    "year1_credits",
    "year1_net",
    "year2_debits",
    "year2_credits",
    "year2_net",
    "net_change",
    "percent_change",
)

# camelCase names used by the table headers and metric selector
FIELD_ALIASES: dict[str, str] = {
    "year1Debits": "year1_debits",
    "year1Credits": "year1_credits",
    "year1Net": "year1_net",
    "year2Debits": "year2_debits",
    "year2Credits": "year2_credits",
    "year2Net": "year2_net",
    "netChange": "net_change",
    "percentChange": "percent_change",
}


def resolve_field(field: str | VisualizationMetric) -> str:
    """Return the `SummaryRow` attribute for a field name, alias or metric.

    Raises:
        ValueError: if `field` names no summary row field.
    """
    if isinstance(field, VisualizationMetric):
        return METRIC_FIELDS[field]
    name = FIELD_ALIASES.get(field, field)
    if name != GROUP_FIELD and name not in NUMERIC_FIELDS:
        raise ValueError(f"Unknown summary field: {field!r}")
    return name


def sort_by(
    rows: Iterable[SummaryRow],
    field: str | VisualizationMetric,
    direction: SortDirection = SortDirection.ASC,
) -> list[SummaryRow]:
    """Return `rows` sorted by `field`.

    `group` compares as case-sensitive ordinal strings, every other field
    numerically.
    """
    name = resolve_field(field)
    return sorted(
        rows,
        key=lambda r: getattr(r, name),
        reverse=SortDirection(direction) is SortDirection.DESC,
    )


def toggle_direction(
    current: SortDirection | None,
    field: str | None,
    requested_field: str,
) -> SortDirection:
    """Return the direction for a sort request on `requested_field`.

    Requesting the field that is already sorted flips the direction; any
    other field starts ascending.
    """
    if field is not None and current is not None and field == requested_field:
        return SortDirection.DESC if SortDirection(current) is SortDirection.ASC else SortDirection.ASC
    return SortDirection.ASC


@dataclass(frozen=True)
class SortState:
    """Current table sort; `request` returns the state after a header click."""
    field: str = GROUP_FIELD
    direction: SortDirection = SortDirection.ASC

    def request(self, field: str) -> "SortState":
        resolve_field(field)
        return SortState(field, toggle_direction(self.direction, self.field, field))

    def apply(self, rows: Iterable[SummaryRow]) -> list[SummaryRow]:
        return sort_by(rows, self.field, self.direction)


def top_n_by_magnitude(
    rows: Iterable[SummaryRow],
    metric: str | VisualizationMetric,
    n: int,
) -> list[SummaryRow]:
    """Return the `n` rows with the largest absolute `metric` value.

    Rows are ordered by descending magnitude; `n <= 0` yields an empty list.
    """
    if n <= 0:
        return []
    name = resolve_field(metric)
    if name == GROUP_FIELD:
        raise ValueError("top-N ranking needs a numeric field, not 'group'")
    ranked = sorted(rows, key=lambda r: abs(getattr(r, name)), reverse=True)
    return ranked[:n]
