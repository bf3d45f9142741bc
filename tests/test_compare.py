from __future__ import annotations

import importlib

import pytest

from yoy_rollup.engine.aggregate import GroupTotals
from yoy_rollup.engine.compare import compare, percent_change


def test_percent_change_policy() -> None:
    assert percent_change(0, 0) == 0
    assert percent_change(0, 150) == 100
    assert percent_change(0, -150) == 100
    assert percent_change(100, 150) == 50
    assert percent_change(-100, -150) == -50


def test_percent_change_divides_by_magnitude_of_baseline() -> None:
    # a negative baseline moving to zero reads as growth
    assert percent_change(-100, 0) == 100
    assert percent_change(50, 200) == 300


def test_compare_unions_keys_in_ordinal_order() -> None:
    a1 = {"b": GroupTotals(debits=1), "B": GroupTotals(credits=2)}
    a2 = {"a": GroupTotals(credits=5), "b": GroupTotals(debits=3)}
    rows = compare(a1, a2)
    assert [r.group for r in rows] == ["B", "a", "b"]


def test_key_only_in_year_two_has_zero_year_one() -> None:
    rows = compare({}, {"Art": GroupTotals(debits=20, credits=70)})
    assert len(rows) == 1
    row = rows[0]
    assert (row.year1_debits, row.year1_credits, row.year1_net) == (0, 0, 0)
    assert row.year2_net == 50
    assert row.net_change == 50
    assert row.percent_change == 100


def test_key_only_in_year_one() -> None:
    (row,) = compare({"Art": GroupTotals(debits=10, credits=30)}, {})
    assert row.year1_net == 20
    assert row.year2_net == 0
    assert row.net_change == -20
    assert row.percent_change == -100


def test_zero_rows_are_kept() -> None:
    rows = compare({"Z": GroupTotals()}, {"Z": GroupTotals()})
    assert len(rows) == 1
    assert rows[0].net_change == 0
    assert rows[0].percent_change == 0


def test_compare_empty() -> None:
    assert compare({}, {}) == []


def test_missing_keys_get_their_own_zero_totals(monkeypatch: pytest.MonkeyPatch) -> None:
    made: list[GroupTotals] = []

    def fresh() -> GroupTotals:
        made.append(GroupTotals())
        return made[-1]

    # the package re-exports the function under the module's name
    compare_module = importlib.import_module("yoy_rollup.engine.compare")
    monkeypatch.setattr(compare_module, "GroupTotals", fresh)
    rows = compare({"a": GroupTotals(debits=1)}, {"b": GroupTotals(credits=2), "c": GroupTotals(credits=3)})
    assert len(made) == 3
    assert len({id(t) for t in made}) == 3
    assert [(r.year1_net, r.year2_net) for r in rows] == [(-1, 0), (0, 2), (0, 3)]
