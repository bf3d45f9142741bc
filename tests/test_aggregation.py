from __future__ import annotations

import math

import pandas as pd
from yoy_rollup.engine.aggregate import aggregate, aggregate_frame, matches_filter
from yoy_rollup.models import RollupRule, Transaction


def _tx(kind: str, amount: float, **fields: object) -> Transaction:
    return Transaction.model_validate(
        {"Transaction Type": kind, "Transaction Amount": amount, **fields}
    )


BY_DEPT = RollupRule(id=1, name="By Department", group_by="Department")


def test_aggregate_sums_debits_and_credits_per_group() -> None:
    txs = [
        _tx("debit", 100, Department="Math"),
        _tx("credit", 150, Department="Math"),
        _tx("Credit", 40, Department="Art"),
        _tx("debit", 25.5, Department="Math"),
    ]
    totals = aggregate(txs, BY_DEPT)
    assert set(totals) == {"Math", "Art"}
    assert totals["Math"].debits == 125.5
    assert totals["Math"].credits == 150
    assert totals["Art"].debits == 0
    assert totals["Art"].credits == 40


def test_aggregate_without_rule_or_data_is_empty() -> None:
    assert aggregate([_tx("debit", 1, Department="Math")], None) == {}
    assert aggregate([], BY_DEPT) == {}
    assert aggregate(None, BY_DEPT) == {}


def test_unsupported_group_values_are_dropped() -> None:
    rule = RollupRule(id=1, name="By Code", group_by="code")
    txs = [
        _tx("debit", 1, code=None),
        _tx("debit", 2, code=True),
        _tx("debit", 4, code=[1, 2]),
        _tx("debit", 8, code=5),
        _tx("debit", 16, code=2024.0),
        _tx("debit", 32, code=1.5),
        _tx("debit", 64),
    ]
    totals = aggregate(txs, rule)
    assert {k: v.debits for k, v in totals.items()} == {"5": 8, "2024": 16, "1.5": 32}


def test_numeric_and_string_keys_share_a_group() -> None:
    rule = RollupRule(id=1, name="By Code", group_by="code")
    totals = aggregate([_tx("credit", 1, code=7), _tx("credit", 2, code="7")], rule)
    assert list(totals) == ["7"]
    assert totals["7"].credits == 3


def test_unknown_type_counts_in_neither_bucket() -> None:
    totals = aggregate([_tx("transfer", 500, Department="Math")], BY_DEPT)
    assert totals["Math"].debits == 0
    assert totals["Math"].credits == 0


def test_filter_is_case_insensitive_substring() -> None:
    rule = RollupRule(
        id=3,
        name="General fund by dept",
        group_by="Department",
        filter_column="Fund",
        filter_value="GEN",
    )
    txs = [
        _tx("credit", 10, Department="Math", Fund="General Operating"),
        _tx("credit", 20, Department="Math", Fund="Restricted"),
        _tx("credit", 40, Department="Art", Fund="regeneration"),
        _tx("credit", 80, Department="Art"),
    ]
    totals = aggregate(txs, rule)
    assert totals["Math"].credits == 10
    assert totals["Art"].credits == 40


def test_filter_needs_both_column_and_value() -> None:
    rule = RollupRule(id=1, name="x", group_by="Department", filter_column="Fund")
    tx = _tx("debit", 1, Department="Math", Fund="Other")
    assert matches_filter(tx, rule)
    assert aggregate([tx], rule)["Math"].debits == 1


def test_blank_filter_values_never_match() -> None:
    rule = RollupRule(id=1, name="x", group_by="Department", filter_column="Code", filter_value="0")
    assert not matches_filter(_tx("debit", 1, Department="Math", Code=0), rule)
    assert not matches_filter(_tx("debit", 1, Department="Math", Code=""), rule)
    assert matches_filter(_tx("debit", 1, Department="Math", Code=10), rule)


def test_included_amounts_are_conserved() -> None:
    rule = RollupRule(id=1, name="x", group_by="Department", filter_column="Fund", filter_value="gen")
    txs = [
        _tx("debit", 10, Department="Math", Fund="General"),
        _tx("credit", 20, Department="Art", Fund="general"),
        _tx("credit", 40, Department="Art", Fund="Restricted"),
        _tx("refund", 80, Department="Art", Fund="General"),
        _tx("debit", 160, Department=None, Fund="General"),
    ]
    totals = aggregate(txs, rule)
    assert sum(v.debits + v.credits for v in totals.values()) == 30


def test_non_finite_amount_propagates() -> None:
    tx = Transaction.model_construct(
        transaction_type="debit",
        transaction_amount=float("nan"),
        department="Math",
        extra={},
    )
    totals = aggregate([tx, _tx("debit", 5, Department="Math")], BY_DEPT)
    assert math.isnan(totals["Math"].debits)


def test_aggregate_frame_columns() -> None:
    df = aggregate_frame(aggregate([_tx("debit", 3, Department="Math")], BY_DEPT))
    assert list(df.columns) == ["group", "debits", "credits"]
    assert df.iloc[0].to_dict() == {"group": "Math", "debits": 3.0, "credits": 0.0}
    assert aggregate_frame({}).empty
    assert isinstance(aggregate_frame({}), pd.DataFrame)
