from __future__ import annotations

import pytest
from pydantic import ValidationError
from yoy_rollup.models import RollupRule, Transaction, TransactionSet, VisualizationMetric


def _rec(**overrides: object) -> dict[str, object]:
    rec: dict[str, object] = {
        "Account Code": "1001",
        "Account Name": "Tuition",
        "Transaction Type": "Credit",
        "Transaction Amount": 1500.5,
        "Department": "Admissions",
        "Fund": "General",
        "College": "Arts",
        "Project": "P-7",
    }
    rec.update(overrides)
    return rec


def test_transaction_validates_known_and_extra_fields() -> None:
    tx = Transaction.model_validate(_rec())
    assert tx.transaction_type == "credit"
    assert tx.transaction_amount == 1500.5
    assert tx.account_name == "Tuition"
    assert tx.extra == {"Project": "P-7"}
    assert tx.field_value("Account Name") == "Tuition"
    assert tx.field_value("account_name") == "Tuition"
    assert tx.field_value("Project") == "P-7"
    assert tx.field_value("Missing") is None


def test_transaction_rejects_non_finite_amount() -> None:
    with pytest.raises(ValidationError):
        Transaction.model_validate(_rec(**{"Transaction Amount": float("inf")}))
    with pytest.raises(ValidationError):
        Transaction.model_validate(_rec(**{"Transaction Amount": float("nan")}))


def test_transaction_is_immutable() -> None:
    tx = Transaction.model_validate(_rec())
    with pytest.raises(ValidationError):
        tx.transaction_amount = 1.0  # type: ignore[misc]


def test_numeric_account_code_becomes_text() -> None:
    tx = Transaction.model_validate(_rec(**{"Account Code": 1001}))
    assert tx.account_code == "1001"


def test_transaction_set_columns() -> None:
    ts = TransactionSet(name="fy24.csv", label="FY24", data=(Transaction.model_validate(_rec()),))
    assert ts.columns() == [
        "Account Code",
        "Account Name",
        "Transaction Type",
        "Transaction Amount",
        "Department",
        "Fund",
        "College",
        "Project",
    ]
    assert TransactionSet(name="e.csv", label="e").columns() == []


def test_rule_filter_requires_both_parts() -> None:
    assert not RollupRule(id=1, name="a", group_by="Fund").has_filter
    assert not RollupRule(id=1, name="a", group_by="Fund", filter_column="Fund").has_filter
    assert not RollupRule(id=1, name="a", group_by="Fund", filter_value="gen").has_filter
    assert RollupRule(id=1, name="a", group_by="Fund", filter_column="Fund", filter_value="gen").has_filter


def test_metric_maps_to_summary_field() -> None:
    assert VisualizationMetric("netChange").field == "net_change"
    assert VisualizationMetric.YEAR2_NET.field == "year2_net"


def test_columns_follow_source_order() -> None:
    tx = Transaction.model_validate({
        "Project": "P-7",
        "Fund": "General",
        "transaction_amount": 10,
        "Transaction Type": "debit",
        "Region": "West",
    })
    assert tx.columns() == ["Project", "Fund", "Transaction Amount", "Transaction Type", "Region"]
    assert "source_columns" not in tx.model_dump()
