"""Per-group debit/credit totals for one year of transactions.

Expectations:
- Input: a sequence of `Transaction` models and a `RollupRule`.
- Output: a mapping of group key → `GroupTotals`, with no ordering guarantee.

Transactions are excluded silently when they miss the rule's filter, when
their group value has no string form, or (from the buckets only) when their
type is neither credit nor debit.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Mapping

import pandas as pd

from yoy_rollup.engine.keys import group_key, is_blank, stringify
from yoy_rollup.models import RollupRule, Transaction, TransactionType

log = logging.getLogger(__name__)


@dataclass
class GroupTotals:
    """Running sums for one group key."""
    debits: float = 0.0
    credits: float = 0.0


def matches_filter(transaction: Transaction, rule: RollupRule) -> bool:
    """Return True when `transaction` passes the rule's substring filter.

    Rules without a complete filter (column and value) match everything.
    """
    if not rule.has_filter:
        return True
    value = transaction.field_value(rule.filter_column)
    if is_blank(value):
        return False
    text = stringify(value)
    if text is None:
        text = str(value)
    return rule.filter_value.lower() in text.lower()


def aggregate(
    transactions: Iterable[Transaction] | None,
    rule: RollupRule | None,
) -> dict[str, GroupTotals]:
    """Group and filter one year's transactions into debit/credit totals.

    Args:
        transactions: Transactions for one year; None or empty yields `{}`.
        rule: Active roll-up rule; None yields `{}`.

    Returns:
        Mapping of group key to `GroupTotals`.
    """
    if rule is None or not transactions:
        return {}

    totals: dict[str, GroupTotals] = {}
    skipped = 0

    for tx in transactions:
        if not matches_filter(tx, rule):
            continue

        key = group_key(tx.field_value(rule.group_by))
        if key is None:
            skipped += 1
            continue

        bucket = totals.setdefault(key, GroupTotals())
        if tx.transaction_type == TransactionType.DEBIT.value:
            bucket.debits += tx.transaction_amount
        elif tx.transaction_type == TransactionType.CREDIT.value:
            bucket.credits += tx.transaction_amount

    if skipped:
        log.debug("Rule %r: %d transactions had no usable %r value", rule.name, skipped, rule.group_by)
    return totals


def aggregate_frame(totals: Mapping[str, GroupTotals]) -> pd.DataFrame:
    """Render aggregate totals as a `group, debits, credits` DataFrame."""
    return pd.DataFrame(
        [{"group": k, "debits": v.debits, "credits": v.credits} for k, v in totals.items()],
        columns=["group", "debits", "credits"],
    )
