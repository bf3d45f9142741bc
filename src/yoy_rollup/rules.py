"""Roll-up rule management.

`RuleBook` is an immutable list of rules plus the id of the active one.
Every edit returns a new book, so the engine can treat the active rule as
a plain input.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Iterable

from pydantic import ValidationError

from yoy_rollup.errors import RuleError
from yoy_rollup.models import RollupRule, TransactionSet

log = logging.getLogger(__name__)

DEFAULT_RULES: tuple[RollupRule, ...] = (
    RollupRule(id=1, name="By Account Name", group_by="Account Name"),
    RollupRule(id=2, name="By Department", group_by="Department"),
)


@dataclass(frozen=True)
class RuleBook:
    """User-defined rules and the active rule id (None when none is selected)."""
    rules: tuple[RollupRule, ...] = DEFAULT_RULES
    active_id: int | None = 1

    @property
    def active_rule(self) -> RollupRule | None:
        """The active rule, or None when unset or no longer present."""
        if self.active_id is None:
            return None
        return self.get(self.active_id)

    def get(self, rule_id: int) -> RollupRule | None:
        return next((r for r in self.rules if r.id == rule_id), None)

    def next_id(self) -> int:
        return max([0, *(r.id for r in self.rules)]) + 1

    def add(
        self,
        name: str,
        group_by: str,
        filter_column: str | None = None,
        filter_value: str | None = None,
        columns: Iterable[str] | None = None,
    ) -> "RuleBook":
        """Append a rule, make it active and return the new book.

        Args:
            name: Display name; must be non-empty.
            group_by: Column to group by; must be non-empty.
            filter_column: Optional filter column.
            filter_value: Optional substring to match in `filter_column`.
            columns: When given, `group_by` and `filter_column` must be
                among these column names.

        Raises:
            RuleError: if the name or group column is missing or unknown.
        """
        name = (name or "").strip()
        group_by = (group_by or "").strip()
        if not name or not group_by:
            raise RuleError("A rule needs both a name and a group-by column.")

        if columns is not None:
            known = set(columns)
            if group_by not in known:
                raise RuleError(f"Unknown group-by column: {group_by!r}")
            if filter_column and filter_column not in known:
                raise RuleError(f"Unknown filter column: {filter_column!r}")

        try:
            rule = RollupRule(
                id=self.next_id(),
                name=name,
                group_by=group_by,
                filter_column=filter_column or None,
                filter_value=filter_value or None,
            )
        except ValidationError as exc:
            raise RuleError(str(exc)) from exc

        log.info("Added rule %d (%s) grouping by %r", rule.id, rule.name, rule.group_by)
        return replace(self, rules=(*self.rules, rule), active_id=rule.id)

    def delete(self, rule_id: int) -> "RuleBook":
        """Remove a rule; if it was active, activate the first remaining one."""
        remaining = tuple(r for r in self.rules if r.id != rule_id)
        active_id = self.active_id
        if active_id == rule_id:
            active_id = remaining[0].id if remaining else None
        return replace(self, rules=remaining, active_id=active_id)

    def activate(self, rule_id: int | None) -> "RuleBook":
        """Select `rule_id` (None clears the selection).

        Raises:
            RuleError: if no rule has that id.
        """
        if rule_id is not None and self.get(rule_id) is None:
            raise RuleError(f"No rule with id {rule_id}")
        return replace(self, active_id=rule_id)


def available_columns(year1: TransactionSet | None, year2: TransactionSet | None) -> list[str]:
    """Columns offered for grouping: those of the first loaded transaction."""
    for ts in (year1, year2):
        if ts is not None and ts.data:
            return ts.columns()
    return []
