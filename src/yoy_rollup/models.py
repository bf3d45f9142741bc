"""Pydantic models used for ingestion and engine outputs.

Transactions carry a fixed set of known fields plus an explicit `extra`
mapping for any additional CSV columns. Summary rows and waterfall segments
are the engine's outputs consumed by the table and chart views.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TransactionType(str, Enum):
    """Recognized transaction types (stored lower-cased)."""
    CREDIT = "credit"
    DEBIT = "debit"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class VisualizationMetric(str, Enum):
    """Chart metrics; each maps to a `SummaryRow` field."""
    NET_CHANGE = "netChange"
    PERCENT_CHANGE = "percentChange"
    YEAR1_NET = "year1Net"
    YEAR2_NET = "year2Net"

    @property
    def field(self) -> str:
        return METRIC_FIELDS[self]


class ChartType(str, Enum):
    BAR = "bar"
    WATERFALL = "waterfall"


METRIC_FIELDS: dict[VisualizationMetric, str] = {
    VisualizationMetric.NET_CHANGE: "net_change",
    VisualizationMetric.PERCENT_CHANGE: "percent_change",
    VisualizationMetric.YEAR1_NET: "year1_net",
    VisualizationMetric.YEAR2_NET: "year2_net",
}

# CSV header -> model attribute for the known transaction columns
COLUMN_FIELDS: dict[str, str] = {
    "Account Code": "account_code",
    "Account Name": "account_name",
    "Transaction Type": "transaction_type",
    "Transaction Amount": "transaction_amount",
    "Department": "department",
    "Fund": "fund",
    "College": "college",
}

FIELD_HEADERS: dict[str, str] = {attr: header for header, attr in COLUMN_FIELDS.items()}

AMOUNT_COLUMN = "Transaction Amount"
TYPE_COLUMN = "Transaction Type"


class Transaction(BaseModel):
    """Schema for one ingested transaction.

    Known columns are validated into typed attributes (the CSV headers are
    accepted as aliases); every other column lands in `extra` untouched.

    Attributes:
        account_code: Ledger account code.
        account_name: Ledger account name.
        transaction_type: Lower-cased type; "credit" and "debit" are counted,
            anything else is tolerated and ignored by aggregation.
        transaction_amount: Finite amount.
        department: Department name.
        fund: Fund name.
        college: College name.
        extra: Additional named fields from the source file.
        source_columns: Column names in the order the source record listed
            them (known columns by CSV header). Not part of dumps.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    account_code: str | None = Field(default=None, alias="Account Code")
    account_name: str | None = Field(default=None, alias="Account Name")
    transaction_type: str = Field(..., alias="Transaction Type")
    transaction_amount: float = Field(..., alias="Transaction Amount", allow_inf_nan=False)
    department: str | None = Field(default=None, alias="Department")
    fund: str | None = Field(default=None, alias="Fund")
    college: str | None = Field(default=None, alias="College")
    extra: dict[str, Any] = Field(default_factory=dict)
    source_columns: tuple[str, ...] = Field(default=(), exclude=True, repr=False)

    @model_validator(mode="before")
    @classmethod
    def _collect_extra(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known: dict[str, Any] = {}
        extra = dict(data.get("extra") or {})
        order: list[str] = []
        for key, value in data.items():
            if key in ("extra", "source_columns"):
                continue
            if key in COLUMN_FIELDS or key in FIELD_HEADERS:
                known[key] = value
                order.append(FIELD_HEADERS.get(key, key))
            else:
                extra[key] = value
                order.append(key)
        known["extra"] = extra
        known["source_columns"] = data.get("source_columns") or tuple(dict.fromkeys([*order, *extra]))
        return known

    @field_validator("account_code", "account_name", "department", "fund", "college", mode="before")
    @classmethod
    def _int_to_text(cls, v: Any) -> Any:
        # numeric codes arrive as ints from typed sources
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("transaction_type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def field_value(self, column: str) -> Any:
        """Return the value stored under `column`, or None when absent.

        `column` may be a CSV header ("Account Name"), a model attribute
        ("account_name") or the name of an extra field.
        """
        attr = COLUMN_FIELDS.get(column)
        if attr is None and column in COLUMN_FIELDS.values():
            attr = column
        if attr is not None:
            return getattr(self, attr)
        return self.extra.get(column)

    def columns(self) -> list[str]:
        """Column names present on this transaction, in source order."""
        if self.source_columns:
            return list(self.source_columns)
        # built without validation (model_construct)
        names = [header for header, attr in COLUMN_FIELDS.items() if attr in self.model_fields_set]
        return names + list(self.extra)


class TransactionSet(BaseModel):
    """One year's already-parsed transactions.

    Attributes:
        name: Source file name.
        label: Display label (defaults to the file stem at ingestion).
        data: Transactions in file order.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    data: tuple[Transaction, ...] = ()

    def columns(self) -> list[str]:
        return self.data[0].columns() if self.data else []


class RollupRule(BaseModel):
    """Named grouping rule with an optional substring filter.

    The filter applies only when both `filter_column` and `filter_value`
    are set.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int
    name: str
    group_by: str
    filter_column: str | None = None
    filter_value: str | None = None

    @property
    def has_filter(self) -> bool:
        return bool(self.filter_column) and bool(self.filter_value)


class SummaryRow(BaseModel):
    """Year-over-year comparison for one group key."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    group: str
    year1_debits: float
    year1_credits: float
    year1_net: float
    year2_debits: float
    year2_credits: float
    year2_net: float
    net_change: float
    percent_change: float


class WaterfallSegment(BaseModel):
    """Cumulative running-total bar for one group."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    group: str
    net_change: float
    range_start: float
    range_end: float
