"""Read transaction CSV files into validated `TransactionSet` objects.

Module notes:
- Files are read with Dask (every column as text) and normalized
  partition-wise: amounts are coerced to numbers and types lower-cased.
- Rows whose amount cannot be coerced are dropped before validation.
- Surviving rows are validated with the `Transaction` model; rows that
  still fail are counted and dropped with a warning.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import pandas as pd
import dask.dataframe as dd
from pydantic import ValidationError

from yoy_rollup.errors import IngestError
from yoy_rollup.models import AMOUNT_COLUMN, TYPE_COLUMN, Transaction, TransactionSet

log = logging.getLogger(__name__)

REQUIRED_COLUMNS = (AMOUNT_COLUMN, TYPE_COLUMN)
DEFAULT_BLOCKSIZE = "64MB"


def normalize_partition(pdf: pd.DataFrame) -> pd.DataFrame:
    """Partition-level normalization applied via `map_partitions`.

    Args:
        pdf: Pandas DataFrame for the partition, all columns as text.

    Returns:
        Copy with a float amount column, a stripped lower-case type column,
        and rows with non-numeric amounts removed.
    """
    pdf = pdf.copy()

    # -----------------------------
    # Coerce amount
    # -----------------------------
    pdf[AMOUNT_COLUMN] = pd.to_numeric(
        pdf[AMOUNT_COLUMN].astype(object).astype(str).str.strip(),
        errors="coerce",
    ).astype(float)

    # -----------------------------
    # Normalize type
    # -----------------------------
    pdf[TYPE_COLUMN] = (
        pdf[TYPE_COLUMN]
        .astype(object)
        .fillna("")
        .astype(str)
        .str.strip()
        .str.lower()
    )

    return pdf.dropna(subset=[AMOUNT_COLUMN])


def _check_columns(columns: Iterable[str], source: str) -> None:
    missing = [c for c in REQUIRED_COLUMNS if c not in set(columns)]
    if missing:
        raise IngestError(f"{source} is missing required column(s): {', '.join(missing)}")


def _normalize_record(rec: dict[str, Any]) -> dict[str, Any] | None:
    """Record-level counterpart of `normalize_partition` (None drops the row)."""
    amount = rec.get(AMOUNT_COLUMN)
    if isinstance(amount, str):
        try:
            amount = float(amount.strip())
        except ValueError:
            return None
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or pd.isna(amount):
        return None

    out = dict(rec)
    out[AMOUNT_COLUMN] = float(amount)
    kind = rec.get(TYPE_COLUMN)
    out[TYPE_COLUMN] = kind.strip().lower() if isinstance(kind, str) else kind
    return out


def _validate(records: Iterable[dict[str, Any]]) -> tuple[list[Transaction], int]:
    """Validate records into `Transaction` models.

    Returns:
        A tuple of (validated transactions, bad_count).
    """
    good: list[Transaction] = []
    bad = 0
    for rec in records:
        try:
            good.append(Transaction.model_validate(rec))
        except ValidationError as exc:
            bad += 1
            log.debug("Dropping invalid transaction %r: %s", rec, exc)
    return good, bad


def transactions_from_frame(pdf: pd.DataFrame, source: str = "frame") -> list[Transaction]:
    """Normalize and validate a pandas DataFrame of raw (text) rows."""
    _check_columns(pdf.columns, source)
    normalized = normalize_partition(pdf)
    dropped = len(pdf) - len(normalized)

    txs, bad = _validate(normalized.to_dict(orient="records"))
    if dropped or bad:
        log.warning(
            "%s: dropped %d rows with non-numeric amounts and %d invalid rows",
            source,
            dropped,
            bad,
        )
    log.info("%s: loaded %d transactions", source, len(txs))
    return txs


def transactions_from_records(records: Iterable[dict[str, Any]], source: str = "records") -> list[Transaction]:
    """Normalize and validate in-memory row dicts (values may be typed)."""
    records = list(records)
    if records:
        _check_columns(set().union(*(r.keys() for r in records)), source)

    normalized = [n for n in (_normalize_record(r) for r in records) if n is not None]
    dropped = len(records) - len(normalized)

    txs, bad = _validate(normalized)
    if dropped or bad:
        log.warning(
            "%s: dropped %d rows with non-numeric amounts and %d invalid rows",
            source,
            dropped,
            bad,
        )
    return txs


def read_transactions_csv(path: Path, blocksize: str = DEFAULT_BLOCKSIZE) -> list[Transaction]:
    """Read one CSV file into validated transactions.

    Args:
        path: CSV file with a header row.
        blocksize: Dask partition size.

    Raises:
        IngestError: if the file does not exist or lacks required columns.
    """
    path = Path(path)
    if not path.is_file():
        raise IngestError(f"Transaction file not found: {path}")

    log.info("Reading transactions from %s", path)
    ddf = dd.read_csv(
        str(path),
        dtype=str,
        keep_default_na=False,
        blocksize=blocksize,
    )
    _check_columns(ddf.columns, path.name)

    meta = normalize_partition(ddf._meta)
    pdf = ddf.map_partitions(normalize_partition, meta=meta).compute()
    pdf = pdf.reset_index(drop=True)

    txs, bad = _validate(pdf.to_dict(orient="records"))
    if bad:
        log.warning("%s: dropped %d invalid rows", path.name, bad)
    log.info("%s: loaded %d transactions", path.name, len(txs))
    return txs


def load_transaction_set(
    path: Path,
    label: str | None = None,
    blocksize: str = DEFAULT_BLOCKSIZE,
) -> TransactionSet:
    """Read a CSV into a `TransactionSet` labelled by `label` or the file stem."""
    path = Path(path)
    txs = read_transactions_csv(path, blocksize=blocksize)
    return TransactionSet(name=path.name, label=label or path.stem, data=tuple(txs))
