"""Track the transaction file uploaded for each year in the dashboard.

A slot holds the loaded `TransactionSet` and the id of the upload it came
from. A new upload id (even under the same file name) reloads the data; a
removed upload clears the slot.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Any, Callable

import pandas as pd

from yoy_rollup.ingest.load_csv import transactions_from_frame
from yoy_rollup.models import TransactionSet

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadSlot:
    data: TransactionSet | None = None
    file_id: str | None = None

    @property
    def label(self) -> str | None:
        return self.data.label if self.data is not None else None


def read_upload(upload: Any, label: str) -> TransactionSet:
    """Parse an uploaded CSV (a file-like object with a `name`) into a `TransactionSet`."""
    pdf = pd.read_csv(upload, dtype=str, keep_default_na=False)
    txs = transactions_from_frame(pdf, source=upload.name)
    return TransactionSet(name=upload.name, label=label, data=tuple(txs))


def refresh_slot(
    slot: UploadSlot,
    upload: Any | None,
    load: Callable[[Any, str], TransactionSet] = read_upload,
) -> UploadSlot:
    """Return the slot after the uploader reports `upload`.

    Args:
        slot: Current slot.
        upload: Uploaded file (with `name` and `file_id`), or None when the
            upload was removed.
        load: Parser for the upload; receives the upload and its label.

    Returns:
        The same slot when the upload is unchanged, an empty slot when it
        was removed, otherwise a freshly loaded slot. The label carries over
        from the previous data, else defaults to the file name up to its first dot.
    """
    if upload is None:
        if slot.data is None and slot.file_id is None:
            return slot
        if slot.data is not None:
            log.info("Upload removed; clearing %s", slot.data.name)
        return UploadSlot()
    if upload.file_id == slot.file_id:
        return slot

    label = slot.label or upload.name.split(".")[0]
    return UploadSlot(data=load(upload, label), file_id=upload.file_id)


def relabel(slot: UploadSlot, label: str) -> UploadSlot:
    """Return the slot with its data relabelled (blank labels are ignored)."""
    if slot.data is None or not label or label == slot.data.label:
        return slot
    return replace(slot, data=slot.data.model_copy(update={"label": label}))
