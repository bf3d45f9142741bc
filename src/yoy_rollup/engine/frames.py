"""pandas views of engine outputs for export and display."""
from __future__ import annotations

from typing import Iterable

import pandas as pd

from yoy_rollup.models import SummaryRow, WaterfallSegment

SUMMARY_COLUMNS = list(SummaryRow.model_fields)
WATERFALL_COLUMNS = list(WaterfallSegment.model_fields)


def summary_frame(rows: Iterable[SummaryRow]) -> pd.DataFrame:
    """Return summary rows as a DataFrame, preserving row order."""
    return pd.DataFrame([r.model_dump() for r in rows], columns=SUMMARY_COLUMNS)


def waterfall_frame(segments: Iterable[WaterfallSegment]) -> pd.DataFrame:
    """Return waterfall segments as a DataFrame, preserving order."""
    return pd.DataFrame([s.model_dump() for s in segments], columns=WATERFALL_COLUMNS)
