"""Roll-up aggregation engine.

Pure functions that turn two years of transactions plus a roll-up rule into
comparable summary rows (`aggregate` → `compare`), order them (`rank`) and
project them into cumulative waterfall segments (`waterfall`). `pipeline`
chains the steps for callers that recompute on every input change.
"""

from yoy_rollup.engine.aggregate import GroupTotals, aggregate
from yoy_rollup.engine.compare import compare, percent_change
from yoy_rollup.engine.pipeline import RollupPipeline, RollupView, ViewRequest, build_summary, build_view
from yoy_rollup.engine.rank import SortState, sort_by, toggle_direction, top_n_by_magnitude
from yoy_rollup.engine.waterfall import project

__all__ = [
    "GroupTotals",
    "RollupPipeline",
    "RollupView",
    "SortState",
    "ViewRequest",
    "aggregate",
    "build_summary",
    "build_view",
    "compare",
    "percent_change",
    "project",
    "sort_by",
    "toggle_direction",
    "top_n_by_magnitude",
]
