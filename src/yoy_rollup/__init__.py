"""yoy_rollup package.

Compares two years of financial transactions grouped and filtered by a
configurable roll-up rule, and derives the views consumed by the dashboard.

Architecture:
- CSV ingestion normalizes uploads with Dask partitions
- Pydantic models validate transactions, rules and summary rows
- The engine (aggregate → compare → rank → waterfall) is a set of pure functions
- A Streamlit dashboard renders the summary table and Altair charts
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
