from __future__ import annotations

import pandas as pd
import streamlit as st
import altair as alt

from yoy_rollup.config import get_settings
from yoy_rollup.engine.frames import summary_frame, waterfall_frame
from yoy_rollup.engine.pipeline import RollupPipeline, ViewRequest
from yoy_rollup.engine.rank import SortState
from yoy_rollup.errors import RollupError
from yoy_rollup.formatting import METRIC_LABELS, compact_currency, format_currency, format_percent
from yoy_rollup.ingest.uploads import UploadSlot, refresh_slot, relabel
from yoy_rollup.models import ChartType, TransactionSet, VisualizationMetric
from yoy_rollup.rules import RuleBook, available_columns

ACCENT = "#6A9F46"
NEGATIVE = "#EF4444"

settings = get_settings()

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="Financial Data Analysis", layout="wide")
st.title("📊 Financial Data Analysis")
st.caption("Year-over-year roll-up of ledger transactions")

# =====================================================
# Session state
# =====================================================
# Inputs live in session_state; the pipeline recomputes whenever one changes.
if "rule_book" not in st.session_state:
    st.session_state.rule_book = RuleBook()
if "slots" not in st.session_state:
    st.session_state.slots = {"year1": UploadSlot(), "year2": UploadSlot()}
if "sort_state" not in st.session_state:
    st.session_state.sort_state = SortState()
if "pipeline" not in st.session_state:
    st.session_state.pipeline = RollupPipeline()


# =====================================================
# Helpers
# =====================================================
def center_dataframe(df: pd.DataFrame, formatters: dict | None = None):
    """Center-align column headers and apply display formatters."""
    return (
        df.style
        .format(formatters or {})
        .set_properties(**{"text-align": "center"})
        .set_table_styles(
            [{"selector": "th", "props": [("text-align", "center")]}]
        )
    )


def year_data(key: str) -> TransactionSet | None:
    return st.session_state.slots[key].data


def year_label(key: str, default: str) -> str:
    return st.session_state.slots[key].label or default


# =====================================================
# SECTION 0 — DATA MANAGEMENT (sidebar)
# =====================================================
with st.sidebar:
    st.header("📁 Data Files")
    for key, default in (("year1", "Year 1"), ("year2", "Year 2")):
        upload = st.file_uploader(f"{default} CSV", type=["csv"], key=f"upload_{key}")
        slot = st.session_state.slots[key]
        try:
            fresh = refresh_slot(slot, upload)
        except RollupError as exc:
            st.error(str(exc))
            fresh = slot
        if fresh is not slot:
            # new or removed upload: show its label before the widget renders
            st.session_state[f"label_{key}"] = fresh.label or ""
        label = st.text_input(f"Label for {default}", key=f"label_{key}", placeholder=default)
        st.session_state.slots[key] = relabel(fresh, label)

    st.header("⚙️ Roll-up Rules")
    book: RuleBook = st.session_state.rule_book
    columns = available_columns(year_data("year1"), year_data("year2"))

    for rule in book.rules:
        c1, c2 = st.columns([4, 1])
        with c1:
            marker = "✅ " if rule.id == book.active_id else ""
            if st.button(f"{marker}{rule.name}", key=f"activate_{rule.id}", width="stretch"):
                st.session_state.rule_book = book.activate(rule.id)
                st.rerun()
        with c2:
            if st.button("🗑️", key=f"delete_{rule.id}"):
                st.session_state.rule_book = book.delete(rule.id)
                st.rerun()

    with st.form("new_rule", clear_on_submit=True):
        st.subheader("Add Rule")
        name = st.text_input("Rule name")
        if columns:
            group_by = st.selectbox("Group by", columns)
            filter_column = st.selectbox("Filter column (optional)", ["", *columns])
        else:
            group_by = st.text_input("Group by column")
            filter_column = st.text_input("Filter column (optional)")
        filter_value = st.text_input("Filter contains (optional)")
        if st.form_submit_button("Add"):
            try:
                st.session_state.rule_book = book.add(
                    name,
                    group_by,
                    filter_column=filter_column or None,
                    filter_value=filter_value or None,
                    columns=columns or None,
                )
                st.rerun()
            except RollupError as exc:
                st.error(str(exc))

# =====================================================
# Recompute
# =====================================================
c1, c2, c3 = st.columns(3)
with c1:
    metric = VisualizationMetric(
        st.selectbox(
            "Metric",
            [m.value for m in VisualizationMetric],
            index=[m.value for m in VisualizationMetric].index(settings.metric.value),
            format_func=lambda v: METRIC_LABELS[VisualizationMetric(v)],
        )
    )
with c2:
    chart_type = ChartType(
        st.radio(
            "Chart Type",
            [c.value for c in ChartType],
            index=[c.value for c in ChartType].index(settings.chart_type.value),
            horizontal=True,
        )
    )
with c3:
    top_n = int(st.number_input("Top N", min_value=1, max_value=100, value=min(100, max(1, settings.top_n))))

sort_state: SortState = st.session_state.sort_state
request = ViewRequest(
    sort_field=sort_state.field,
    direction=sort_state.direction,
    metric=metric,
    top_n=top_n,
    chart_type=chart_type,
)
view = st.session_state.pipeline.run(
    year_data("year1"),
    year_data("year2"),
    st.session_state.rule_book.active_rule,
    request,
)
label1 = year_label("year1", "Year 1")
label2 = year_label("year2", "Year 2")

tab_summary, tab_viz = st.tabs(["Summary", "Visualization"])

# =====================================================
# SECTION 1 — SUMMARY
# =====================================================
with tab_summary:
    if view.is_empty:
        st.info("No data to display. Please upload data files and select a roll-up rule.")
    else:
        st.header("📋 Roll-up Summary")
        st.caption(f"Comparing {label1} vs {label2}")

        headers = {
            "group": "Group",
            "year1Credits": f"{label1} Credits",
            "year1Debits": f"{label1} Debits",
            "year1Net": f"{label1} Net",
            "year2Credits": f"{label2} Credits",
            "year2Debits": f"{label2} Debits",
            "year2Net": f"{label2} Net",
            "netChange": "Net Change",
            "percentChange": "% Change",
        }
        buttons = st.columns(len(headers))
        for col, (field, title) in zip(buttons, headers.items()):
            arrow = ""
            if field == sort_state.field:
                arrow = " ↑" if sort_state.direction.value == "asc" else " ↓"
            with col:
                if st.button(f"{title}{arrow}", key=f"sort_{field}"):
                    st.session_state.sort_state = sort_state.request(field)
                    st.rerun()

        df_table = summary_frame(view.table)
        money = {c: format_currency for c in df_table.columns if c not in ("group", "percent_change")}
        st.dataframe(
            center_dataframe(df_table, {**money, "percent_change": format_percent}),
            width="stretch",
            hide_index=True,
        )

# =====================================================
# SECTION 2 — VISUALIZATION
# =====================================================
with tab_viz:
    if view.is_empty:
        st.info("No data for visualization. Upload data and select a rule to see charts.")
    else:
        st.header("📈 Data Visualization")
        df_chart = summary_frame(view.chart_rows)
        order = list(df_chart["group"])

        if chart_type is ChartType.WATERFALL:
            df_wf = waterfall_frame(view.waterfall)
            chart = (
                alt.Chart(df_wf)
                .mark_bar()
                .encode(
                    x=alt.X("group:N", sort=order, title=None),
                    y=alt.Y("range_start:Q", title="Cumulative Net Change", axis=alt.Axis(format="$,.0f")),
                    y2="range_end:Q",
                    color=alt.condition(alt.datum.net_change >= 0, alt.value(ACCENT), alt.value(NEGATIVE)),
                    tooltip=["group:N", "net_change:Q", "range_start:Q", "range_end:Q"],
                )
                .properties(height=400)
            )
        else:
            field = metric.field
            chart = (
                alt.Chart(df_chart)
                .mark_bar()
                .encode(
                    x=alt.X("group:N", sort=order, title=None),
                    y=alt.Y(f"{field}:Q", title=METRIC_LABELS[metric]),
                    color=alt.condition(alt.datum[field] >= 0, alt.value(ACCENT), alt.value(NEGATIVE)),
                    tooltip=["group:N", f"{field}:Q", "year1_net:Q", "year2_net:Q"],
                )
                .properties(height=400)
            )
        st.altair_chart(chart, width="stretch")

        st.subheader("Data Breakdown")
        st.caption(f"Top {top_n} groups by absolute {METRIC_LABELS[metric]}")
        for row in view.chart_rows:
            value = getattr(row, metric.field)
            shown = format_percent(value) if metric is VisualizationMetric.PERCENT_CHANGE else compact_currency(value)
            with st.expander(f"{row.group}: {shown}"):
                st.write(f"**{label1} Net:** {compact_currency(row.year1_net)}")
                st.write(f"**{label2} Net:** {compact_currency(row.year2_net)}")
                st.write(f"**Net Change:** {compact_currency(row.net_change)}")

# =====================================================
# Footer
# =====================================================
st.caption("pandas • Dask • Pydantic • Altair • Streamlit | Year-over-Year Roll-up")
