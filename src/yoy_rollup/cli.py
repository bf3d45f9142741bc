"""Command-line interface for year-over-year roll-ups.

Provides subcommands: `columns`, `summary`, and `chart`. Each command is
implemented as a `cmd_*` function that accepts an argparse namespace.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv
import pandas as pd

from yoy_rollup.config import Settings, get_settings
from yoy_rollup.errors import RollupError
from yoy_rollup.logging_config import configure_logging
from yoy_rollup.engine.frames import summary_frame, waterfall_frame
from yoy_rollup.engine.pipeline import RollupView, ViewRequest, build_view
from yoy_rollup.engine.rank import FIELD_ALIASES, GROUP_FIELD
from yoy_rollup.formatting import METRIC_LABELS, compact_currency, format_currency, format_percent
from yoy_rollup.ingest.load_csv import load_transaction_set
from yoy_rollup.models import ChartType, SortDirection, TransactionSet, VisualizationMetric
from yoy_rollup.rules import RuleBook, available_columns

log = logging.getLogger(__name__)

SORT_FIELDS = [GROUP_FIELD, *FIELD_ALIASES]


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _resolve_path(raw: str, settings: Settings) -> Path:
    """Return `raw` as given, or under the data directory when only found there."""
    path = Path(raw)
    if not path.is_absolute() and not path.exists() and (settings.data_dir / path).exists():
        return settings.data_dir / path
    return path


def _load_years(args: argparse.Namespace, settings: Settings) -> tuple[TransactionSet, TransactionSet | None]:
    year1 = load_transaction_set(
        _resolve_path(args.year1, settings),
        label=getattr(args, "label1", None),
        blocksize=settings.csv_blocksize,
    )
    year2 = None
    if getattr(args, "year2", None):
        year2 = load_transaction_set(
            _resolve_path(args.year2, settings),
            label=getattr(args, "label2", None),
            blocksize=settings.csv_blocksize,
        )
    return year1, year2


def _view(args: argparse.Namespace, settings: Settings) -> tuple[RollupView, TransactionSet, TransactionSet | None]:
    """Load both years, build the rule from CLI options and compute the view."""
    year1, year2 = _load_years(args, settings)
    columns = available_columns(year1, year2)
    book = RuleBook(rules=(), active_id=None).add(
        name=args.name or f"By {args.group_by}",
        group_by=args.group_by,
        filter_column=args.filter_column,
        filter_value=args.filter_value,
        columns=columns or None,
    )
    request = ViewRequest(
        sort_field=getattr(args, "sort", GROUP_FIELD),
        direction=SortDirection.DESC if getattr(args, "desc", False) else SortDirection.ASC,
        metric=VisualizationMetric(getattr(args, "metric", settings.metric)),
        top_n=getattr(args, "top_n", settings.top_n),
        chart_type=ChartType(getattr(args, "chart_type", settings.chart_type)),
    )
    return build_view(year1, year2, book.active_rule, request), year1, year2


def _write_or_print(df: pd.DataFrame, out: str | None, formatters: dict[str, object]) -> None:
    if out:
        out_path = Path(out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out_path, index=False)
        log.info("Wrote %d rows to %s", len(df), out_path)
    else:
        print(df.to_string(index=False, formatters=formatters))


# --------------------------------------------------
# COLUMNS
# --------------------------------------------------
def cmd_columns(args: argparse.Namespace, settings: Settings) -> None:
    """Print the columns available for grouping and filtering."""
    year1, year2 = _load_years(args, settings)
    for column in available_columns(year1, year2):
        print(column)


# --------------------------------------------------
# SUMMARY
# --------------------------------------------------
def cmd_summary(args: argparse.Namespace, settings: Settings) -> None:
    """Print (or export) the year-over-year summary table.

    Args:
        args: argparse namespace with the two files, rule options, `sort`,
            `desc` and `out`.
    """
    view, year1, year2 = _view(args, settings)
    if view.is_empty:
        print("No data to display. Check the files and the roll-up rule.")
        return

    label2 = year2.label if year2 is not None else "Year 2"
    log.info("Comparing %s vs %s: %d groups", year1.label, label2, len(view.table))

    money = {c: format_currency for c in ("year1_debits", "year1_credits", "year1_net",
                                          "year2_debits", "year2_credits", "year2_net", "net_change")}
    _write_or_print(summary_frame(view.table), args.out, {**money, "percent_change": format_percent})


# --------------------------------------------------
# CHART
# --------------------------------------------------
def cmd_chart(args: argparse.Namespace, settings: Settings) -> None:
    """Print (or export) the chart-ready rows: top-N bars or waterfall segments."""
    view, _, _ = _view(args, settings)
    if view.is_empty:
        print("No data for visualization. Check the files and the roll-up rule.")
        return

    metric = VisualizationMetric(args.metric)
    log.info("Top %d groups by absolute %s", args.top_n, METRIC_LABELS[metric])

    if ChartType(args.chart_type) is ChartType.WATERFALL:
        df = waterfall_frame(view.waterfall)
        formatters = {c: compact_currency for c in ("net_change", "range_start", "range_end")}
    else:
        columns = list(dict.fromkeys(["group", metric.field, "year1_net", "year2_net"]))
        df = summary_frame(view.chart_rows)[columns]
        value_fmt = format_percent if metric is VisualizationMetric.PERCENT_CHANGE else compact_currency
        formatters = {metric.field: value_fmt, "year1_net": compact_currency, "year2_net": compact_currency}
    _write_or_print(df, args.out, formatters)


# --------------------------------------------------
# CLI
# --------------------------------------------------
def _add_rule_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("year1", help="Year-1 transactions CSV")
    p.add_argument("year2", help="Year-2 transactions CSV")
    p.add_argument("--label1", default=None)
    p.add_argument("--label2", default=None)
    p.add_argument("--group-by", required=True)
    p.add_argument("--name", default=None, help="Rule display name")
    p.add_argument("--filter-column", default=None)
    p.add_argument("--filter-value", default=None)
    p.add_argument("--out", default=None, help="Write CSV here instead of printing")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    The returned parser has subcommands `columns`, `summary` and `chart`;
    chart defaults come from `settings`.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="rollup")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_columns = sub.add_parser("columns")
    p_columns.add_argument("year1")
    p_columns.add_argument("year2", nargs="?", default=None)

    p_summary = sub.add_parser("summary")
    _add_rule_options(p_summary)
    p_summary.add_argument("--sort", choices=SORT_FIELDS, default=GROUP_FIELD)
    p_summary.add_argument("--desc", action="store_true")

    p_chart = sub.add_parser("chart")
    _add_rule_options(p_chart)
    p_chart.add_argument(
        "--metric",
        choices=[m.value for m in VisualizationMetric],
        default=settings.metric.value,
    )
    p_chart.add_argument("--top-n", type=int, default=settings.top_n)
    p_chart.add_argument(
        "--chart-type",
        choices=[c.value for c in ChartType],
        default=settings.chart_type.value,
    )

    return p


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    settings = get_settings()
    configure_logging(settings.log_path, settings.log_level, settings.ingest_log_level)

    args = build_parser(settings).parse_args(argv)

    commands = {
        "columns": cmd_columns,
        "summary": cmd_summary,
        "chart": cmd_chart,
    }
    command = commands.get(args.cmd)
    if command is None:
        raise SystemExit(2)

    try:
        command(args, settings)
    except RollupError as exc:
        log.error("%s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
