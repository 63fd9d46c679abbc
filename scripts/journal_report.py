#!/usr/bin/env python3
from __future__ import annotations

"""Print a performance report for the trade journal.

Usage:
    python scripts/journal_report.py
    python scripts/journal_report.py --month 2024-03
    python scripts/journal_report.py --source notion --coach
"""

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from trade_journal.config import Config
from trade_journal.data.local import LocalStore
from trade_journal.data.notion import NotionConfig, NotionError, NotionStore
from trade_journal.analytics.metrics import (
    compute_stats,
    bucket_by_day,
    bucket_by_month,
    bucket_by_year,
    summarize_month,
)
from trade_journal.analytics.calendar_grid import MonthCursor, build_month_grid
from trade_journal.analytics.equity import equity_curve
from trade_journal.analytics.formatting import (
    format_currency,
    format_number,
    format_percent,
    profit_factor_label,
)
from trade_journal.coach.gemini import analyze_trade_journal


MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def parse_month(value: str | None) -> MonthCursor:
    """argparse ``type`` for ``--month``: YYYY-MM, or the current month when empty."""
    if not value:
        return MonthCursor.today()
    try:
        year, month = value.split("-")
        return MonthCursor(int(year), int(month))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM with a month in 1..12, got {value!r}") from e


def load_trades(source: str, cache_path: Path) -> list:
    """Load trades from the chosen source, falling back to the local cache."""
    cache = LocalStore(cache_path)
    if source == "local":
        return cache.list()

    store = NotionStore(NotionConfig.from_config())
    try:
        trades = store.list()
    except NotionError as e:
        print(f"  Notion sync error: {e}")
        print("  Using the local cache instead.")
        return cache.list()
    cache.save_all(trades)
    return trades


def print_stats(trades: list) -> None:
    stats = compute_stats(trades)
    print("=" * 60)
    print("  OVERVIEW")
    print("=" * 60)
    print(f"  Net P&L:        {format_currency(stats.total_pnl)}")
    print(f"  Win Rate:       {format_percent(stats.win_rate)} "
          f"({stats.win_count}W - {stats.loss_count}L)")
    print(f"  Profit Factor:  {format_number(stats.profit_factor, 2)} "
          f"({profit_factor_label(stats.profit_factor)})")
    print(f"  Avg Win:        {format_currency(stats.avg_win)}")
    print(f"  Avg Loss:       {format_currency(stats.avg_loss)}")
    print(f"  Best Day:       {format_currency(stats.best_day)}")
    print(f"  Worst Day:      {format_currency(stats.worst_day)}")
    print(f"  Total Trades:   {stats.total_trades}")

    curve = equity_curve(trades)
    if not curve.empty:
        peak = curve["Equity"].max()
        print(f"  Equity Peak:    {format_currency(peak)}")
    print()


def print_calendar(trades: list, cursor: MonthCursor) -> None:
    grid = build_month_grid(
        cursor.year, cursor.month, bucket_by_day(trades), first_weekday=Config.FIRST_WEEKDAY,
    )
    total = summarize_month(trades, cursor.year, cursor.month)
    print(f"  {cursor.label()}  |  {format_currency(total.pnl, decimals=0)}"
          f"  |  {total.count} trades ({total.winners}W - {total.losers}L)")
    header = "".join(f"{label:>10}" for label in grid.weekday_labels())
    print(f"  {header}  |  Week")

    for week, summary in zip(grid.weeks, grid.week_summaries()):
        cells = []
        for slot in week:
            if slot is None:
                cells.append(f"{'':>10}")
            elif slot.has_trades:
                cells.append(f"{slot.day:02d} {format_currency(slot.pnl, 0, signed=True):>7}")
            else:
                cells.append(f"{slot.day:>10}")
        weekly = (
            f"{format_currency(summary.pnl, 0, signed=True)} "
            f"({summary.active_days}d, {summary.count}t)"
            if summary.has_activity else "-"
        )
        print(f"  {''.join(cells)}  |  {weekly}")
    print()


def print_yearly(trades: list) -> None:
    years = bucket_by_year(trades)
    if not years:
        return
    print("  " + f"{'Year':<6}" + "".join(f"{m:>9}" for m in MONTH_LABELS) + f"{'Total':>12}")
    for year in sorted(years, reverse=True):
        months = bucket_by_month(trades, year)
        cells = [
            f"{format_currency(months[i].pnl, 0):>9}" if i in months else f"{'-':>9}"
            for i in range(12)
        ]
        total = years[year]
        print(f"  {year:<6}{''.join(cells)}{format_currency(total.pnl, 0):>12}"
              f"  ({total.winners}W - {total.losers}L)")
    print()


def main() -> None:
    parser = argparse.ArgumentParser(description="Trade journal performance report")
    parser.add_argument("--source", default="local", choices=["local", "notion"], help="Where to read trades from")
    parser.add_argument("--cache", default=Config.CACHE_PATH, help="Local Parquet cache path")
    parser.add_argument("--month", type=parse_month, default=None, help="Calendar month to show (YYYY-MM)")
    parser.add_argument("--first-weekday", type=int, default=None, help="Override FIRST_WEEKDAY (0=Mon ... 6=Sun)")
    parser.add_argument("--coach", action="store_true", help="Append the AI coach feedback")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    # Apply CLI overrides
    if args.first_weekday is not None:
        Config.FIRST_WEEKDAY = args.first_weekday

    trades = load_trades(args.source, PROJECT_ROOT / args.cache)
    print(f"  Loaded {len(trades)} trades ({args.source})\n")

    print_stats(trades)
    print_calendar(trades, args.month or MonthCursor.today())
    print_yearly(trades)

    if args.coach:
        print("=" * 60)
        print("  COACH")
        print("=" * 60)
        print(analyze_trade_journal(trades))


if __name__ == "__main__":
    main()
