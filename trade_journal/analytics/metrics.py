from __future__ import annotations

"""Performance metrics for the trade journal.

Global statistics (net P&L, win rate, profit factor, average win/loss,
best/worst day) and the day/month/year buckets behind every dashboard view.
All functions are pure: they take the trade collection explicitly and
recompute from scratch on every call.
"""

import logging
from dataclasses import dataclass

import pandas as pd

from trade_journal.journal.trade_log import trades_to_dataframe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TradeStats:
    """Summary statistics for a collection of trades."""

    total_trades: int = 0
    total_pnl: float = 0.0
    win_rate: float = 0.0
    profit_factor: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    best_day: float = 0.0
    worst_day: float = 0.0
    win_count: int = 0
    loss_count: int = 0
    gross_profit: float = 0.0
    gross_loss: float = 0.0


@dataclass(frozen=True)
class DayBucket:
    """Summed P&L and trade count for one time bucket."""

    pnl: float
    count: int


@dataclass(frozen=True)
class PeriodSummary:
    """Bucket with the win/non-win split (years, calendar month header)."""

    pnl: float
    count: int
    winners: int
    losers: int


def _frame(trades) -> pd.DataFrame:
    """Normalize any trade iterable (or TradeLog) to the analysis frame."""
    return trades_to_dataframe(trades)


def parse_trade_dates(df: pd.DataFrame) -> pd.Series:
    """Parse the Date column, leaving unparseable values as NaT."""
    # Only the calendar-date part counts; offsets and times are ignored
    parsed = pd.to_datetime(df["Date"].astype(str).str.slice(0, 10), format="%Y-%m-%d", errors="coerce")
    missing = int(parsed.isna().sum())
    if missing:
        logger.debug(f"{missing} trade(s) with unparseable dates excluded from calendar buckets")
    return parsed


def compute_stats(trades) -> TradeStats:
    """Compute the global statistics for a trade collection.

    Parameters
    ----------
    trades : Iterable[TradeRecord]
        Trades in any order. May be empty.

    Returns
    -------
    TradeStats
        All-zero stats for an empty collection. A win is strictly
        ``pnl > 0``; break-even trades count as losses. When there is no
        gross loss the profit factor falls back to the gross profit.
    """
    df = _frame(trades)
    total_trades = len(df)
    if total_trades == 0:
        return TradeStats()

    pnl = df["PnL"]
    winners = pnl[pnl > 0]
    losers = pnl[pnl <= 0]

    total_pnl = float(pnl.sum())
    win_rate = len(winners) / total_trades * 100

    gross_profit = float(winners.sum())
    gross_loss = abs(float(losers.sum()))
    # No losing P&L: report gross profit rather than an infinite ratio
    profit_factor = gross_profit if gross_loss == 0 else gross_profit / gross_loss

    avg_win = gross_profit / len(winners) if len(winners) > 0 else 0.0
    avg_loss = -gross_loss / len(losers) if len(losers) > 0 and gross_loss > 0 else 0.0

    # Best/worst day are bounded by a breakeven day
    daily = df.groupby("Date", sort=True)["PnL"].sum()
    best_day = max(float(daily.max()), 0.0)
    worst_day = min(float(daily.min()), 0.0)

    return TradeStats(
        total_trades=total_trades,
        total_pnl=total_pnl,
        win_rate=win_rate,
        profit_factor=profit_factor,
        avg_win=avg_win,
        avg_loss=avg_loss,
        best_day=best_day,
        worst_day=worst_day,
        win_count=len(winners),
        loss_count=len(losers),
        gross_profit=gross_profit,
        gross_loss=gross_loss,
    )


def bucket_by_day(trades) -> dict[str, DayBucket]:
    """Group trades by exact date string.

    Returns
    -------
    dict[str, DayBucket]
        Keyed by date string, iterated in ascending date order.
    """
    df = _frame(trades)
    if df.empty:
        return {}
    grouped = df.groupby("Date", sort=True)["PnL"].agg(["sum", "count"])
    return {
        str(day): DayBucket(pnl=float(row["sum"]), count=int(row["count"]))
        for day, row in grouped.iterrows()
    }


def bucket_by_month(trades, year: int) -> dict[int, DayBucket]:
    """Monthly P&L within one year.

    Parameters
    ----------
    trades : Iterable[TradeRecord]
        Trades in any order.
    year : int
        Calendar year to keep.

    Returns
    -------
    dict[int, DayBucket]
        Keyed by month index 0-11. Months without trades are absent,
        not zero, so consumers can tell "no activity" from a flat month.
    """
    df = _frame(trades)
    if df.empty:
        return {}
    dates = parse_trade_dates(df)
    mask = dates.dt.year == year
    if not mask.any():
        return {}
    month_index = (dates[mask].dt.month - 1).astype(int)
    grouped = df.loc[mask, "PnL"].groupby(month_index, sort=True).agg(["sum", "count"])
    return {
        int(month): DayBucket(pnl=float(row["sum"]), count=int(row["count"]))
        for month, row in grouped.iterrows()
    }


def bucket_by_year(trades) -> dict[int, PeriodSummary]:
    """Yearly P&L, trade count and win/non-win split for every year present.

    Returns
    -------
    dict[int, PeriodSummary]
        Keyed by year, ascending. Losers include break-even trades.
    """
    df = _frame(trades)
    if df.empty:
        return {}
    dates = parse_trade_dates(df)
    mask = dates.notna()
    if not mask.any():
        return {}
    years = dates[mask].dt.year.astype(int)
    pnl = df.loc[mask, "PnL"]
    grouped = pd.DataFrame({"PnL": pnl, "Winner": pnl > 0}).groupby(years, sort=True).agg(
        pnl=("PnL", "sum"),
        count=("PnL", "count"),
        winners=("Winner", "sum"),
    )
    return {
        int(year): PeriodSummary(
            pnl=float(row["pnl"]),
            count=int(row["count"]),
            winners=int(row["winners"]),
            losers=int(row["count"]) - int(row["winners"]),
        )
        for year, row in grouped.iterrows()
    }


def summarize_month(trades, year: int, month: int) -> PeriodSummary:
    """Totals for one calendar month (``month`` is 1-12)."""
    df = _frame(trades)
    if df.empty:
        return PeriodSummary(pnl=0.0, count=0, winners=0, losers=0)
    dates = parse_trade_dates(df)
    pnl = df.loc[(dates.dt.year == year) & (dates.dt.month == month), "PnL"]
    winners = int((pnl > 0).sum())
    return PeriodSummary(
        pnl=float(pnl.sum()),
        count=len(pnl),
        winners=winners,
        losers=len(pnl) - winners,
    )
