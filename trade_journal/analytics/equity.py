from __future__ import annotations

"""Equity curve and daily P&L series for charting."""

import pandas as pd

from trade_journal.analytics.metrics import parse_trade_dates
from trade_journal.journal.trade_log import trades_to_dataframe


EQUITY_COLUMNS = ["Trade", "Date", "PnL", "Equity"]


def equity_curve(trades) -> pd.DataFrame:
    """Compute the cumulative P&L after each trade, in date order.

    Parameters
    ----------
    trades : Iterable[TradeRecord]
        Trades in any order.

    Returns
    -------
    pd.DataFrame
        Columns: Trade (1-based sequence), Date, PnL, Equity.
        Trades sharing a date keep their input order (stable sort), so the
        curve is reproducible across recomputation. The last Equity value
        equals the total P&L.
    """
    df = trades_to_dataframe(trades)
    if df.empty:
        return pd.DataFrame(columns=EQUITY_COLUMNS)

    df["_Sort_Key"] = parse_trade_dates(df)
    ordered = df.sort_values("_Sort_Key", kind="stable", na_position="last").reset_index(drop=True)

    curve = pd.DataFrame({
        "Trade": range(1, len(ordered) + 1),
        "Date": ordered["Date"],
        "PnL": ordered["PnL"],
        "Equity": ordered["PnL"].cumsum(),
    })
    return curve


def daily_pnl_series(trades) -> pd.Series:
    """Net P&L per day for the bar chart.

    Returns
    -------
    pd.Series
        Summed P&L indexed by date string, ascending.
    """
    df = trades_to_dataframe(trades)
    if df.empty:
        return pd.Series(dtype=float, name="Daily_PnL")
    daily = df.groupby("Date", sort=True)["PnL"].sum()
    daily.index.name = "Date"
    daily.name = "Daily_PnL"
    return daily
