"""Tests for analytics/equity.py."""

import pandas as pd
import pytest

from trade_journal.analytics.equity import equity_curve, daily_pnl_series
from trade_journal.analytics.metrics import compute_stats
from trade_journal.journal.trade_log import TradeRecord


def _trade(date: str, pnl: float, trade_id: str) -> TradeRecord:
    return TradeRecord(
        id=trade_id, date=date, pair="XAUUSD", direction="LONG",
        entry_price=2000.0, exit_price=2010.0, pnl=pnl,
    )


class TestEquityCurve:
    def test_sorted_by_date_with_running_total(self) -> None:
        trades = [
            _trade("2024-03-03", 30, "c"),
            _trade("2024-03-01", 100, "a"),
            _trade("2024-03-02", -40, "b"),
        ]
        curve = equity_curve(trades)
        assert list(curve.columns) == ["Trade", "Date", "PnL", "Equity"]
        assert list(curve["Date"]) == ["2024-03-01", "2024-03-02", "2024-03-03"]
        assert list(curve["Equity"]) == [100, 60, 90]
        assert list(curve["Trade"]) == [1, 2, 3]

    def test_same_day_trades_keep_input_order(self) -> None:
        trades = [
            _trade("2024-03-02", 5, "late"),
            _trade("2024-03-01", 1, "first"),
            _trade("2024-03-01", 2, "second"),
            _trade("2024-03-01", 3, "third"),
        ]
        curve = equity_curve(trades)
        assert list(curve["PnL"]) == [1, 2, 3, 5]
        assert list(curve["Equity"]) == [1, 3, 6, 11]

    def test_final_value_equals_total_pnl(self) -> None:
        trades = [_trade(f"2024-05-{d:02d}", p, str(d)) for d, p in [(3, 12.5), (1, -7.25), (2, 40)]]
        curve = equity_curve(trades)
        assert len(curve) == len(trades)
        assert curve["Equity"].iloc[-1] == pytest.approx(compute_stats(trades).total_pnl)

    def test_deterministic(self) -> None:
        trades = [_trade("2024-03-02", 5, "a"), _trade("2024-03-01", 1, "b")]
        pd.testing.assert_frame_equal(equity_curve(trades), equity_curve(trades))

    def test_mixed_offsets_and_bad_dates(self) -> None:
        trades = [
            _trade("not-a-date", 3, "bad"),
            _trade("2024-03-02T10:00:00+02:00", 5, "offset"),
            _trade("2024-03-01", 10, "plain"),
        ]
        curve = equity_curve(trades)
        assert list(curve["Date"]) == ["2024-03-01", "2024-03-02T10:00:00+02:00", "not-a-date"]
        assert list(curve["Equity"]) == [10, 15, 18]

    def test_empty(self) -> None:
        curve = equity_curve([])
        assert curve.empty
        assert list(curve.columns) == ["Trade", "Date", "PnL", "Equity"]


class TestDailyPnlSeries:
    def test_sums_per_day_ascending(self) -> None:
        trades = [
            _trade("2024-03-02", 50, "c"),
            _trade("2024-03-01", 100, "a"),
            _trade("2024-03-01", -40, "b"),
        ]
        daily = daily_pnl_series(trades)
        assert daily.name == "Daily_PnL"
        assert list(daily.index) == ["2024-03-01", "2024-03-02"]
        assert list(daily.values) == [60, 50]

    def test_empty(self) -> None:
        daily = daily_pnl_series([])
        assert daily.empty
