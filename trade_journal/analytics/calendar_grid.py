from __future__ import annotations

"""Calendar grid for the monthly P&L view.

Builds the week-major grid of a month (leading offset, one slot per day,
trailing padding to a full week), overlays the per-day buckets, and derives
the weekly totals shown beside each row.
"""

import calendar
from dataclasses import dataclass
from datetime import date

import pandas as pd

from trade_journal.config import Config
from trade_journal.analytics.metrics import DayBucket


DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class CalendarDay:
    """A real day of the month, with its trade aggregate if any."""

    day: int
    date_key: str
    pnl: float = 0.0
    count: int = 0

    @property
    def has_trades(self) -> bool:
        return self.count > 0


@dataclass(frozen=True)
class WeekSummary:
    """Totals over the trading days of one grid row."""

    pnl: float
    count: int
    active_days: int

    @property
    def has_activity(self) -> bool:
        """False for a week with no trades, even though its P&L is 0."""
        return self.count > 0


@dataclass(frozen=True)
class MonthGrid:
    """Week rows of exactly seven slots; ``None`` marks a padding slot."""

    year: int
    month: int
    first_weekday: int
    weeks: list[list[CalendarDay | None]]

    @property
    def leading_blanks(self) -> int:
        return first_weekday_offset(self.year, self.month, self.first_weekday)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def week_summaries(self) -> list[WeekSummary]:
        summaries = []
        for week in self.weeks:
            pnl = 0.0
            count = 0
            active_days = 0
            for slot in week:
                if slot is not None and slot.has_trades:
                    pnl += slot.pnl
                    count += slot.count
                    active_days += 1
            summaries.append(WeekSummary(pnl=pnl, count=count, active_days=active_days))
        return summaries

    def weekday_labels(self) -> list[str]:
        return weekday_labels(self.first_weekday)


def date_key(year: int, month: int, day: int) -> str:
    """The ``YYYY-MM-DD`` key used by the day buckets."""
    return f"{year:04d}-{month:02d}-{day:02d}"


def first_weekday_offset(year: int, month: int, first_weekday: int = Config.FIRST_WEEKDAY) -> int:
    """Number of blank slots before day 1 in a week starting on ``first_weekday``."""
    weekday_of_first = calendar.monthrange(year, month)[0]
    return (weekday_of_first - first_weekday) % DAYS_PER_WEEK


def weekday_labels(first_weekday: int = Config.FIRST_WEEKDAY) -> list[str]:
    """Abbreviated weekday names in grid column order."""
    return [calendar.day_abbr[(first_weekday + i) % DAYS_PER_WEEK] for i in range(DAYS_PER_WEEK)]


def build_month_grid(
    year: int,
    month: int,
    day_buckets: dict[str, DayBucket] | None = None,
    first_weekday: int = Config.FIRST_WEEKDAY,
) -> MonthGrid:
    """Build the calendar grid for one month.

    Parameters
    ----------
    year : int
        Calendar year.
    month : int
        Calendar month, 1-12.
    day_buckets : dict[str, DayBucket] | None
        Output of ``bucket_by_day``. Keys outside the month are ignored.
    first_weekday : int
        Column of the first slot (0=Monday ... 6=Sunday).

    Returns
    -------
    MonthGrid
        ``ceil((offset + days_in_month) / 7)`` rows of seven slots.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    day_buckets = day_buckets or {}
    days_in_month = calendar.monthrange(year, month)[1]
    offset = first_weekday_offset(year, month, first_weekday)

    slots: list[CalendarDay | None] = [None] * offset
    for day in range(1, days_in_month + 1):
        key = date_key(year, month, day)
        bucket = day_buckets.get(key)
        if bucket is None:
            slots.append(CalendarDay(day=day, date_key=key))
        else:
            slots.append(CalendarDay(day=day, date_key=key, pnl=bucket.pnl, count=bucket.count))

    trailing = -len(slots) % DAYS_PER_WEEK
    slots.extend([None] * trailing)

    weeks = [slots[i:i + DAYS_PER_WEEK] for i in range(0, len(slots), DAYS_PER_WEEK)]
    return MonthGrid(year=year, month=month, first_weekday=first_weekday, weeks=weeks)


@dataclass(frozen=True)
class MonthCursor:
    """The month currently shown in the calendar view."""

    year: int
    month: int  # 1-12

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")

    @classmethod
    def today(cls) -> MonthCursor:
        now = date.today()
        return cls(now.year, now.month)

    @classmethod
    def from_period(cls, period: pd.Period) -> MonthCursor:
        return cls(period.year, period.month)

    def to_period(self) -> pd.Period:
        return pd.Period(year=self.year, month=self.month, freq="M")

    def next(self) -> MonthCursor:
        return MonthCursor.from_period(self.to_period() + 1)

    def previous(self) -> MonthCursor:
        return MonthCursor.from_period(self.to_period() - 1)

    def label(self) -> str:
        return self.to_period().strftime("%B %Y")
