from __future__ import annotations

"""Trade log for recording every journaled trade with its metadata."""

import math
import uuid
from dataclasses import dataclass, field
from enum import Enum

import pandas as pd


TEMP_ID_PREFIX = "temp-"

COLUMNS = [
    "Id", "Date", "Pair", "Direction", "Entry_Price", "Exit_Price",
    "PnL", "Setup", "Notes", "Winner",
]


class Direction(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"

    @classmethod
    def parse(cls, value: object) -> Direction:
        """Map free-form input onto a direction, defaulting to LONG."""
        if isinstance(value, Direction):
            return value
        text = str(value or "").strip().upper()
        return cls.SHORT if text == "SHORT" else cls.LONG


def coerce_pnl(value: object) -> float:
    """Return ``value`` as a float, or 0.0 when missing or non-numeric."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def new_trade_id() -> str:
    """Temporary placeholder id used until the backend assigns one."""
    return f"{TEMP_ID_PREFIX}{uuid.uuid4().hex}"


@dataclass
class TradeRecord:
    """A journaled trade.

    ``pnl`` is entered by the trader and is authoritative: it is never
    recomputed from the entry and exit prices.
    """

    id: str
    date: str  # YYYY-MM-DD
    pair: str
    direction: Direction
    entry_price: float
    exit_price: float
    pnl: float
    setup: str = ""
    notes: str = ""
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.direction = Direction.parse(self.direction)
        self.pnl = coerce_pnl(self.pnl)

    @property
    def is_winner(self) -> bool:
        """Whether the trade was profitable. Break-even is not a win."""
        return self.pnl > 0

    @property
    def is_temporary(self) -> bool:
        return self.id.startswith(TEMP_ID_PREFIX)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "pair": self.pair,
            "direction": self.direction.value,
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "pnl": self.pnl,
            "setup": self.setup,
            "notes": self.notes,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict) -> TradeRecord:
        tags = data.get("tags")
        return cls(
            id=str(data.get("id") or new_trade_id()),
            date=str(data.get("date", "")),
            pair=str(data.get("pair", "")),
            direction=data.get("direction", Direction.LONG),
            entry_price=coerce_pnl(data.get("entry_price")),
            exit_price=coerce_pnl(data.get("exit_price")),
            pnl=data.get("pnl"),
            setup=str(data.get("setup") or ""),
            notes=str(data.get("notes") or ""),
            tags=[str(t) for t in tags] if tags is not None else [],
        )


class TradeLog:
    """Ordered, in-memory collection of trades."""

    def __init__(self, trades: list[TradeRecord] | None = None) -> None:
        self.trades: list[TradeRecord] = list(trades or [])

    def __len__(self) -> int:
        return len(self.trades)

    def __iter__(self):
        return iter(self.trades)

    def add(self, trade: TradeRecord, index: int | None = None) -> None:
        """Record a trade, appending unless ``index`` is given."""
        if index is None:
            self.trades.append(trade)
        else:
            self.trades.insert(index, trade)

    def get(self, trade_id: str) -> TradeRecord | None:
        for t in self.trades:
            if t.id == trade_id:
                return t
        return None

    def index_of(self, trade_id: str) -> int | None:
        for i, t in enumerate(self.trades):
            if t.id == trade_id:
                return i
        return None

    def remove(self, trade_id: str) -> TradeRecord | None:
        """Remove and return the trade with ``trade_id``, if present."""
        idx = self.index_of(trade_id)
        if idx is None:
            return None
        return self.trades.pop(idx)

    def replace_id(self, old_id: str, new_id: str) -> bool:
        trade = self.get(old_id)
        if trade is None:
            return False
        trade.id = new_id
        return True

    def to_dataframe(self) -> pd.DataFrame:
        """Convert all trades to a DataFrame for analysis.

        Returns
        -------
        pd.DataFrame
            One row per trade in log order. An empty log still carries
            the full column set so downstream grouping works unchanged.
        """
        return trades_to_dataframe(self.trades)


def trades_to_dataframe(trades) -> pd.DataFrame:
    """Build the analysis frame for any iterable of trades."""
    records = []
    for t in trades:
        records.append({
            "Id": t.id,
            "Date": t.date,
            "Pair": t.pair,
            "Direction": t.direction.value,
            "Entry_Price": t.entry_price,
            "Exit_Price": t.exit_price,
            "PnL": t.pnl,
            "Setup": t.setup,
            "Notes": t.notes,
            "Winner": t.is_winner,
        })
    if not records:
        df = pd.DataFrame(columns=COLUMNS)
        df["PnL"] = df["PnL"].astype(float)
        df["Winner"] = df["Winner"].astype(bool)
        return df
    df = pd.DataFrame(records, columns=COLUMNS)
    df["PnL"] = pd.to_numeric(df["PnL"], errors="coerce").fillna(0.0).astype(float)
    return df
