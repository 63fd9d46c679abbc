from __future__ import annotations

"""Concrete TradeStore that keeps the journal in a Parquet file on disk."""

import logging
import uuid
from pathlib import Path

import pandas as pd
import pyarrow as pa

from trade_journal.data.store import TradeStore
from trade_journal.journal.trade_log import TradeRecord


logger = logging.getLogger(__name__)

CACHE_SCHEMA = pa.schema([
    ("id", pa.string()),
    ("date", pa.string()),
    ("pair", pa.string()),
    ("direction", pa.string()),
    ("entry_price", pa.float64()),
    ("exit_price", pa.float64()),
    ("pnl", pa.float64()),
    ("setup", pa.string()),
    ("notes", pa.string()),
    ("tags", pa.list_(pa.string())),
])


class LocalStore(TradeStore):
    """Stores trades in a local Parquet cache.

    Parameters
    ----------
    path : str | Path
        Parquet file holding the serialized trade collection. It is
        created on the first write; a missing file reads as empty.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def list(self) -> list[TradeRecord]:
        """Load all cached trades.

        Returns
        -------
        list[TradeRecord]
            Trades in the order they were saved. Rows stored without an id
            get a permanent one, written back so later deletes can find them.
        """
        if not self.path.exists():
            return []
        df = pd.read_parquet(self.path)
        trades = []
        missing_ids = 0
        for row in df.to_dict(orient="records"):
            tags = row.get("tags")
            row["tags"] = list(tags) if tags is not None else []
            if not row.get("id"):
                row["id"] = uuid.uuid4().hex
                missing_ids += 1
            trades.append(TradeRecord.from_dict(row))
        if missing_ids:
            logger.info(f"Assigned ids to {missing_ids} cached trade(s) in {self.path}")
            self.save_all(trades)
        return trades

    def save_all(self, trades) -> None:
        """Overwrite the cache with ``trades``."""
        records = [t.to_dict() for t in trades]
        df = pd.DataFrame(records, columns=CACHE_SCHEMA.names)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        df.to_parquet(self.path, index=False, schema=CACHE_SCHEMA)
        logger.debug(f"Saved {len(records)} trades to {self.path}")

    def create(self, trade: TradeRecord) -> str:
        """Append a trade, assigning a permanent id if it has a temporary one."""
        trades = self.list()
        trade_id = uuid.uuid4().hex if trade.is_temporary else trade.id
        stored = TradeRecord.from_dict({**trade.to_dict(), "id": trade_id})
        trades.append(stored)
        self.save_all(trades)
        return trade_id

    def delete(self, trade_id: str) -> None:
        """Remove a trade from the cache.

        Raises
        ------
        KeyError
            If no cached trade has ``trade_id``.
        """
        trades = self.list()
        remaining = [t for t in trades if t.id != trade_id]
        if len(remaining) == len(trades):
            raise KeyError(f"No cached trade with id {trade_id}")
        self.save_all(remaining)
