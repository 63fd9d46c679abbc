#!/usr/bin/env python3
from __future__ import annotations

"""Add or delete a journal trade.

Usage:
    python scripts/log_trade.py add --pair EURUSD --direction LONG --pnl 120 --date 2024-03-01
    python scripts/log_trade.py --source notion delete <trade-id>
"""

import argparse
import sys
import uuid
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from trade_journal.config import Config
from trade_journal.data.local import LocalStore
from trade_journal.data.notion import NotionConfig, NotionStore
from trade_journal.journal.optimistic import optimistic_create, optimistic_delete
from trade_journal.journal.trade_log import TradeLog, TradeRecord


def main() -> None:
    parser = argparse.ArgumentParser(description="Add or delete a journal trade")
    parser.add_argument("--source", default="local", choices=["local", "notion"], help="Backend to write to")
    parser.add_argument("--cache", default=Config.CACHE_PATH, help="Local Parquet cache path")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Log a new trade")
    add.add_argument("--date", default=date.today().isoformat(), help="Trade date (YYYY-MM-DD)")
    add.add_argument("--pair", required=True)
    add.add_argument("--direction", default="LONG", choices=["LONG", "SHORT"])
    add.add_argument("--entry", type=float, default=0.0)
    add.add_argument("--exit", type=float, default=0.0)
    add.add_argument("--pnl", type=float, required=True)
    add.add_argument("--setup", default="")
    add.add_argument("--notes", default="")

    delete = sub.add_parser("delete", help="Delete a trade by id")
    delete.add_argument("trade_id")
    args = parser.parse_args()

    cache = LocalStore(PROJECT_ROOT / args.cache)
    log = TradeLog(cache.list())
    # Local mode writes the cache directly after the in-memory mutation
    store = NotionStore(NotionConfig.from_config()) if args.source == "notion" else None

    if args.command == "add":
        trade = TradeRecord(
            id=uuid.uuid4().hex,
            date=args.date,
            pair=args.pair,
            direction=args.direction,
            entry_price=args.entry,
            exit_price=args.exit,
            pnl=args.pnl,
            setup=args.setup,
            notes=args.notes,
        )
        result = optimistic_create(log, trade, store)
    else:
        result = optimistic_delete(log, args.trade_id, store)

    cache.save_all(log)
    if result.ok:
        print(f"  {args.command.upper()} OK: {result.trade_id}")
    else:
        print(f"  {args.command.upper()} FAILED: {result.error}")
        sys.exit(1)


if __name__ == "__main__":
    main()
