#!/usr/bin/env python3
from __future__ import annotations

"""Pull the Notion trade journal into the local Parquet cache.

Usage:
    NOTION_API_KEY=... NOTION_DATABASE_ID=... python scripts/sync_notion.py
    python scripts/sync_notion.py --check
"""

import argparse
import sys
from pathlib import Path

from tqdm import tqdm

# Add project root to path so we can import our modules
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from trade_journal.config import Config
from trade_journal.data.local import LocalStore
from trade_journal.data.notion import NotionConfig, NotionError, NotionStore


def main() -> None:
    """Download every Notion page and overwrite the local cache."""
    parser = argparse.ArgumentParser(description="Sync Notion trades to the local cache")
    parser.add_argument("--api-key", default=Config.NOTION_API_KEY, help="Notion integration key")
    parser.add_argument("--database", default=Config.NOTION_DATABASE_ID, help="Database id or notion.so URL")
    parser.add_argument("--proxy", default=Config.NOTION_PROXY_URL, help="Optional proxy base URL")
    parser.add_argument("--cache", default=Config.CACHE_PATH, help="Local Parquet cache path")
    parser.add_argument("--check", action="store_true", help="Only test the connection")
    args = parser.parse_args()

    notion_config = NotionConfig(
        api_key=args.api_key,
        database_id=args.database,
        use_proxy=bool(args.proxy),
        proxy_url=args.proxy,
    )
    if not notion_config.is_configured:
        print("  Notion API key and database id are required.")
        sys.exit(1)

    store = NotionStore(notion_config)

    if args.check:
        try:
            store.check_connection()
        except NotionError as e:
            print(f"  Connection FAILED: {e}")
            sys.exit(1)
        print("  Success! Database connected.")
        return

    print("Fetching trades from Notion...")
    trades = []
    try:
        for batch in tqdm(store.iter_pages(), desc="Syncing", unit="page"):
            trades.extend(batch)
    except NotionError as e:
        print(f"  Sync FAILED: {e}")
        sys.exit(1)

    cache = LocalStore(PROJECT_ROOT / args.cache)
    cache.save_all(trades)
    print(f"  Saved {len(trades)} trades to {cache.path}")


if __name__ == "__main__":
    main()
