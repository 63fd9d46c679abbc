"""Single source of truth for all tunable journal settings."""

import calendar
import os


class Config:
    # === Calendar ===
    FIRST_WEEKDAY = calendar.SUNDAY    # Python convention: 0=Monday ... 6=Sunday

    # === Formatting ===
    CURRENCY_SYMBOL = "€"
    THOUSANDS_SEP = "\u202f"          # narrow no-break space (fr-FR)
    DECIMAL_SEP = ","
    CURRENCY_SEP = "\u00a0"           # no-break space before the symbol
    PF_EXCELLENT = 1.5
    PF_GOOD = 1.0

    # === Local cache ===
    CACHE_PATH = "data/cache/trades.parquet"

    # === Notion ===
    NOTION_API_BASE = "https://api.notion.com/v1"
    NOTION_VERSION = "2022-06-28"
    NOTION_API_KEY = os.environ.get("NOTION_API_KEY", "")
    NOTION_DATABASE_ID = os.environ.get("NOTION_DATABASE_ID", "")
    NOTION_PROXY_URL = os.environ.get("NOTION_PROXY_URL", "")
    NOTION_PAGE_SIZE = 100
    REQUEST_TIMEOUT = 30

    # === AI coach ===
    GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL = "gemini-2.5-flash"
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
    COACH_MAX_TRADES = 50              # Most recent trades sent to the model
    COACH_TEMPERATURE = 0.7
