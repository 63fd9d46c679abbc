from __future__ import annotations

"""Concrete TradeStore backed by a Notion database (REST API).

Notion pages are loosely typed: properties may be missing, empty or of a
different kind than expected after a schema change. ``page_to_trade`` is the
single place where those pages are translated into TradeRecords, with a
named fallback for every field.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterator

import requests

from trade_journal.config import Config
from trade_journal.data.store import TradeStore
from trade_journal.journal.trade_log import Direction, TradeRecord


logger = logging.getLogger(__name__)

NOTION_ID_PATTERN = re.compile(r"([a-f0-9]{32})")
UNKNOWN_PAIR = "UNKNOWN"


class NotionError(RuntimeError):
    """A Notion API call failed. ``status_code`` is None for transport errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def clean_api_key(key: str) -> str:
    return key.strip()


def clean_notion_id(value: str) -> str:
    """Accept either a bare database id or a full notion.so URL."""
    trimmed = value.strip()
    if "notion.so" in trimmed:
        match = NOTION_ID_PATTERN.search(trimmed)
        if match:
            return match.group(1)
    return trimmed


@dataclass
class NotionConfig:
    """Credentials and routing for the Notion workspace."""

    api_key: str
    database_id: str
    use_proxy: bool = False
    proxy_url: str = ""

    def __post_init__(self) -> None:
        self.api_key = clean_api_key(self.api_key)
        self.database_id = clean_notion_id(self.database_id)

    @classmethod
    def from_config(cls, config: Config = Config) -> NotionConfig:
        return cls(
            api_key=config.NOTION_API_KEY,
            database_id=config.NOTION_DATABASE_ID,
            use_proxy=bool(config.NOTION_PROXY_URL),
            proxy_url=config.NOTION_PROXY_URL,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.database_id)


# -- Property adapter ----------------------------------------------------------

def _title(prop: dict | None) -> str:
    items = (prop or {}).get("title") or []
    return items[0].get("plain_text", "") if items else ""


def _rich_text(prop: dict | None) -> str:
    items = (prop or {}).get("rich_text") or []
    return items[0].get("plain_text", "") if items else ""


def _number(prop: dict | None) -> float:
    value = (prop or {}).get("number")
    return float(value) if value is not None else 0.0


def _select(prop: dict | None) -> str:
    option = (prop or {}).get("select") or {}
    return option.get("name", "") or ""


def _date(prop: dict | None) -> str:
    value = (prop or {}).get("date") or {}
    start = value.get("start")
    # Date properties may carry a time; the journal groups by calendar date
    return start[:10] if start else date.today().isoformat()


def page_to_trade(page: dict) -> TradeRecord:
    """Translate a Notion database page into a TradeRecord.

    Fallback rules
    --------------
    - Pair: select option, else title text (older schema), else "UNKNOWN".
    - Type: select option, else LONG.
    - Entry / Exit / PnL: number, else 0.
    - Setup / Notes: first rich-text fragment, else "".
    - Date: start date, else today.
    """
    props = page.get("properties") or {}
    pair = _select(props.get("Pair")) or _title(props.get("Pair")) or UNKNOWN_PAIR
    return TradeRecord(
        id=page["id"],
        date=_date(props.get("Date")),
        pair=pair,
        direction=Direction.parse(_select(props.get("Type")) or Direction.LONG),
        entry_price=_number(props.get("Entry")),
        exit_price=_number(props.get("Exit")),
        pnl=_number(props.get("PnL")),
        setup=_rich_text(props.get("Setup")),
        notes=_rich_text(props.get("Notes")),
        tags=[],
    )


def trade_to_properties(trade: TradeRecord) -> dict:
    """Notion page properties for a new trade."""
    return {
        "Pair": {"select": {"name": trade.pair}},
        "Date": {"date": {"start": trade.date}},
        "Type": {"select": {"name": trade.direction.value}},
        "Entry": {"number": trade.entry_price},
        "Exit": {"number": trade.exit_price},
        "PnL": {"number": trade.pnl},
        "Setup": {"rich_text": [{"text": {"content": trade.setup}}]},
        "Notes": {"rich_text": [{"text": {"content": trade.notes}}]},
    }


# -- Store ---------------------------------------------------------------------

class NotionStore(TradeStore):
    """Reads and writes journal trades in a Notion database.

    Parameters
    ----------
    notion_config : NotionConfig
        Credentials, database id and optional proxy.
    session : requests.Session | None
        HTTP session to use. A new one is created when omitted.
    config : Config
        Timeouts, API version and page size.
    """

    def __init__(
        self,
        notion_config: NotionConfig,
        session: requests.Session | None = None,
        config: Config = Config,
    ) -> None:
        self.notion_config = notion_config
        self.session = session or requests.Session()
        self.config = config

    @property
    def base_url(self) -> str:
        if self.notion_config.use_proxy and self.notion_config.proxy_url:
            return self.notion_config.proxy_url.rstrip("/")
        return self.config.NOTION_API_BASE

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.notion_config.api_key}",
            "Notion-Version": self.config.NOTION_VERSION,
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, payload: dict | None = None) -> dict:
        """Send one API call and return the decoded JSON body.

        Raises
        ------
        NotionError
            On transport failure or any non-2xx response.
        """
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(
                method, url, headers=self.headers, json=payload,
                timeout=self.config.REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error(f"Notion {method} {path} failed: {e}")
            raise NotionError(f"Could not reach Notion: {e}") from e

        if not resp.ok:
            raise _error_from_response(resp)
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            logger.error(f"Notion {method} {path} returned a non-JSON body")
            raise NotionError(f"Invalid response from Notion: {e}", status_code=resp.status_code) from e

    def iter_pages(self) -> Iterator[list[TradeRecord]]:
        """Yield trades one API result page at a time, newest first."""
        payload: dict = {
            "sorts": [{"property": "Date", "direction": "descending"}],
            "page_size": self.config.NOTION_PAGE_SIZE,
        }
        path = f"/databases/{self.notion_config.database_id}/query"
        while True:
            data = self._request("POST", path, payload)
            yield [page_to_trade(page) for page in data.get("results", [])]
            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break
            payload = {**payload, "start_cursor": cursor}

    def list(self) -> list[TradeRecord]:
        trades = []
        for batch in self.iter_pages():
            trades.extend(batch)
        logger.debug(f"Fetched {len(trades)} trades from Notion")
        return trades

    def create(self, trade: TradeRecord) -> str:
        data = self._request("POST", "/pages", {
            "parent": {"database_id": self.notion_config.database_id},
            "properties": trade_to_properties(trade),
        })
        return data["id"]

    def delete(self, trade_id: str) -> None:
        # Notion has no hard delete; archiving removes the page from queries
        self._request("PATCH", f"/pages/{trade_id}", {"archived": True})

    def check_connection(self) -> bool:
        """Fetch the database metadata; raises NotionError if unreachable."""
        self._request("GET", f"/databases/{self.notion_config.database_id}")
        return True


def _error_from_response(resp: requests.Response) -> NotionError:
    """Build a human-readable error from a failed Notion response."""
    message = resp.text
    try:
        message = resp.json().get("message") or message
    except ValueError:
        pass

    if resp.status_code == 404:
        return NotionError(
            "Database not found (404). Is the integration connected to the "
            "Notion page? (Menu '...' > Connections > your integration)",
            status_code=404,
        )
    if resp.status_code == 401:
        return NotionError("Unauthorized (401). Check your API key.", status_code=401)
    return NotionError(f"Notion error ({resp.status_code}): {message}", status_code=resp.status_code)
