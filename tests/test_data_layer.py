"""Tests for the data layer modules."""

import json
from datetime import date
from pathlib import Path

import pytest
import requests

from trade_journal.data.local import LocalStore
from trade_journal.data.notion import (
    NotionConfig,
    NotionError,
    NotionStore,
    clean_notion_id,
    page_to_trade,
    trade_to_properties,
)
from trade_journal.journal.trade_log import Direction, TradeRecord, new_trade_id


DB_ID = "0123456789abcdef0123456789abcdef"


def _trade(trade_id: str = "t1", pnl: float = 75.0, tags: list[str] | None = None) -> TradeRecord:
    return TradeRecord(
        id=trade_id, date="2024-03-01", pair="NAS100", direction=Direction.SHORT,
        entry_price=18000.0, exit_price=17950.0, pnl=pnl,
        setup="Reversal", notes="Clean entry", tags=tags or [],
    )


def _page(page_id: str, **props) -> dict:
    return {"id": page_id, "properties": props}


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: dict | None = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text
        self.content = text.encode()

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> dict:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """Replays canned responses and records every request."""

    def __init__(self, responses: list) -> None:
        self.responses = list(responses)
        self.calls: list[tuple] = []

    def request(self, method: str, url: str, **kwargs) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def post(self, url: str, **kwargs) -> FakeResponse:
        return self.request("POST", url, **kwargs)


# -- LocalStore ----------------------------------------------------------------

class TestLocalStore:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        store = LocalStore(tmp_path / "none.parquet")
        assert store.list() == []

    def test_save_and_list_roundtrip(self, tmp_path: Path) -> None:
        store = LocalStore(tmp_path / "cache" / "trades.parquet")
        trades = [_trade("a", tags=["news", "a+"]), _trade("b", pnl=-30.5)]
        store.save_all(trades)
        loaded = store.list()
        assert loaded == trades
        assert loaded[0].tags == ["news", "a+"]

    def test_save_empty(self, tmp_path: Path) -> None:
        store = LocalStore(tmp_path / "trades.parquet")
        store.save_all([])
        assert store.list() == []

    def test_create_assigns_permanent_id(self, tmp_path: Path) -> None:
        store = LocalStore(tmp_path / "trades.parquet")
        trade_id = store.create(_trade(new_trade_id()))
        assert not trade_id.startswith("temp-")
        assert [t.id for t in store.list()] == [trade_id]

    def test_create_keeps_existing_id(self, tmp_path: Path) -> None:
        store = LocalStore(tmp_path / "trades.parquet")
        assert store.create(_trade("keep-me")) == "keep-me"

    def test_delete(self, tmp_path: Path) -> None:
        store = LocalStore(tmp_path / "trades.parquet")
        store.save_all([_trade("a"), _trade("b")])
        store.delete("a")
        assert [t.id for t in store.list()] == ["b"]

    def test_rows_without_id_get_a_stable_id(self, tmp_path: Path) -> None:
        store = LocalStore(tmp_path / "trades.parquet")
        store.save_all([_trade(""), _trade("b")])
        first = store.list()
        assert first[0].id and not first[0].is_temporary
        assert [t.id for t in store.list()] == [t.id for t in first]
        store.delete(first[0].id)
        assert [t.id for t in store.list()] == ["b"]

    def test_delete_unknown_raises(self, tmp_path: Path) -> None:
        store = LocalStore(tmp_path / "trades.parquet")
        store.save_all([_trade("a")])
        with pytest.raises(KeyError, match="No cached trade with id zzz"):
            store.delete("zzz")


# -- Notion adapter ------------------------------------------------------------

class TestPageToTrade:
    def test_full_page(self) -> None:
        page = _page(
            "page-1",
            Pair={"select": {"name": "EURUSD"}},
            Date={"date": {"start": "2024-03-01"}},
            Type={"select": {"name": "SHORT"}},
            Entry={"number": 1.09},
            Exit={"number": 1.08},
            PnL={"number": 150},
            Setup={"rich_text": [{"plain_text": "Breakout"}]},
            Notes={"rich_text": [{"plain_text": "Patient"}]},
        )
        trade = page_to_trade(page)
        assert trade.id == "page-1"
        assert trade.pair == "EURUSD"
        assert trade.direction is Direction.SHORT
        assert trade.pnl == 150
        assert trade.setup == "Breakout"
        assert trade.notes == "Patient"

    def test_pair_falls_back_to_title(self) -> None:
        page = _page("p", Pair={"title": [{"plain_text": "GBPJPY"}]}, Date={"date": {"start": "2024-01-02"}})
        assert page_to_trade(page).pair == "GBPJPY"

    def test_missing_properties_use_defaults(self) -> None:
        trade = page_to_trade(_page("p"))
        assert trade.pair == "UNKNOWN"
        assert trade.direction is Direction.LONG
        assert trade.pnl == 0
        assert trade.entry_price == 0
        assert trade.setup == ""
        assert trade.date == date.today().isoformat()

    def test_empty_number_and_datetime(self) -> None:
        page = _page("p", PnL={"number": None}, Date={"date": {"start": "2024-03-01T09:30:00.000+01:00"}})
        trade = page_to_trade(page)
        assert trade.pnl == 0
        assert trade.date == "2024-03-01"

    def test_properties_round_trip(self) -> None:
        trade = _trade()
        props = trade_to_properties(trade)
        assert props["PnL"] == {"number": 75.0}
        # Notion echoes rich text back with plain_text
        props["Setup"] = {"rich_text": [{"plain_text": trade.setup}]}
        props["Notes"] = {"rich_text": [{"plain_text": trade.notes}]}
        assert page_to_trade(_page("t1", **props)) == trade


class TestNotionConfig:
    def test_clean_id_from_url(self) -> None:
        url = f"https://www.notion.so/My-Journal-{DB_ID}?v=abc"
        assert clean_notion_id(url) == DB_ID

    def test_strips_whitespace(self) -> None:
        cfg = NotionConfig(api_key="  secret_x \n", database_id=f" {DB_ID} ")
        assert cfg.api_key == "secret_x"
        assert cfg.database_id == DB_ID
        assert cfg.is_configured


# -- NotionStore ---------------------------------------------------------------

class TestNotionStore:
    def _store(self, responses: list, **kwargs) -> tuple[NotionStore, FakeSession]:
        session = FakeSession(responses)
        store = NotionStore(NotionConfig(api_key="secret", database_id=DB_ID, **kwargs), session=session)
        return store, session

    def test_list_follows_pagination(self) -> None:
        first = {"results": [_page("p1", PnL={"number": 10})], "has_more": True, "next_cursor": "c2"}
        second = {"results": [_page("p2", PnL={"number": -5})], "has_more": False, "next_cursor": None}
        store, session = self._store([FakeResponse(payload=first), FakeResponse(payload=second)])
        trades = store.list()
        assert [t.id for t in trades] == ["p1", "p2"]
        method, url, kwargs = session.calls[1]
        assert method == "POST"
        assert url.endswith(f"/databases/{DB_ID}/query")
        assert kwargs["json"]["start_cursor"] == "c2"
        assert kwargs["headers"]["Authorization"] == "Bearer secret"

    def test_create_returns_page_id(self) -> None:
        store, session = self._store([FakeResponse(payload={"id": "new-page"})])
        assert store.create(_trade()) == "new-page"
        _, url, kwargs = session.calls[0]
        assert url.endswith("/pages")
        assert kwargs["json"]["parent"] == {"database_id": DB_ID}

    def test_delete_archives_page(self) -> None:
        store, session = self._store([FakeResponse(payload={"id": "p1", "archived": True})])
        store.delete("p1")
        method, url, kwargs = session.calls[0]
        assert method == "PATCH"
        assert url.endswith("/pages/p1")
        assert kwargs["json"] == {"archived": True}

    def test_404_message(self) -> None:
        store, _ = self._store([FakeResponse(404, {"message": "Could not find database"})])
        with pytest.raises(NotionError, match="Database not found") as exc:
            store.list()
        assert exc.value.status_code == 404

    def test_401_message(self) -> None:
        store, _ = self._store([FakeResponse(401, {"message": "API token is invalid."})])
        with pytest.raises(NotionError, match="Unauthorized"):
            store.check_connection()

    def test_other_error_uses_api_message(self) -> None:
        store, _ = self._store([FakeResponse(400, {"message": "body failed validation"})])
        with pytest.raises(NotionError, match=r"Notion error \(400\): body failed validation"):
            store.create(_trade())

    def test_non_json_error_body(self) -> None:
        store, _ = self._store([FakeResponse(502, text="Bad Gateway")])
        with pytest.raises(NotionError, match="Bad Gateway"):
            store.list()

    def test_non_json_success_body(self) -> None:
        store, _ = self._store([FakeResponse(200, text="<html>proxy splash</html>")])
        with pytest.raises(NotionError, match="Invalid response from Notion") as exc:
            store.list()
        assert exc.value.status_code == 200

    def test_transport_error(self) -> None:
        store, _ = self._store([requests.ConnectionError("offline")])
        with pytest.raises(NotionError, match="Could not reach Notion"):
            store.list()

    def test_proxy_base_url(self) -> None:
        store, session = self._store(
            [FakeResponse(payload={"object": "database"})],
            use_proxy=True, proxy_url="https://proxy.example.com/v1/",
        )
        assert store.check_connection() is True
        assert session.calls[0][1] == f"https://proxy.example.com/v1/databases/{DB_ID}"
