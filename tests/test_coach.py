"""Tests for coach/gemini.py."""

import json

import requests

from trade_journal.coach.gemini import (
    ERROR_MESSAGE,
    NO_ANSWER_MESSAGE,
    NO_TRADES_MESSAGE,
    analyze_trade_journal,
    summarize_trades,
)
from trade_journal.journal.trade_log import TradeRecord


def _trade(day: int, pnl: float = 25.0) -> TradeRecord:
    return TradeRecord(
        id=f"t{day}", date=f"2024-01-{day:02d}", pair="EURUSD", direction="LONG",
        entry_price=1.1, exit_price=1.2, pnl=pnl, setup="Pullback", notes="Calm",
    )


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: dict | None = None) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> dict:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response) -> None:
        self.response = response
        self.calls: list[tuple] = []

    def post(self, url: str, **kwargs) -> FakeResponse:
        self.calls.append((url, kwargs))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _answer(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestSummarizeTrades:
    def test_most_recent_first_and_bounded(self) -> None:
        trades = [_trade(d) for d in range(1, 29)]
        summary = summarize_trades(trades, limit=5)
        assert [s["date"] for s in summary] == [f"2024-01-{d}" for d in (28, 27, 26, 25, 24)]
        assert set(summary[0]) == {"date", "pair", "type", "pnl", "setup", "notes"}


class TestAnalyzeTradeJournal:
    def test_empty_journal_skips_request(self) -> None:
        session = FakeSession(FakeResponse(payload=_answer("unused")))
        assert analyze_trade_journal([], api_key="k", session=session) == NO_TRADES_MESSAGE
        assert session.calls == []

    def test_returns_model_text(self) -> None:
        session = FakeSession(FakeResponse(payload=_answer("## Great week")))
        result = analyze_trade_journal([_trade(1), _trade(2, -10)], api_key="k", session=session)
        assert result == "## Great week"
        url, kwargs = session.calls[0]
        assert url.endswith(":generateContent")
        assert kwargs["headers"]["x-goog-api-key"] == "k"
        prompt = kwargs["json"]["contents"][0]["parts"][0]["text"]
        assert json.dumps("2024-01-02") in prompt

    def test_sends_at_most_fifty_trades(self) -> None:
        session = FakeSession(FakeResponse(payload=_answer("ok")))
        trades = [_trade(d % 28 + 1) for d in range(80)]
        analyze_trade_journal(trades, api_key="k", session=session)
        prompt = session.calls[0][1]["json"]["contents"][0]["parts"][0]["text"]
        assert prompt.count('"pair"') == 50

    def test_empty_answer(self) -> None:
        session = FakeSession(FakeResponse(payload={"candidates": []}))
        assert analyze_trade_journal([_trade(1)], api_key="k", session=session) == NO_ANSWER_MESSAGE

    def test_http_error_returns_fallback(self) -> None:
        session = FakeSession(FakeResponse(403, payload={"error": {"message": "denied"}}))
        assert analyze_trade_journal([_trade(1)], api_key="k", session=session) == ERROR_MESSAGE

    def test_network_error_returns_fallback(self) -> None:
        session = FakeSession(requests.ConnectionError("offline"))
        assert analyze_trade_journal([_trade(1)], api_key="k", session=session) == ERROR_MESSAGE

    def test_missing_key_returns_fallback(self) -> None:
        session = FakeSession(FakeResponse(payload=_answer("unused")))
        assert analyze_trade_journal([_trade(1)], api_key="", session=session) == ERROR_MESSAGE
        assert session.calls == []
