from __future__ import annotations

"""AI trading coach: sends recent trades to Gemini for written feedback.

The coach never raises. An empty journal, a missing key, a failed request
or an empty answer each produce a fixed fallback message instead.
"""

import json
import logging

import requests

from trade_journal.config import Config


logger = logging.getLogger(__name__)

NO_TRADES_MESSAGE = "No trade data available for analysis. Add some trades first."
NO_ANSWER_MESSAGE = "Could not generate the analysis."
ERROR_MESSAGE = "An error occurred during the AI analysis. Check your API key."

SYSTEM_INSTRUCTION = (
    "You are an expert in financial performance analysis and trading psychology."
)

PROMPT_TEMPLATE = """\
Act as a senior professional trading coach (TradeZella / Mike Bellafiore style).
Analyze the following trading data (JSON) and give constructive feedback.

Data:
{data}

Focus on:
1. Psychology (based on the notes and the results).
2. Risk management (size of losses vs gains).
3. Consistency.
4. One actionable recommendation for next week.

Speak directly to the trader in a professional but encouraging tone. Use Markdown formatting.
"""


def summarize_trades(trades, limit: int = Config.COACH_MAX_TRADES) -> list[dict]:
    """The most recent ``limit`` trades, reduced to the fields the coach reads."""
    recent = sorted(trades, key=lambda t: t.date, reverse=True)[:limit]
    return [
        {
            "date": t.date,
            "pair": t.pair,
            "type": t.direction.value,
            "pnl": t.pnl,
            "setup": t.setup,
            "notes": t.notes,
        }
        for t in recent
    ]


def build_prompt(trades, config: Config = Config) -> str:
    summary = summarize_trades(trades, config.COACH_MAX_TRADES)
    return PROMPT_TEMPLATE.format(data=json.dumps(summary, ensure_ascii=False))


def _extract_text(body: dict) -> str:
    candidates = body.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts).strip()


def analyze_trade_journal(
    trades,
    api_key: str | None = None,
    session: requests.Session | None = None,
    config: Config = Config,
) -> str:
    """Ask the model for a coaching summary of the journal.

    Parameters
    ----------
    trades : Iterable[TradeRecord]
        The journal. Only the most recent COACH_MAX_TRADES are sent.
    api_key : str | None
        Gemini API key. Defaults to config.GEMINI_API_KEY.
    session : requests.Session | None
        HTTP session to use. A new one is created when omitted.
    config : Config
        Model name, endpoint, temperature and timeout.

    Returns
    -------
    str
        Markdown feedback, or one of the fallback messages.
    """
    trades = list(trades)
    if not trades:
        return NO_TRADES_MESSAGE

    api_key = api_key if api_key is not None else config.GEMINI_API_KEY
    if not api_key:
        logger.error("Gemini API key is not configured")
        return ERROR_MESSAGE

    session = session or requests.Session()
    url = f"{config.GEMINI_API_BASE}/models/{config.GEMINI_MODEL}:generateContent"
    payload = {
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
        "contents": [{"role": "user", "parts": [{"text": build_prompt(trades, config)}]}],
        "generationConfig": {"temperature": config.COACH_TEMPERATURE},
    }
    try:
        resp = session.post(
            url,
            headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
            json=payload,
            timeout=config.REQUEST_TIMEOUT,
        )
        resp.raise_for_status()
        text = _extract_text(resp.json())
    except (requests.RequestException, ValueError, AttributeError, TypeError) as e:
        logger.error(f"Gemini request failed: {e}")
        return ERROR_MESSAGE

    return text or NO_ANSWER_MESSAGE
