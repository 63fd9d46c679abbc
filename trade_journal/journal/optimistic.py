from __future__ import annotations

"""Optimistic create/delete against a TradeStore.

Each mutation is applied to the in-memory TradeLog first, then attempted on
the store. The outcome is returned as a MutationResult instead of raised: on
failure the result carries the error and the inverse local mutation.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable

import requests

from trade_journal.data.notion import NotionError
from trade_journal.data.store import TradeStore
from trade_journal.journal.trade_log import TradeLog, TradeRecord, new_trade_id


logger = logging.getLogger(__name__)

STORE_ERRORS = (NotionError, requests.RequestException, KeyError, OSError)


def _noop() -> None:
    return None


@dataclass
class MutationResult:
    """Outcome of an optimistic mutation."""

    ok: bool
    trade_id: str | None = None
    error: str | None = None
    compensate: Callable[[], None] = field(default=_noop, repr=False)


def optimistic_create(log: TradeLog, trade: TradeRecord, store: TradeStore | None) -> MutationResult:
    """Add a trade locally, then persist it.

    Parameters
    ----------
    log : TradeLog
        The in-memory journal. The trade is inserted at the front.
    trade : TradeRecord
        The new trade. It is stored under a temporary id until the store
        confirms the write.
    store : TradeStore | None
        Backend to write to. None means local-only mode.

    Returns
    -------
    MutationResult
        On success ``trade_id`` is the backend id. On failure the trade is
        kept locally under its temporary id; ``compensate`` removes it.
    """
    temp = replace(trade, id=new_trade_id())
    log.add(temp, index=0)

    if store is None:
        log.replace_id(temp.id, trade.id)
        return MutationResult(ok=True, trade_id=trade.id)

    def discard() -> None:
        log.remove(temp.id)

    try:
        backend_id = store.create(trade)
    except STORE_ERRORS as e:
        logger.error(f"Could not store trade {trade.pair} on {trade.date}: {e}")
        return MutationResult(
            ok=False,
            trade_id=temp.id,
            error=f"Trade kept locally only. {e}",
            compensate=discard,
        )

    log.replace_id(temp.id, backend_id)
    return MutationResult(ok=True, trade_id=backend_id)


def optimistic_delete(log: TradeLog, trade_id: str, store: TradeStore | None) -> MutationResult:
    """Remove a trade locally, then from the store.

    Returns
    -------
    MutationResult
        On failure the trade has already been restored at its original
        position; ``compensate`` is the restore action itself.
    """
    index = log.index_of(trade_id)
    if index is None:
        return MutationResult(ok=False, trade_id=trade_id, error=f"No trade with id {trade_id}")
    removed = log.remove(trade_id)

    def restore() -> None:
        if log.get(trade_id) is None:
            log.add(removed, index=index)

    if store is None:
        return MutationResult(ok=True, trade_id=trade_id)

    try:
        store.delete(trade_id)
    except STORE_ERRORS as e:
        logger.error(f"Could not delete trade {trade_id}: {e}")
        restore()
        return MutationResult(ok=False, trade_id=trade_id, error=f"Delete failed: {e}", compensate=restore)

    return MutationResult(ok=True, trade_id=trade_id)
