"""Abstract base class for trade storage.

The journal depends on this interface, not on concrete implementations.
This allows swapping between the local cache and the Notion workspace
without changing any analytics logic.
"""

from abc import ABC, abstractmethod

from trade_journal.journal.trade_log import TradeRecord


class TradeStore(ABC):
    """Abstract interface for persisting journal trades."""

    @abstractmethod
    def list(self) -> list[TradeRecord]:
        """Fetch every stored trade.

        Returns
        -------
        list[TradeRecord]
            Trades already mapped to the journal's field contract.
            No particular order is guaranteed.
        """

    @abstractmethod
    def create(self, trade: TradeRecord) -> str:
        """Persist a new trade.

        Parameters
        ----------
        trade : TradeRecord
            The trade to store. Its id may be a temporary placeholder.

        Returns
        -------
        str
            The id assigned by the backend.
        """

    @abstractmethod
    def delete(self, trade_id: str) -> None:
        """Remove a trade by id.

        Parameters
        ----------
        trade_id : str
            Backend id of the trade.
        """
