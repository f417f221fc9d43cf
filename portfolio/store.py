"""Holding storage.

``HoldingStore`` is the repository boundary behind the portfolio ledger. It
only stores and retrieves holdings; all bookkeeping rules live in
``portfolio.ledger``. ``InMemoryHoldingStore`` keeps everything in process
memory and loses it on ``close()``.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from common.logging import get_logger
from portfolio.holding import Holding

logger = get_logger(__name__)


class StoreClosedError(RuntimeError):
    """Raised when a store is used outside its open/close window."""

    pass


class HoldingStore(ABC):
    """Repository of holdings keyed by (user id, symbol)."""

    @abstractmethod
    def open(self) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...

    @abstractmethod
    def holdings(self, user_id: str) -> List[Holding]:
        """Return the user's holdings in order of first insertion."""

    @abstractmethod
    def get(self, user_id: str, symbol: str) -> Optional[Holding]:
        ...

    @abstractmethod
    def put(self, user_id: str, holding: Holding) -> None:
        """Insert or replace a holding, keeping the position of an existing one."""

    @abstractmethod
    def delete(self, user_id: str, symbol: str) -> None:
        ...

    def __enter__(self) -> "HoldingStore":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class InMemoryHoldingStore(HoldingStore):
    """Process-memory store: user id -> {symbol -> Holding}."""

    def __init__(self) -> None:
        self._data: Optional[Dict[str, Dict[str, Holding]]] = None

    def open(self) -> None:
        if self._data is None:
            self._data = {}
            logger.debug("holding_store_opened")

    def close(self) -> None:
        if self._data is not None:
            users = len(self._data)
            self._data = None
            logger.debug("holding_store_closed", users=users)

    @property
    def is_open(self) -> bool:
        return self._data is not None

    def _users(self) -> Dict[str, Dict[str, Holding]]:
        if self._data is None:
            raise StoreClosedError("Holding store is not open")
        return self._data

    def holdings(self, user_id: str) -> List[Holding]:
        return list(self._users().get(user_id, {}).values())

    def get(self, user_id: str, symbol: str) -> Optional[Holding]:
        return self._users().get(user_id, {}).get(symbol)

    def put(self, user_id: str, holding: Holding) -> None:
        # dict assignment to an existing key keeps its insertion position
        self._users().setdefault(user_id, {})[holding.symbol] = holding

    def delete(self, user_id: str, symbol: str) -> None:
        users = self._users()
        holdings = users.get(user_id)
        if holdings is None:
            return
        holdings.pop(symbol, None)
        if not holdings:
            del users[user_id]
