"""Portfolio ledger.

Average-cost bookkeeping over a ``HoldingStore``:
- buy: create the holding or fold the trade into its weighted-average cost
- sell: decrement shares, dropping the holding when it reaches zero
- reads return immutable ``Holding`` snapshots

Balance checks and symbol normalization are the caller's job (see
``engine.trade_engine``). Operations for one user are serialized by a
per-user re-entrant lock, which callers can also hold via ``user_lock`` to
make a multi-step trade atomic.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from common.logging import get_logger
from portfolio.holding import Holding
from portfolio.store import HoldingStore

logger = get_logger(__name__)


def _check_shares(shares: int) -> None:
    if isinstance(shares, bool) or not isinstance(shares, int) or shares <= 0:
        raise ValueError(f"shares must be a positive integer, got {shares!r}")


class PortfolioLedger:
    """Owns every user's holdings; the only writer of the underlying store."""

    def __init__(self, store: HoldingStore):
        self.store = store
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, user_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.RLock()
            return lock

    @contextmanager
    def user_lock(self, user_id: str) -> Iterator[None]:
        """Hold the user's lock across several ledger calls."""
        with self._lock_for(user_id):
            yield

    def get_portfolio(self, user_id: str) -> List[Holding]:
        with self._lock_for(user_id):
            return self.store.holdings(user_id)

    def get_holding(self, user_id: str, symbol: str) -> Optional[Holding]:
        with self._lock_for(user_id):
            return self.store.get(user_id, symbol)

    def buy(self, user_id: str, symbol: str, shares: int, price: float) -> Holding:
        """Add shares at ``price``, recomputing the weighted-average cost.

        Args:
            user_id: Account id.
            symbol: Uppercase ticker.
            shares: Positive share count.
            price: Positive price per share.

        Returns:
            The holding after the buy.
        """
        if not symbol:
            raise ValueError("symbol is required")
        _check_shares(shares)
        if price <= 0:
            raise ValueError(f"price must be positive, got {price!r}")

        with self._lock_for(user_id):
            existing = self.store.get(user_id, symbol)
            if existing is None:
                holding = Holding(symbol=symbol, shares=shares, average_cost=float(price))
            else:
                total_shares = existing.shares + shares
                total_cost = existing.average_cost * existing.shares + price * shares
                holding = Holding(symbol=symbol, shares=total_shares, average_cost=total_cost / total_shares)
            self.store.put(user_id, holding)

        logger.debug("ledger_buy", user_id=user_id, symbol=symbol, shares=shares, price=price,
                     held=holding.shares, average_cost=holding.average_cost)
        return holding

    def sell(self, user_id: str, symbol: str, shares: int) -> bool:
        """Remove shares; False (and no change) when the user holds too few."""
        _check_shares(shares)

        with self._lock_for(user_id):
            existing = self.store.get(user_id, symbol)
            if existing is None or existing.shares < shares:
                logger.debug("ledger_sell_rejected", user_id=user_id, symbol=symbol, shares=shares,
                             held=existing.shares if existing else 0)
                return False

            remaining = existing.shares - shares
            if remaining == 0:
                self.store.delete(user_id, symbol)
            else:
                self.store.put(user_id, Holding(symbol, remaining, existing.average_cost))

        logger.debug("ledger_sell", user_id=user_id, symbol=symbol, shares=shares, held=remaining)
        return True
