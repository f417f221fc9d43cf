"""Market data with mock fallback.

Every read tries the live chart API first. Any failure (network, HTTP status,
unexpected payload) is logged and answered with randomly generated data, so
callers never see a market-data error.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import numpy as np
import requests

from common.logging import get_logger
from market.client import YahooChartClient
from market.history import DEFAULT_RANGE, ChartPoint, mock_history, parse_history, range_days
from market.quotes import StockDetail, StockQuote, mock_detail, mock_quotes, parse_detail, parse_quotes

logger = get_logger(__name__)

# Payload shapes we don't expect surface as these
_PARSE_ERRORS = (KeyError, IndexError, TypeError, ValueError, AttributeError)


class QuoteService:
    """Quotes, details and history for the configured symbol universe."""

    def __init__(
        self,
        symbols: List[str],
        names: Optional[Dict[str, str]] = None,
        client: Optional[YahooChartClient] = None,
        list_size: int = 10,
        seed: Optional[int] = None,
    ):
        if not symbols:
            raise ValueError("Symbol universe is empty")
        self.symbols = [s.upper() for s in symbols]
        self.names = dict(names or {})
        self.client = client
        self.list_size = list_size
        self.rng = np.random.default_rng(seed)

    @classmethod
    def from_config(cls, raw: Dict[str, Any], offline: bool = False, seed: Optional[int] = None) -> "QuoteService":
        return cls(
            symbols=list(raw.get("symbols") or []),
            names=dict(raw.get("names") or {}),
            client=None if offline else YahooChartClient.from_config(raw),
            list_size=int(raw.get("list_size", 10)),
            seed=seed,
        )

    def _fetch(self, symbols: List[str], range_: str) -> List[Dict[str, Any]]:
        if self.client is None:
            return []
        return self.client.chart(symbols, range_)

    def list_quotes(self, count: Optional[int] = None) -> List[StockQuote]:
        """Quotes for a random selection of the universe."""
        count = count or self.list_size
        picked = [str(s) for s in self.rng.permutation(self.symbols)[:count]]
        try:
            quotes = parse_quotes(self._fetch(picked, "1d"), picked)
        except (requests.RequestException, *_PARSE_ERRORS) as e:
            logger.warning("quote_fetch_failed", symbols=picked, error=str(e))
            quotes = []
        if not quotes:
            return mock_quotes(picked, self.names, self.rng)
        return quotes

    def get_detail(self, symbol: str) -> StockDetail:
        symbol = symbol.upper()
        try:
            detail = parse_detail(self._fetch([symbol], "1d"), symbol)
        except (requests.RequestException, *_PARSE_ERRORS) as e:
            logger.warning("detail_fetch_failed", symbol=symbol, error=str(e))
            detail = None
        return detail or mock_detail(symbol, self.names, self.rng)

    def get_history(self, symbol: str, range_: str = DEFAULT_RANGE) -> List[ChartPoint]:
        symbol = symbol.upper()
        try:
            points = parse_history(self._fetch([symbol], range_))
        except (requests.RequestException, *_PARSE_ERRORS) as e:
            logger.warning("history_fetch_failed", symbol=symbol, range=range_, error=str(e))
            points = []
        return points or mock_history(range_days(range_), self.rng)
