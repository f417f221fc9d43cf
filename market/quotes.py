"""Stock quotes: parsing chart API results and generating mock quotes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np


@dataclass(frozen=True)
class StockQuote:
    symbol: str
    name: str
    price: float
    change: float
    change_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
        }


@dataclass(frozen=True)
class StockDetail:
    symbol: str
    name: str
    price: float
    change: float
    change_percent: float
    high: float
    low: float
    open: float
    volume: int
    previous_close: float
    market_cap: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
            "high": self.high,
            "low": self.low,
            "open": self.open,
            "volume": self.volume,
            "previousClose": self.previous_close,
        }
        if self.market_cap is not None:
            d["marketCap"] = self.market_cap
        return d


def display_name(symbol: str, names: Dict[str, str]) -> str:
    return names.get(symbol) or f"{symbol} Inc."


def parse_quotes(results: List[Dict[str, Any]], symbols: List[str]) -> List[StockQuote]:
    """Build quotes from chart results, skipping entries without both prices."""
    quotes: List[StockQuote] = []
    for i, result in enumerate(results):
        meta = result.get("meta") or {}
        symbol = meta.get("symbol") or (symbols[i] if i < len(symbols) else None)
        price = meta.get("regularMarketPrice")
        prev_close = meta.get("previousClose")
        if not symbol or not price or not prev_close:
            continue
        change = price - prev_close
        quotes.append(
            StockQuote(
                symbol=symbol,
                name=meta.get("longName") or symbol,
                price=round(float(price), 2),
                change=round(float(change), 2),
                change_percent=round(float(change / prev_close * 100), 2),
            )
        )
    return quotes


def parse_detail(results: List[Dict[str, Any]], symbol: str) -> Optional[StockDetail]:
    """Build a detail record from the first chart result, or None if there is none."""
    if not results:
        return None
    meta = results[0].get("meta")
    if not meta:
        return None

    price = float(meta.get("regularMarketPrice") or meta.get("previousClose") or 0)
    prev_close = float(meta.get("previousClose") or price)
    change = price - prev_close
    change_pct = change / prev_close * 100 if prev_close > 0 else 0.0
    fallback = meta.get("previousClose") or 0
    market_cap = meta.get("marketCap")

    return StockDetail(
        symbol=meta.get("symbol") or symbol,
        name=meta.get("longName") or meta.get("shortName") or symbol,
        price=round(price, 2),
        change=round(change, 2),
        change_percent=round(change_pct, 2),
        high=round(float(meta.get("regularMarketDayHigh") or fallback), 2),
        low=round(float(meta.get("regularMarketDayLow") or fallback), 2),
        open=round(float(meta.get("regularMarketOpen") or fallback), 2),
        volume=int(meta.get("regularMarketVolume") or 0),
        previous_close=round(prev_close, 2),
        market_cap=float(round(market_cap)) if market_cap else None,
    )


def _base_price(rng: np.random.Generator) -> float:
    return float(rng.random() * 500 + 50)


def mock_quotes(symbols: List[str], names: Dict[str, str], rng: np.random.Generator, limit: int = 10) -> List[StockQuote]:
    quotes = []
    for symbol in symbols[:limit]:
        base = _base_price(rng)
        change = float((rng.random() - 0.5) * 20)
        quotes.append(
            StockQuote(
                symbol=symbol,
                name=display_name(symbol, names),
                price=round(base, 2),
                change=round(change, 2),
                change_percent=round(change / base * 100, 2),
            )
        )
    return quotes


def mock_detail(symbol: str, names: Dict[str, str], rng: np.random.Generator) -> StockDetail:
    base = _base_price(rng)
    u = rng.random(5)
    prev_close = base * (0.98 + u[0] * 0.04)
    change = base - prev_close
    return StockDetail(
        symbol=symbol,
        name=display_name(symbol, names),
        price=round(base, 2),
        change=round(change, 2),
        change_percent=round(change / prev_close * 100, 2),
        high=round(base * (1 + u[1] * 0.02), 2),
        low=round(base * (0.98 - u[2] * 0.02), 2),
        open=round(prev_close * (0.99 + u[3] * 0.02), 2),
        volume=int(u[4] * 100_000_000) + 10_000_000,
        previous_close=round(prev_close, 2),
        market_cap=float(int(base * 1_000_000_000)),
    )
