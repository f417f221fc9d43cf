"""Daily price history for the per-stock chart."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

# Calendar days of mock history per chart range
RANGE_DAYS: Dict[str, int] = {
    "1d": 1,
    "5d": 5,
    "1mo": 30,
    "3mo": 90,
    "6mo": 180,
    "1y": 365,
}
DEFAULT_RANGE = "1mo"


def range_days(range_: str) -> int:
    return RANGE_DAYS.get(range_, RANGE_DAYS[DEFAULT_RANGE])


@dataclass(frozen=True)
class ChartPoint:
    date: str  # YYYY-MM-DD
    price: float
    volume: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "price": self.price, "volume": self.volume}


def parse_history(results: List[Dict[str, Any]]) -> List[ChartPoint]:
    """Convert a chart result into points, dropping days without a close."""
    if not results:
        return []
    result = results[0]
    timestamps = result.get("timestamp") or []
    if not timestamps:
        return []
    quote = ((result.get("indicators") or {}).get("quote") or [{}])[0] or {}
    closes = quote.get("close") or []
    volumes = quote.get("volume") or []

    dates = pd.to_datetime(pd.Series(timestamps), unit="s", utc=True).dt.strftime("%Y-%m-%d")
    points = []
    for i, date in enumerate(dates):
        price = closes[i] if i < len(closes) else None
        if not price or price <= 0:
            continue
        volume = volumes[i] if i < len(volumes) else None
        points.append(ChartPoint(date=date, price=float(price), volume=int(volume or 0)))
    return points


def mock_history(days: int, rng: np.random.Generator, end: Optional[pd.Timestamp] = None) -> List[ChartPoint]:
    """Random prices within +/-2.5% of a base price, one point per day.

    Produces ``days + 1`` points ending at ``end`` (today by default). Interior
    points are averaged with the mean of their neighbours.
    """
    end = (pd.Timestamp.today() if end is None else pd.Timestamp(end)).normalize()
    dates = pd.date_range(end=end, periods=days + 1, freq="D")
    n = len(dates)

    base = rng.random() * 500 + 50
    raw = base * (1 + (rng.random(n) - 0.5) * 0.05)
    volumes = np.floor(rng.random(n) * 50_000_000).astype(np.int64) + 10_000_000

    prices = np.round(raw, 2)
    smoothed = prices.copy()
    if n > 2:
        smoothed[1:-1] = np.round((prices[1:-1] + (prices[:-2] + prices[2:]) / 2) / 2, 2)

    return [
        ChartPoint(date=d.strftime("%Y-%m-%d"), price=float(p), volume=int(v))
        for d, p, v in zip(dates, smoothed, volumes)
    ]
