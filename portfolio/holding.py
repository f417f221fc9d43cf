from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict

@dataclass(frozen=True)
class Holding:
    symbol: str  # uppercase ticker
    shares: int  # always >= 1 while held
    average_cost: float  # weighted-average cost basis per share

    @property
    def cost_basis(self) -> float:
        return self.shares * self.average_cost

    def to_dict(self) -> Dict[str, Any]:
        return {"symbol": self.symbol, "shares": self.shares, "averageCost": self.average_cost}
