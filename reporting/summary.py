from __future__ import annotations
from typing import Dict, Any, List, Mapping
from accounts.account import Account
from portfolio.holding import Holding

def portfolio_summary(account: Account, holdings: List[Holding], prices: Mapping[str, float]) -> Dict[str, Any]:
    """Cost basis, market value and unrealized P/L; unpriced holdings are valued at cost."""
    rows = []
    for h in holdings:
        price = prices.get(h.symbol, h.average_cost)
        value = price * h.shares
        rows.append({
            "symbol": h.symbol,
            "shares": h.shares,
            "average_cost": h.average_cost,
            "price": price,
            "cost_basis": h.cost_basis,
            "market_value": value,
            "unrealized_pnl": value - h.cost_basis,
        })
    market_value = sum(r["market_value"] for r in rows)
    cost_basis = sum(r["cost_basis"] for r in rows)
    return {
        "cash": account.balance,
        "cost_basis": cost_basis,
        "market_value": market_value,
        "unrealized_pnl": market_value - cost_basis,
        "total_value": account.balance + market_value,
        "holdings": rows,
    }
