"""Trade execution.

Validates a buy/sell request, applies the cash side to the account balance,
and records the share side in the portfolio ledger. The ledger only does
bookkeeping; funds and share availability are checked here.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from accounts.account import Account
from common.logging import get_logger
from portfolio.holding import Holding
from portfolio.ledger import PortfolioLedger

logger = get_logger(__name__)

ACTIONS = ("buy", "sell")
REQUIRED_FIELDS = ("symbol", "action", "quantity", "price")
# Largest share count that is exact as a float.
MAX_SHARES = 2 ** 53


class TradeError(Exception):
    """A rejected trade; the message is safe to show to the user."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class TradeResult:
    """Outcome of an executed trade."""

    action: str
    symbol: str
    shares: int
    price: float
    total: float
    account: Account
    portfolio: List[Holding] = field(default_factory=list)
    realized_pnl: Optional[float] = None  # sells only

    def __str__(self) -> str:
        s = f"{self.action.upper()} {self.shares} {self.symbol} @ ${self.price:,.2f} (${self.total:,.2f})"
        if self.realized_pnl is not None:
            s += f"  realized P/L ${self.realized_pnl:,.2f}"
        return s


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_quantity(value: Any) -> int:
    """Parse a share count; only positive whole numbers are accepted."""
    if isinstance(value, bool):
        raise TradeError("Invalid quantity")
    try:
        if isinstance(value, str):
            value = value.strip()
            shares = int(value) if value.lstrip("+-").isdigit() else float(value)
        else:
            shares = value
        if isinstance(shares, float):
            if not shares.is_integer():
                raise TradeError("Invalid quantity")
            shares = int(shares)
        if not isinstance(shares, int):
            raise TradeError("Invalid quantity")
    except (TypeError, ValueError, OverflowError):
        raise TradeError("Invalid quantity")
    if shares <= 0 or shares > MAX_SHARES:
        raise TradeError("Invalid quantity")
    return shares


def parse_price(value: Any) -> float:
    if isinstance(value, bool):
        raise TradeError("Invalid price")
    try:
        price = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise TradeError("Invalid price")
    if not math.isfinite(price) or price <= 0:
        raise TradeError("Invalid price")
    return price


class TradeEngine:
    """Runs trades for authenticated accounts against a ledger."""

    def __init__(self, ledger: PortfolioLedger):
        self.ledger = ledger

    def execute(self, account: Account, payload: Mapping[str, Any]) -> TradeResult:
        """Validate and execute one trade.

        Args:
            account: The authenticated account; its balance is updated in place.
            payload: Request fields ``symbol``, ``action``, ``quantity``, ``price``.

        Returns:
            TradeResult with the account and its full portfolio after the trade.

        Raises:
            TradeError: Invalid request, insufficient funds or insufficient shares.
        """
        if not isinstance(payload, Mapping) or any(_is_missing(payload.get(k)) for k in REQUIRED_FIELDS):
            raise TradeError("Missing required fields")

        action = str(payload["action"])
        if action not in ACTIONS:
            raise TradeError('Invalid action. Must be "buy" or "sell"')

        shares = parse_quantity(payload["quantity"])
        price = parse_price(payload["price"])
        symbol = str(payload["symbol"]).strip().upper()
        total = shares * price
        if not math.isfinite(total):
            raise TradeError("Invalid quantity")

        realized: Optional[float] = None
        with self.ledger.user_lock(account.id):
            if action == "buy":
                if account.balance < total:
                    logger.info("trade_rejected", account=account.id, reason="insufficient_funds",
                                symbol=symbol, shares=shares, total=total, balance=account.balance)
                    raise TradeError("Insufficient funds")
                account.balance -= total
                self.ledger.buy(account.id, symbol, shares, price)
            else:
                holding = self.ledger.get_holding(account.id, symbol)
                if holding is None or holding.shares < shares:
                    logger.info("trade_rejected", account=account.id, reason="insufficient_shares",
                                symbol=symbol, shares=shares, held=holding.shares if holding else 0)
                    raise TradeError("Insufficient shares")
                realized = (price - holding.average_cost) * shares
                account.balance += total
                self.ledger.sell(account.id, symbol, shares)
            portfolio = self.ledger.get_portfolio(account.id)

        logger.info("trade_executed", account=account.id, action=action, symbol=symbol,
                    shares=shares, price=price, balance=account.balance)
        return TradeResult(
            action=action,
            symbol=symbol,
            shares=shares,
            price=price,
            total=total,
            account=account,
            portfolio=portfolio,
            realized_pnl=realized,
        )


def result_payload(result: TradeResult) -> Dict[str, Any]:
    """Response body for an executed trade."""
    return {
        "success": True,
        "user": result.account.public_dict(),
        "portfolio": [h.to_dict() for h in result.portfolio],
    }
