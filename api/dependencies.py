from __future__ import annotations

from fastapi import Depends, Request

from accounts.account import Account
from accounts.directory import AccountDirectory
from engine.trade_engine import TradeEngine
from market.service import QuoteService
from portfolio.ledger import PortfolioLedger


def get_directory(request: Request) -> AccountDirectory:
    return request.app.state.directory


def get_ledger(request: Request) -> PortfolioLedger:
    return request.app.state.ledger


def get_trade_engine(request: Request) -> TradeEngine:
    return request.app.state.engine


def get_quote_service(request: Request) -> QuoteService:
    return request.app.state.quotes


def current_account(request: Request, directory: AccountDirectory = Depends(get_directory)) -> Account:
    """Account for the request's session cookie; raises AuthError otherwise."""
    cookie_name = request.app.state.session.cookie_name
    return directory.resolve_session(request.cookies.get(cookie_name))
