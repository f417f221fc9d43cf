"""HTTP routes. Response keys follow the browser client's camelCase contract."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query, Request, Response

from accounts.account import Account
from accounts.directory import AccountDirectory
from api.dependencies import (
    current_account,
    get_directory,
    get_ledger,
    get_quote_service,
    get_trade_engine,
)
from common.logging import get_logger
from engine.trade_engine import TradeEngine, result_payload
from market.history import DEFAULT_RANGE
from market.service import QuoteService
from portfolio.ledger import PortfolioLedger

logger = get_logger(__name__)

router = APIRouter(prefix="/api")


@router.post("/login")
def login(
    request: Request,
    response: Response,
    payload: Dict[str, Any] = Body(...),
    directory: AccountDirectory = Depends(get_directory),
):
    account = directory.authenticate(payload.get("email"), payload.get("password"))

    session = request.app.state.session
    days = session.remember_days if payload.get("keepLoggedIn") else session.default_days
    response.set_cookie(
        session.cookie_name,
        account.id,
        max_age=days * 24 * 60 * 60,
        httponly=True,
        secure=session.secure,
        samesite="lax",
        path="/",
    )
    logger.info("login", account=account.id, remember=bool(payload.get("keepLoggedIn")))
    return {"success": True, "user": account.public_dict()}


@router.post("/logout")
def logout(request: Request, response: Response):
    response.delete_cookie(request.app.state.session.cookie_name, path="/")
    return {"success": True, "message": "Logged out successfully"}


@router.get("/user")
def user(account: Account = Depends(current_account)):
    return {"user": account.public_dict()}


@router.get("/portfolio")
def portfolio(
    account: Account = Depends(current_account),
    ledger: PortfolioLedger = Depends(get_ledger),
):
    return {"portfolio": [h.to_dict() for h in ledger.get_portfolio(account.id)]}


@router.post("/trade")
def trade(
    payload: Dict[str, Any] = Body(...),
    account: Account = Depends(current_account),
    engine: TradeEngine = Depends(get_trade_engine),
):
    return result_payload(engine.execute(account, payload))


@router.get("/stocks")
def stocks(quotes: QuoteService = Depends(get_quote_service)):
    return {"stocks": [q.to_dict() for q in quotes.list_quotes()]}


@router.get("/stocks/{symbol}")
def stock_detail(symbol: str, quotes: QuoteService = Depends(get_quote_service)):
    return {"stock": quotes.get_detail(symbol).to_dict()}


@router.get("/stocks/{symbol}/chart")
def stock_chart(
    symbol: str,
    range_: str = Query(DEFAULT_RANGE, alias="range"),
    quotes: QuoteService = Depends(get_quote_service),
):
    return {"data": [p.to_dict() for p in quotes.get_history(symbol, range_)]}
