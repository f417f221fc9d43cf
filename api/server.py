"""FastAPI application factory."""
from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from accounts.directory import AccountDirectory, AuthError
from api.routes import router
from common.config_loader import LoadedConfig
from common.logging import get_logger
from engine.trade_engine import TradeEngine, TradeError
from market.service import QuoteService
from portfolio.ledger import PortfolioLedger
from portfolio.store import HoldingStore, InMemoryHoldingStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionSettings:
    cookie_name: str = "session"
    remember_days: int = 30
    default_days: int = 1
    secure: bool = False

    @classmethod
    def from_config(cls, raw: Dict[str, Any]) -> "SessionSettings":
        s = raw.get("session") or {}
        return cls(
            cookie_name=str(s.get("cookie_name", "session")),
            remember_days=int(s.get("remember_days", 30)),
            default_days=int(s.get("default_days", 1)),
            secure=bool(s.get("secure", False)),
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the holding store for the life of the server."""
    store: HoldingStore = app.state.store
    store.open()
    logger.info("server_started", accounts=len(app.state.directory.accounts))
    try:
        yield
    finally:
        store.close()
        logger.info("server_stopped")


async def _auth_error(request: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def _trade_error(request: Request, exc: TradeError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("invalid_request", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(status_code=400, content={"message": "Missing required fields"})


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_api_exception", path=request.url.path, method=request.method,
                 error=str(exc), exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "An error occurred"})


def create_app(
    cfg: LoadedConfig,
    *,
    quotes: Optional[QuoteService] = None,
    store: Optional[HoldingStore] = None,
) -> FastAPI:
    """Build the API with its accounts, ledger and market data wired in.

    Args:
        cfg: Loaded configuration.
        quotes: Market data service; built from ``cfg.market`` when omitted.
        store: Holding store; a fresh in-memory store when omitted.
    """
    app = FastAPI(title="Demo trading API", lifespan=lifespan)

    app.state.store = store or InMemoryHoldingStore()
    app.state.directory = AccountDirectory.from_config(cfg.accounts)
    app.state.ledger = PortfolioLedger(app.state.store)
    app.state.engine = TradeEngine(app.state.ledger)
    app.state.quotes = quotes or QuoteService.from_config(cfg.market)
    app.state.session = SessionSettings.from_config(cfg.app)

    origins = ((cfg.app.get("server") or {}).get("cors_origins")) or []
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(AuthError, _auth_error)
    app.add_exception_handler(TradeError, _trade_error)
    app.add_exception_handler(RequestValidationError, _invalid_request)
    app.add_exception_handler(Exception, _unhandled_error)
    app.include_router(router)
    return app
