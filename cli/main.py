"""Demo trading CLI.

Provides commands for:
- serve: Run the HTTP API
- quotes: Show a list of stock quotes
- chart: Show a stock's daily price history
- simulate: Replay a scripted list of trades against a fresh portfolio
"""
from __future__ import annotations

import argparse
from typing import Any, Dict, List, Optional

import pandas as pd

from accounts.directory import AccountDirectory
from common.config_loader import LoadedConfig, load_all, load_yaml
from common.logging import configure_logging
from engine.trade_engine import TradeEngine, TradeError
from market.history import DEFAULT_RANGE, RANGE_DAYS
from market.service import QuoteService
from portfolio.ledger import PortfolioLedger
from portfolio.store import InMemoryHoldingStore
from reporting.summary import portfolio_summary


def load_config(args) -> LoadedConfig:
    """Load configuration and set up logging from it."""
    cfg = load_all(args.app_config, args.accounts, args.market)
    configure_logging(args.log_level or cfg.log_level, json=cfg.log_json)
    return cfg


def cmd_serve(args) -> int:
    """Handle serve command: run the API under uvicorn."""
    import uvicorn

    from api.server import create_app

    cfg = load_config(args)
    server = cfg.app.get("server") or {}
    host = args.host or server.get("host", "127.0.0.1")
    port = args.port or int(server.get("port", 3001))

    uvicorn.run(create_app(cfg), host=host, port=port)
    return 0


def cmd_quotes(args) -> int:
    """Handle quotes command: print a quote table."""
    cfg = load_config(args)
    service = QuoteService.from_config(cfg.market, offline=args.offline, seed=args.seed)

    quotes = service.list_quotes(args.count)
    df = pd.DataFrame([q.to_dict() for q in quotes])

    print(f"Stock Quotes ({len(quotes)})")
    print("=" * 60)
    print(df.to_string(index=False))
    return 0


def cmd_chart(args) -> int:
    """Handle chart command: print daily price history for one symbol."""
    cfg = load_config(args)
    service = QuoteService.from_config(cfg.market, offline=args.offline, seed=args.seed)

    points = service.get_history(args.symbol, args.range)
    df = pd.DataFrame([p.to_dict() for p in points])

    print(f"{args.symbol.upper()} price history ({args.range})")
    print("=" * 40)
    print(df.to_string(index=False))
    if not df.empty:
        print("-" * 40)
        print(f"  Low:    ${df['price'].min():>10,.2f}")
        print(f"  High:   ${df['price'].max():>10,.2f}")
        print(f"  Last:   ${df['price'].iloc[-1]:>10,.2f}")
    return 0


def _describe(trade: Any) -> str:
    if not isinstance(trade, dict):
        return repr(trade)
    return f"{trade.get('action')} {trade.get('quantity')} {trade.get('symbol')}"


def cmd_simulate(args) -> int:
    """Handle simulate command: replay trades from a YAML script."""
    cfg = load_config(args)
    directory = AccountDirectory.from_config(cfg.accounts)

    try:
        script = load_yaml(args.script)
    except FileNotFoundError:
        print(f"Error: Script not found: {args.script}")
        return 1

    if not isinstance(script, dict):
        print(f"Error: Script must be a mapping with a 'trades' list: {args.script}")
        return 1

    user_id = args.user or script.get("user")
    account = directory.get(str(user_id)) if user_id else None
    if account is None:
        print(f"Error: Unknown user: {user_id}")
        return 1

    trades: List[Any] = script.get("trades") or []
    if not isinstance(trades, list):
        print(f"Error: 'trades' must be a list: {args.script}")
        return 1
    last_price: Dict[str, float] = {}

    print(f"Trade Simulation: {account.first_name} {account.last_name} ({account.id})")
    print("=" * 50)
    print(f"Starting cash: ${account.balance:,.2f}")
    print("\nTrades:")

    with InMemoryHoldingStore() as store:
        ledger = PortfolioLedger(store)
        engine = TradeEngine(ledger)

        for i, t in enumerate(trades, start=1):
            try:
                result = engine.execute(account, t)
            except TradeError as e:
                print(f"  {i:>2}. REJECTED {_describe(t)}: {e.message}")
                continue
            last_price[result.symbol] = result.price
            print(f"  {i:>2}. {result}")

        summary = portfolio_summary(account, ledger.get_portfolio(account.id), last_price)

    print("\nPortfolio:")
    if summary["holdings"]:
        for row in summary["holdings"]:
            print(
                f"  {row['symbol']:6} {row['shares']:>6} @ ${row['average_cost']:>10,.2f}"
                f"  value ${row['market_value']:>12,.2f}  P/L ${row['unrealized_pnl']:>10,.2f}"
            )
    else:
        print("  (no holdings)")

    print("\nSummary:")
    print(f"  cash: ${summary['cash']:,.2f}")
    print(f"  market_value: ${summary['market_value']:,.2f}")
    print(f"  unrealized_pnl: ${summary['unrealized_pnl']:,.2f}")
    print(f"  total_value: ${summary['total_value']:,.2f}")
    return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    p = argparse.ArgumentParser(
        prog="cli.main",
        description="Demo trading CLI: quotes, charts and in-memory portfolios",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # Common arguments for all commands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--app-config", default="config/app.yaml", help="Application config file")
    common.add_argument("--accounts", default="config/accounts.yaml", help="Accounts config file")
    common.add_argument("--market", default="config/market.yaml", help="Market data config file")
    common.add_argument("--log-level", default=None, help="Override the configured log level")

    # Market data arguments
    market = argparse.ArgumentParser(add_help=False)
    market.add_argument("--offline", action="store_true", help="Use mock data instead of the quote API")
    market.add_argument("--seed", type=int, default=None, help="Random seed for mock data")

    # Serve command
    serve = sub.add_parser("serve", parents=[common], help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default from config)")
    serve.add_argument("--port", type=int, default=None, help="Port (default from config)")
    serve.set_defaults(func=cmd_serve)

    # Quotes command
    quotes = sub.add_parser("quotes", parents=[common, market], help="Show stock quotes")
    quotes.add_argument("--count", type=int, default=None, help="Number of symbols (default from config)")
    quotes.set_defaults(func=cmd_quotes)

    # Chart command
    chart = sub.add_parser("chart", parents=[common, market], help="Show price history")
    chart.add_argument("symbol", help="Ticker symbol")
    chart.add_argument("--range", choices=list(RANGE_DAYS), default=DEFAULT_RANGE, help="History range")
    chart.set_defaults(func=cmd_chart)

    # Simulate command
    sim = sub.add_parser("simulate", parents=[common], help="Replay scripted trades")
    sim.add_argument("--script", required=True, help="YAML file with a 'trades' list")
    sim.add_argument("--user", default=None, help="Account id (default: script's 'user')")
    sim.set_defaults(func=cmd_simulate)

    args = p.parse_args(argv)
    raise SystemExit(args.func(args))


if __name__ == "__main__":
    main()
