"""Smoke tests for module imports and configuration."""
from __future__ import annotations

from pathlib import Path

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


def test_imports():
    """All main modules should be importable."""
    import cli.main
    import common.config_loader
    import common.logging
    import accounts.account
    import accounts.directory
    import portfolio.holding
    import portfolio.store
    import portfolio.ledger
    import engine.trade_engine
    import market.client
    import market.quotes
    import market.history
    import market.service
    import reporting.summary
    import api.dependencies
    import api.routes
    import api.server


def test_config_loader():
    """Config loader should read the shipped config files."""
    from common.config_loader import load_all

    cfg = load_all(CONFIG_DIR / "app.yaml", CONFIG_DIR / "accounts.yaml", CONFIG_DIR / "market.yaml")

    assert len(cfg.accounts["accounts"]) == 3
    assert len(cfg.market["symbols"]) == 27
    assert cfg.log_level == "INFO"
    assert cfg.log_json is False


def test_configure_logging_is_idempotent(monkeypatch):
    import common.logging as log

    calls = []
    monkeypatch.setattr(log, "_configured", True)
    monkeypatch.setattr(log.structlog, "configure", lambda **kw: calls.append(kw))

    log.configure_logging("DEBUG")

    assert calls == []
