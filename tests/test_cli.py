"""Tests for CLI commands."""
from __future__ import annotations

from pathlib import Path

import pytest

import cli.main as cli_main

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep CLI runs from installing global log handlers on captured streams."""
    monkeypatch.setattr(cli_main, "configure_logging", lambda *a, **k: None)


def run(*argv: str) -> int:
    common = [
        "--app-config", str(CONFIG_DIR / "app.yaml"),
        "--accounts", str(CONFIG_DIR / "accounts.yaml"),
        "--market", str(CONFIG_DIR / "market.yaml"),
    ]
    with pytest.raises(SystemExit) as exc:
        cli_main.main([argv[0], *common, *argv[1:]])
    return exc.value.code


def test_help(capsys):
    with pytest.raises(SystemExit) as exc:
        cli_main.main(["--help"])
    assert exc.value.code == 0

    out = capsys.readouterr().out
    assert "simulate" in out and "quotes" in out


def test_quotes_offline(capsys):
    assert run("quotes", "--offline", "--seed", "1", "--count", "4") == 0

    out = capsys.readouterr().out
    assert "Stock Quotes (4)" in out
    assert "changePercent" in out


def test_chart_offline(capsys):
    assert run("chart", "tsla", "--offline", "--seed", "1", "--range", "5d") == 0

    out = capsys.readouterr().out
    assert "TSLA price history (5d)" in out
    assert "Last:" in out


def test_simulate_example_script(capsys):
    assert run("simulate", "--script", str(CONFIG_DIR / "trades.example.yaml")) == 0

    out = capsys.readouterr().out
    assert "John Doe (user1)" in out
    assert "BUY 5 AAPL" in out
    assert "SELL 15 AAPL" in out
    # AAPL average cost 110, sold at 125.50
    assert "realized P/L $232.50" in out
    assert "REJECTED sell 1 TSLA: Insufficient shares" in out
    assert "MSFT" in out


def test_simulate_user_override(tmp_path, capsys):
    script = tmp_path / "trades.yaml"
    script.write_text(
        "trades:\n"
        "  - {symbol: NVDA, action: buy, quantity: 2, price: 500}\n"
        "  - {symbol: NVDA, action: buy, quantity: 100000, price: 500}\n",
        encoding="utf-8",
    )

    assert run("simulate", "--script", str(script), "--user", "user3") == 0

    out = capsys.readouterr().out
    assert "Alex Johnson (user3)" in out
    assert "Insufficient funds" in out
    assert "NVDA" in out


def test_simulate_unknown_user(tmp_path, capsys):
    script = tmp_path / "trades.yaml"
    script.write_text("trades: []\n", encoding="utf-8")

    assert run("simulate", "--script", str(script), "--user", "nobody") == 1
    assert "Unknown user" in capsys.readouterr().out


def test_simulate_missing_script(tmp_path, capsys):
    assert run("simulate", "--script", str(tmp_path / "missing.yaml")) == 1
    assert "Script not found" in capsys.readouterr().out


def test_simulate_rejects_malformed_trade_entry(tmp_path, capsys):
    script = tmp_path / "trades.yaml"
    script.write_text(
        "user: user1\n"
        "trades:\n"
        "  - just-a-string\n"
        "  - {symbol: AAPL, action: buy, quantity: 2, price: 100}\n",
        encoding="utf-8",
    )

    assert run("simulate", "--script", str(script)) == 0

    out = capsys.readouterr().out
    assert "REJECTED 'just-a-string': Missing required fields" in out
    assert "BUY 2 AAPL" in out


def test_simulate_script_must_be_mapping(tmp_path, capsys):
    script = tmp_path / "trades.yaml"
    script.write_text("- {symbol: AAPL, action: buy, quantity: 1, price: 100}\n", encoding="utf-8")

    assert run("simulate", "--script", str(script), "--user", "user1") == 1
    assert "Script must be a mapping" in capsys.readouterr().out


def test_simulate_trades_must_be_list(tmp_path, capsys):
    script = tmp_path / "trades.yaml"
    script.write_text("user: user1\ntrades: buy AAPL\n", encoding="utf-8")

    assert run("simulate", "--script", str(script)) == 1
    assert "'trades' must be a list" in capsys.readouterr().out
