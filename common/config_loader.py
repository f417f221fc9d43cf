from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict
import yaml

def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

@dataclass(frozen=True)
class LoadedConfig:
    app: Dict[str, Any]
    accounts: Dict[str, Any]
    market: Dict[str, Any]

    @property
    def log_level(self) -> str:
        return str((self.app.get("logging") or {}).get("level", "INFO"))

    @property
    def log_json(self) -> bool:
        return bool((self.app.get("logging") or {}).get("json", False))

def load_all(
    app_path: str = "config/app.yaml",
    accounts_path: str = "config/accounts.yaml",
    market_path: str = "config/market.yaml",
) -> LoadedConfig:
    return LoadedConfig(
        app=load_yaml(app_path),
        accounts=load_yaml(accounts_path),
        market=load_yaml(market_path),
    )
