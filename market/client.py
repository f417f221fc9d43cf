"""HTTP client for the Yahoo Finance chart endpoint."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List

import requests

DEFAULT_BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart"


class YahooChartClient:
    """Thin wrapper over ``GET {base_url}/{symbols}?interval=1d&range=...``."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        user_agent: str = "Mozilla/5.0",
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_config(cls, raw: Dict[str, Any]) -> "YahooChartClient":
        api = raw.get("quote_api") or {}
        return cls(
            base_url=api.get("base_url", DEFAULT_BASE_URL),
            timeout=float(api.get("timeout", 10.0)),
            user_agent=api.get("user_agent", "Mozilla/5.0"),
        )

    def chart(self, symbols: Iterable[str], range_: str = "1d") -> List[Dict[str, Any]]:
        """Fetch chart results for one or more symbols.

        Returns:
            The ``chart.result`` list (empty when the API returned none).

        Raises:
            requests.HTTPError: On a 4xx/5xx response.
            requests.RequestException: On connection errors or timeouts.
        """
        url = f"{self.base_url}/{','.join(symbols)}"
        response = self.session.get(url, params={"interval": "1d", "range": range_}, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()
        return ((data or {}).get("chart") or {}).get("result") or []
