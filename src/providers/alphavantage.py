from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

from src.providers.errors import NotFound, ProviderNotConfigured, ProviderRequestError, RateLimited

logger = logging.getLogger(__name__)


def _num(val: Any) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return 0.0


class AlphaVantageClient:
    def __init__(self, api_key: Optional[str], timeout: float = 30.0):
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = "https://www.alphavantage.co/query"

    async def _query(self, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise ProviderNotConfigured("Alpha Vantage API key not configured")
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.get(self.base_url, params=dict(params, apikey=self.api_key))
        data = r.json()
        if data.get("Error Message"):
            raise ProviderRequestError(data["Error Message"])
        if data.get("Note"):
            logger.warning("Alpha Vantage rate limit hit: %s", data["Note"])
            raise RateLimited("API rate limit exceeded. Please try again later.")
        return data

    async def search(self, query: str) -> List[Dict[str, Any]]:
        data = await self._query({"function": "SYMBOL_SEARCH", "keywords": query})
        return [
            {
                "symbol": m.get("1. symbol"),
                "name": m.get("2. name"),
                "type": m.get("3. type"),
                "region": m.get("4. region"),
                "currency": m.get("8. currency"),
            }
            for m in data.get("bestMatches") or []
        ]

    async def quote(self, symbol: str) -> Dict[str, Any]:
        data = await self._query({"function": "GLOBAL_QUOTE", "symbol": symbol})
        q = data.get("Global Quote") or {}
        if not q.get("05. price"):
            raise NotFound(f"No quote data for {symbol}")
        return {
            "symbol": q.get("01. symbol") or symbol,
            "price": _num(q.get("05. price")),
            "open": _num(q.get("02. open")),
            "high": _num(q.get("03. high")),
            "low": _num(q.get("04. low")),
            "change": _num(q.get("09. change")),
            "changePercent": (q.get("10. change percent") or "0%").strip('"'),
            "volume": str(q.get("06. volume") or "0"),
            "latestTradingDay": q.get("07. latest trading day") or "",
        }
