from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote_plus

import feedparser
import httpx

from src.providers.errors import ProviderNotConfigured, ProviderRequestError

logger = logging.getLogger(__name__)


class NewsApiClient:
    def __init__(self, api_key: Optional[str], timeout: float = 30.0):
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = "https://newsapi.org/v2"

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise ProviderNotConfigured("News API key not configured")
        params = dict(params, apiKey=self.api_key)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.get(f"{self.base_url}/{path}", params=params)
        try:
            data = r.json()
        except ValueError:
            data = {}
        if data.get("status") != "ok":
            raise ProviderRequestError(data.get("message") or "Failed to fetch news")
        logger.info("Got %d articles from NewsAPI %s", len(data.get("articles") or []), path)
        return data

    async def top_headlines(self, category: str = "business", page_size: int = 50) -> Dict[str, Any]:
        """US top headlines for a NewsAPI category."""
        return await self._get(
            "top-headlines",
            {"category": category, "country": "us", "pageSize": page_size},
        )

    async def everything(self, q: str, page_size: int = 20) -> Dict[str, Any]:
        """Full-text search, newest first."""
        return await self._get(
            "everything",
            {"q": q, "language": "en", "sortBy": "publishedAt", "pageSize": page_size},
        )


class GoogleNewsClient:
    """Keyless fallback: Google News RSS search mapped to NewsAPI's article shape."""

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    def feed_url(self, query: str) -> str:
        return f"https://news.google.com/rss/search?q={quote_plus(query)}&hl=en-US&gl=US&ceid=US:en"

    @staticmethod
    def parse(text: str, limit: int = 20) -> List[Dict[str, Any]]:
        feed = feedparser.parse(text)
        articles = []
        for entry in feed.entries[:limit]:
            articles.append({
                "title": entry.get("title", ""),
                "description": entry.get("summary", ""),
                "url": entry.get("link", ""),
                "publishedAt": entry.get("published", ""),
                "source": {"name": "Google News"},
            })
        return articles

    async def search(self, query: str, limit: int = 20) -> List[Dict[str, Any]]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.get(self.feed_url(query))
        if r.status_code >= 400:
            raise ProviderRequestError.from_upstream(
                f"Google News RSS error ({r.status_code})", r.status_code
            )
        articles = self.parse(r.text, limit)
        logger.info("Got %d articles from Google News RSS for %r", len(articles), query)
        return articles


async def fetch_news(
    queries: List[str],
    api_key: Optional[str],
    timeout: float = 30.0,
    page_size: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Business headlines when no queries are given, otherwise one search per query, concatenated
    in query order. Falls back to Google News RSS when no NewsAPI key is configured.
    """
    articles: List[Dict[str, Any]] = []
    if api_key:
        news = NewsApiClient(api_key, timeout=timeout)
        if not queries:
            data = await news.top_headlines("business", page_size or 50)
            return data.get("articles") or []
        for q in queries:
            data = await news.everything(q, page_size or 20)
            articles.extend(data.get("articles") or [])
        return articles

    logger.info("NEWS_API_KEY not configured, using Google News RSS")
    rss = GoogleNewsClient(timeout=timeout)
    for q in queries or ["business"]:
        articles.extend(await rss.search(q, page_size or 20))
    return articles
