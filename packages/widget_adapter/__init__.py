from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Tuple

import requests

logger = logging.getLogger(__name__)


def _first(body: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Value of the first key that is present and not None."""
    for k in keys:
        if body.get(k) is not None:
            return body[k]
    return default


class WidgetAdapter:
    """
    Maps the host widget's (endpoint, body) calls onto the tracker API routes and returns
    the shapes the widget expects (.articles, .profiles, .items, .results, .text).
    Failures never raise: they come back as an "error" key next to empty results.
    """

    def __init__(self, base_url: str = "", session: Optional[Any] = None, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Tuple[bool, Dict[str, Any], Optional[str]]:
        url = path if path.startswith("http") else f"{self.base_url}{path}"
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except Exception as e:
            logger.warning("Widget request %s %s failed: %s", method, url, e)
            return False, {}, str(e) or "Request failed"
        try:
            data = r.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        if r.status_code >= 400:
            return False, data, data.get("error") or data.get("message") or getattr(r, "reason", None) or f"HTTP {r.status_code}"
        return True, data, None

    def call(self, endpoint: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        b = body or {}

        if endpoint == "/news-top-headlines":
            ok, data, error = self._request(
                "GET", "/api/news",
                params={"category": b.get("category") or "business", "pageSize": b.get("pageSize") or 50},
            )
            if not ok:
                return {"articles": [], "error": error}
            return {"articles": data.get("articles") or []}

        if endpoint == "/news-search":
            ok, data, error = self._request(
                "GET", "/api/news",
                params={"q": b.get("q") or "", "pageSize": b.get("pageSize") or 20},
            )
            if not ok:
                return {"articles": [], "error": error}
            return {"articles": data.get("articles") or []}

        if endpoint == "/generate-text":
            messages = b.get("messages") or []
            prompt = messages[0].get("content") if messages and isinstance(messages[0], dict) else None
            if prompt is None:
                prompt = b.get("prompt") or ""
            ok, data, error = self._request(
                "POST", "/api/ai/generate",
                json={"prompt": prompt, "model": b.get("model") or "gpt-4o-mini"},
            )
            if not ok:
                return {"text": "", "content": "", "error": error}
            text = data.get("text") or ""
            return {"text": text, "content": text}

        if endpoint == "/search-stocks":
            query = _first(b, "query", "term") or ""
            ok, data, error = self._request("GET", "/api/stocks", params={"query": query})
            if not ok:
                return {"results": [], "error": error}
            return {"results": data.get("results") or []}

        if endpoint == "/linkedin-search-profiles":
            q = _first(b, "q", "query", "name") or ""
            ok, data, error = self._request("GET", "/api/social/linkedin", params={"q": q})
            if not ok:
                return {"profiles": [], "error": error}
            profiles = [dict(r, link=r.get("searchUrl") or r.get("link")) for r in data.get("results") or []]
            return {"profiles": profiles}

        if endpoint == "/youtube-search":
            q = _first(b, "q", "query") or ""
            max_results = _first(b, "maxResults", default=20)
            ok, data, error = self._request(
                "GET", "/api/social/youtube", params={"q": q, "maxResults": max_results}
            )
            if not ok:
                return {"items": [], "results": [], "error": error}
            results = data.get("results") or []
            items = [
                dict(
                    r,
                    id={"videoId": r.get("videoId"), "channelId": r.get("channelId")},
                    snippet={
                        "title": r.get("name"),
                        "channelTitle": r.get("channelTitle"),
                        "description": r.get("description"),
                        "publishedAt": r.get("publishedAt"),
                    },
                )
                for r in results
            ]
            return {"items": items, "results": results}

        if endpoint == "/send-email":
            # The widget's own mailer has no backend here
            return {"ok": True}

        return {"error": f"Unknown endpoint: {endpoint}"}
