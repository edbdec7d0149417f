from __future__ import annotations
import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from src.providers.errors import ProviderRequestError

logger = logging.getLogger(__name__)

LINKEDIN_MESSAGE = (
    "LinkedIn API is not publicly available. Click the link to search on LinkedIn "
    "and manually add profiles."
)
YOUTUBE_KEY_MESSAGE = (
    "Add YOUTUBE_API_KEY to your .env file. Get a key at Google Cloud Console -> "
    "APIs & Services -> Credentials, and enable \"YouTube Data API v3\" for the project."
)
REFERRER_HINT = (
    " If the key has HTTP referrer restrictions, set Application restrictions to "
    "\"None\" or \"IP addresses\" in Google Cloud Console."
)


def linkedin_search(q: str) -> Dict[str, Any]:
    """LinkedIn has no public people search; hand back a link to the site search instead."""
    return {
        "results": [
            {
                "id": f"linkedin-search-{int(time.time() * 1000)}",
                "platform": "linkedin",
                "name": q,
                "headline": "Click to search LinkedIn",
                "location": "",
                "searchUrl": f"https://www.linkedin.com/search/results/people/?keywords={quote(q)}",
            }
        ],
        "message": LINKEDIN_MESSAGE,
    }


def _youtube_error_message(data: Any, status_code: int) -> str:
    err = (data or {}).get("error") if isinstance(data, dict) else None
    msg = None
    if isinstance(err, dict):
        msg = err.get("message") or ((err.get("errors") or [{}])[0] or {}).get("message")
    return msg or f"YouTube API error ({status_code})"


class YouTubeClient:
    def __init__(self, api_key: Optional[str], timeout: float = 30.0):
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = "https://www.googleapis.com/youtube/v3/search"

    async def search(self, q: str, max_results: int = 20) -> Dict[str, Any]:
        if not self.api_key:
            # Not an error for the widget: it renders the message and an empty list
            return {"error": "YouTube API key not configured", "message": YOUTUBE_KEY_MESSAGE, "results": []}

        params = {
            "part": "snippet",
            "q": q,
            "maxResults": str(max_results),
            "type": "channel,video",
            "key": self.api_key,
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.get(self.base_url, params=params)
        try:
            data = r.json()
        except ValueError:
            data = {}

        if r.status_code >= 400:
            msg = _youtube_error_message(data, r.status_code)
            if "referrer" in msg or "blocked" in msg or r.status_code == 403:
                msg += REFERRER_HINT
            raise ProviderRequestError(msg, status_code=500 if r.status_code >= 500 else 400)
        if data.get("error"):
            raise ProviderRequestError(_youtube_error_message(data, r.status_code))

        return {"results": self.parse_items(data.get("items"))}

    @staticmethod
    def parse_items(items: Any) -> List[Dict[str, Any]]:
        seen = set()
        results = []
        for item in items if isinstance(items, list) else []:
            ids = (item or {}).get("id") or {}
            snippet = (item or {}).get("snippet")
            rid = ids.get("channelId") or ids.get("videoId")
            if not rid or not snippet or rid in seen:
                continue
            seen.add(rid)
            thumbs = snippet.get("thumbnails") or {}
            results.append({
                "id": rid,
                "platform": "youtube",
                "name": snippet.get("title") or "",
                "channelTitle": snippet.get("channelTitle") or snippet.get("title"),
                "description": snippet.get("description") or "",
                "publishedAt": snippet.get("publishedAt") or "",
                "videoId": ids.get("videoId"),
                "channelId": ids.get("channelId"),
                "thumbnail": (thumbs.get("default") or {}).get("url"),
            })
        return results
