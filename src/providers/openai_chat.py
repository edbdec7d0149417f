from __future__ import annotations
import logging
from typing import Optional

import httpx

from src.providers.errors import ProviderNotConfigured, ProviderRequestError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAIClient:
    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def generate(self, prompt: str, model: str = DEFAULT_MODEL) -> str:
        """Single-turn chat completion; returns the first choice's text ("" when empty)."""
        if not self.api_key:
            raise ProviderNotConfigured("OpenAI API key not configured")
        payload = {
            "model": model or DEFAULT_MODEL,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.7,
            "max_tokens": 1000,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(f"{self.base_url}/chat/completions", json=payload, headers=headers)
        data = r.json()
        if data.get("error"):
            err = data["error"]
            raise ProviderRequestError(err.get("message") if isinstance(err, dict) else str(err))
        choices = data.get("choices") or []
        if not choices:
            return ""
        return ((choices[0] or {}).get("message") or {}).get("content") or ""
