from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import httpx

from src.core.config import DEFAULT_RESEND_FROM
from src.providers.errors import ProviderNotConfigured, ProviderRequestError

logger = logging.getLogger(__name__)

RESEND_KEY_MESSAGE = (
    "Add RESEND_API_KEY to .env in the project root, then restart the server. "
    "Key from resend.com -> API Keys."
)


class ResendClient:
    def __init__(self, api_key: Optional[str], sender: str = DEFAULT_RESEND_FROM, timeout: float = 30.0):
        self.api_key = api_key
        self.sender = sender or DEFAULT_RESEND_FROM
        self.timeout = timeout
        self.url = "https://api.resend.com/emails"

    def check_configured(self) -> None:
        if not self.api_key:
            raise ProviderNotConfigured("Email is not configured", status_code=501, hint=RESEND_KEY_MESSAGE)

    async def send(self, to: str, subject: str, html: str) -> Dict[str, Any]:
        self.check_configured()
        payload = {"from": self.sender, "to": [to], "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(self.url, json=payload, headers=headers)
        try:
            data = r.json()
        except ValueError:
            data = {}
        if r.status_code >= 400:
            err = data.get("error")
            msg = data.get("message") or (err.get("message") if isinstance(err, dict) else None)
            raise ProviderRequestError.from_upstream(msg or f"Resend API error ({r.status_code})", r.status_code)
        logger.info("Sent digest email id=%s", data.get("id"))
        return {"ok": True, "id": data.get("id")}
