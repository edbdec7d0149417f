from __future__ import annotations
from typing import Any, Dict, Optional


class ProviderError(Exception):
    """Failure talking to a third-party API; status_code is what our route answers with."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.hint = hint

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"error": self.message}
        if self.hint:
            out["message"] = self.hint
        return out


class ProviderNotConfigured(ProviderError):
    status_code = 500


class ProviderRequestError(ProviderError):
    status_code = 400

    @classmethod
    def from_upstream(cls, message: str, upstream_status: int) -> "ProviderRequestError":
        return cls(message, status_code=502 if upstream_status >= 500 else 400)


class RateLimited(ProviderError):
    status_code = 429


class NotFound(ProviderError):
    status_code = 404
