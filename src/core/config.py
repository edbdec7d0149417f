from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

# Load .env once at import; real environment variables take precedence
load_dotenv(find_dotenv(usecwd=True))

DEFAULT_RESEND_FROM = "Stock Tracker Digest <onboarding@resend.dev>"


def _get_env_var(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name)
    if val is None:
        return default
    val = val.strip()
    return val or default


def _get_float(name: str, default: float) -> float:
    raw = _get_env_var(name)
    try:
        return float(raw) if raw is not None else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    news_api_key: Optional[str] = None
    alpha_vantage_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    youtube_api_key: Optional[str] = None
    resend_api_key: Optional[str] = None
    resend_from: str = DEFAULT_RESEND_FROM
    http_timeout: float = 30.0
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Read settings from the environment on every call so key changes apply without a restart."""
    return Settings(
        news_api_key=_get_env_var("NEWS_API_KEY"),
        alpha_vantage_key=_get_env_var("ALPHA_VANTAGE_KEY"),
        openai_api_key=_get_env_var("OPENAI_API_KEY"),
        openai_base_url=_get_env_var("OPENAI_BASE_URL", "https://api.openai.com/v1"),
        openai_model=_get_env_var("OPENAI_MODEL", "gpt-4o-mini"),
        youtube_api_key=_get_env_var("YOUTUBE_API_KEY"),
        resend_api_key=_get_env_var("RESEND_API_KEY"),
        resend_from=_get_env_var("RESEND_FROM", DEFAULT_RESEND_FROM),
        http_timeout=_get_float("HTTP_TIMEOUT", 30.0),
        log_level=(_get_env_var("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
