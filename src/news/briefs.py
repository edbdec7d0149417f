from __future__ import annotations
import html
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

DIGEST_HEADLINES = 20
DIGEST_ARTICLES = 10
DIGEST_MOVERS = 5
BRIEF_HEADLINES = 5
EMAIL_ARTICLES = 10

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass
class Digest:
    date: str
    content: str
    articles: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "content": self.content, "articles": list(self.articles)}


def _headline_lines(articles: Sequence[Dict[str, Any]], limit: int) -> str:
    return "\n".join(f"- {a.get('title', '')}" for a in articles[:limit])


def rank_movers(articles: Sequence[Dict[str, Any]], tickers: Sequence[str]) -> List[Tuple[str, int]]:
    """First few watchlist tickers ordered by how many headlines mention them."""
    counts = []
    for ticker in list(tickers)[:DIGEST_MOVERS]:
        t = ticker.lower()
        n = sum(
            1 for a in articles
            if t in f"{a.get('title') or ''} {a.get('description') or ''}".lower()
        )
        counts.append((ticker, n))
    return sorted(counts, key=lambda tc: tc[1], reverse=True)


def digest_prompt(articles: Sequence[Dict[str, Any]], tickers: Sequence[str] = ()) -> str:
    movers = ", ".join(t for t, _ in rank_movers(articles, tickers))
    return (
        "Generate a daily market digest based on these headlines:\n\n"
        f"{_headline_lines(articles, DIGEST_HEADLINES)}\n\n"
        f"Include: 1) Market summary, 2) Key movers ({movers}), 3) Catalysts to watch, "
        "4) Actionable insights. Format as a professional newsletter."
    )


def ticker_brief_prompt(ticker: str, articles: Sequence[Dict[str, Any]]) -> str:
    return (
        f"Provide a brief executive summary for ticker {ticker} based on recent news:\n\n"
        f"{_headline_lines(articles, BRIEF_HEADLINES)}\n\n"
        "Include: 1) Key developments, 2) Why it matters, 3) Main catalysts, 4) Risks. "
        "Keep it concise (3-4 bullets)."
    )


def ticker_forecast_prompt(ticker: str) -> str:
    return (
        f"Based on the news above, provide three scenarios for {ticker}:\n\n"
        "1. Bull Case (optimistic outcome)\n"
        "2. Base Case (most likely)\n"
        "3. Bear Case (pessimistic outcome)\n\n"
        "Each scenario should include a realistic price target and reasoning."
    )


def validate_email(address: str) -> str:
    """Normalize an email address (trimmed, lower-case); raise ValueError when it does not look valid."""
    if not isinstance(address, str):
        raise ValueError("Email address is required")
    trimmed = address.strip().lower()
    if not trimmed:
        raise ValueError("Email address is required")
    if not _EMAIL_RE.match(trimmed):
        raise ValueError("Please enter a valid email address")
    return trimmed


def escape_html(s: str) -> str:
    return html.escape(s or "")


def render_digest_email(digest: Digest) -> Tuple[str, str]:
    """Return (subject, html) for the digest email."""
    subject = f"Your Daily Market Digest – {digest.date}"
    items = "".join(
        f'<li><a href="{escape_html(a.get("url") or "#")}" style="color:#2563eb;">'
        f'{escape_html(a.get("title") or "Article")}</a></li>'
        for a in (digest.articles or [])[:EMAIL_ARTICLES]
    )
    body = f"""
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{escape_html(subject)}</title></head>
<body style="font-family: system-ui, sans-serif; max-width: 640px; margin: 0 auto; padding: 24px; color: #000;">
  <h1 style="font-size: 1.5rem; margin-bottom: 4px;">Daily Market Digest</h1>
  <p style="color: #666; font-size: 0.875rem; margin-bottom: 24px;">{escape_html(digest.date)}</p>
  <div style="white-space: pre-wrap; line-height: 1.6; margin-bottom: 24px;">{escape_html(digest.content)}</div>
  <h2 style="font-size: 1.125rem; margin-bottom: 12px;">Key Articles</h2>
  <ul style="padding-left: 20px; margin: 0 0 24px;">{items}</ul>
  <p style="font-size: 0.75rem; color: #888;">You received this because you requested the digest from Stock Tracker.</p>
</body>
</html>
""".strip()
    return subject, body
