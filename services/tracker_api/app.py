from __future__ import annotations
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.core.config import get_settings
from src.core.log import setup_logging
from src.news.briefs import (
    DIGEST_ARTICLES,
    Digest,
    digest_prompt,
    render_digest_email,
    ticker_brief_prompt,
    ticker_forecast_prompt,
    validate_email,
)
from src.news.catalysts import tag_items
from src.news.clustering import cluster_stories
from src.news.feed import build_clusters, build_sector_queries, parse_articles, prepare_feed
from src.news.taxonomy import DEFAULT_TAXONOMY
from src.providers.alphavantage import AlphaVantageClient
from src.providers.email import ResendClient
from src.providers.errors import ProviderError
from src.providers.news import NewsApiClient, fetch_news
from src.providers.openai_chat import OpenAIClient
from src.providers.social import YouTubeClient, linkedin_search

logger = logging.getLogger(__name__)

app = FastAPI(title="Stock Tracker API")


class GenerateRequest(BaseModel):
    prompt: Optional[str] = None
    model: Optional[str] = None


class ClusterRequest(BaseModel):
    articles: List[Dict[str, Any]] = Field(default_factory=list)
    catalysts: Optional[List[str]] = None
    search: Optional[str] = None


class TagRequest(BaseModel):
    articles: List[Dict[str, Any]] = Field(default_factory=list)


class DigestPayload(BaseModel):
    date: Optional[str] = None
    content: Optional[str] = None
    articles: List[Dict[str, Any]] = Field(default_factory=list)


class DigestEmailRequest(BaseModel):
    email: Optional[Any] = None
    digest: Optional[DigestPayload] = None


class DigestRequest(BaseModel):
    tickers: List[str] = Field(default_factory=list)


def _error(message: str, status_code: int, **extra) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)


def _split(raw: Optional[str]) -> List[str]:
    return [p.strip() for p in (raw or "").split(",") if p.strip()]


def _news_client() -> NewsApiClient:
    s = get_settings()
    return NewsApiClient(s.news_api_key, timeout=s.http_timeout)


def _ai_client() -> OpenAIClient:
    s = get_settings()
    return OpenAIClient(s.openai_api_key, base_url=s.openai_base_url, timeout=s.http_timeout)


def _stocks_client() -> AlphaVantageClient:
    s = get_settings()
    return AlphaVantageClient(s.alpha_vantage_key, timeout=s.http_timeout)


@app.on_event("startup")
async def _configure_logging():
    setup_logging(get_settings().log_level)


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError):
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.get("/api/news")
async def news(category: str = "business", q: Optional[str] = None, pageSize: int = 50):
    try:
        client = _news_client()
        if q:
            return await client.everything(q, pageSize)
        return await client.top_headlines(category, pageSize)
    except ProviderError:
        raise
    except Exception:
        logger.exception("Error fetching news")
        return _error("Failed to fetch news", 500)


@app.get("/api/news/clusters")
async def news_clusters(
    sectors: Optional[str] = None,
    catalysts: Optional[str] = None,
    search: Optional[str] = None,
    pageSize: Optional[int] = None,
):
    s = get_settings()
    queries = build_sector_queries(_split(sectors), DEFAULT_TAXONOMY)
    try:
        raw = await fetch_news(queries, s.news_api_key, timeout=s.http_timeout, page_size=pageSize)
    except ProviderError:
        raise
    except Exception:
        logger.exception("Error loading news for clustering")
        return _error("Failed to load news", 500)

    clusters = build_clusters(raw, DEFAULT_TAXONOMY, catalysts=_split(catalysts) or None, query=search)
    return {
        "total": sum(c.size for c in clusters),
        "clusters": [c.to_dict() for c in clusters],
    }


@app.post("/api/news/cluster")
async def cluster_articles(body: ClusterRequest):
    items = prepare_feed(body.articles, DEFAULT_TAXONOMY, catalysts=body.catalysts, query=body.search)
    clusters = cluster_stories(items)
    return {"total": len(items), "clusters": [c.to_dict() for c in clusters]}


@app.post("/api/news/tag")
async def tag_articles(body: TagRequest):
    tagged = tag_items(parse_articles(body.articles), DEFAULT_TAXONOMY)
    return {"articles": [t.to_dict() for t in tagged]}


@app.get("/api/catalysts")
async def catalysts():
    return {"catalysts": [c.to_dict() for c in DEFAULT_TAXONOMY.catalysts]}


@app.get("/api/sectors")
async def sectors():
    return {"sectors": [s.to_dict() for s in DEFAULT_TAXONOMY.sectors]}


@app.post("/api/ai/generate")
async def ai_generate(body: GenerateRequest):
    if not body.prompt:
        return _error("Prompt is required", 400)
    try:
        text = await _ai_client().generate(body.prompt, body.model or get_settings().openai_model)
        return {"text": text}
    except ProviderError:
        raise
    except Exception:
        logger.exception("Error generating AI content")
        return _error("Failed to generate content", 500)


@app.get("/api/stocks")
async def stock_search(query: Optional[str] = None):
    if not query:
        return _error("Query parameter is required", 400)
    try:
        return {"results": await _stocks_client().search(query)}
    except ProviderError:
        raise
    except Exception:
        logger.exception("Error searching stocks")
        return _error("Failed to search stocks", 500)


@app.get("/api/stocks/quote")
async def stock_quote(symbol: Optional[str] = None):
    symbol = (symbol or "").strip().upper()
    if not symbol:
        return _error("Symbol parameter is required (e.g. ?symbol=AAPL)", 400)
    try:
        return await _stocks_client().quote(symbol)
    except ProviderError:
        raise
    except Exception:
        logger.exception("Error fetching quote for %s", symbol)
        return _error("Failed to fetch quote", 500)


@app.get("/api/social/linkedin")
async def social_linkedin(q: Optional[str] = None):
    if not q:
        return _error("Query parameter is required", 400)
    return linkedin_search(q)


@app.get("/api/social/youtube")
async def social_youtube(q: Optional[str] = None, maxResults: int = 20):
    q = (q or "").strip()
    if not q:
        return _error('Query parameter "q" is required', 400, results=[])
    s = get_settings()
    try:
        return await YouTubeClient(s.youtube_api_key, timeout=s.http_timeout).search(q, maxResults)
    except ProviderError as e:
        return JSONResponse(dict(e.to_dict(), results=[]), status_code=e.status_code)
    except Exception:
        logger.exception("YouTube search error")
        return _error("Request to YouTube failed. Check the server logs.", 500, results=[])


@app.post("/api/email/digest")
async def email_digest(body: DigestEmailRequest):
    if not body.email or not isinstance(body.email, str):
        return _error("Email address is required", 400)
    try:
        to = validate_email(body.email)
    except ValueError as e:
        return _error(str(e), 400)

    d = body.digest
    if d is None or not d.date or not d.content:
        return _error("Digest data is required", 400)

    s = get_settings()
    resend = ResendClient(s.resend_api_key, sender=s.resend_from, timeout=s.http_timeout)
    resend.check_configured()
    subject, html = render_digest_email(Digest(date=d.date, content=d.content, articles=d.articles))
    try:
        return await resend.send(to, subject, html)
    except ProviderError:
        raise
    except Exception:
        logger.exception("Digest email error")
        return _error("Failed to send email", 500)


@app.post("/api/digest")
async def generate_digest(body: DigestRequest):
    date = datetime.now().strftime("%m/%d/%Y")
    try:
        data = await _news_client().top_headlines("business", 50)
        articles = data.get("articles") or []
        text = await _ai_client().generate(digest_prompt(articles, body.tickers), get_settings().openai_model)
        digest = Digest(date=date, content=text or "Unable to generate digest.", articles=articles[:DIGEST_ARTICLES])
    except Exception as e:
        logger.warning("Error generating digest: %s", e)
        digest = Digest(date=date, content="Error generating digest. Please try again.", articles=[])
    return digest.to_dict()


@app.get("/api/ticker/{ticker}/brief")
async def ticker_brief(ticker: str):
    ticker = ticker.strip().upper()
    try:
        data = await _news_client().everything(ticker, 10)
        ticker_news = data.get("articles") or []
        ai = _ai_client()
        model = get_settings().openai_model
        summary = await ai.generate(ticker_brief_prompt(ticker, ticker_news), model)
        forecast = await ai.generate(ticker_forecast_prompt(ticker), model)
        return {
            "ticker": ticker,
            "news": ticker_news,
            "summary": summary or "Unable to generate summary.",
            "forecast": forecast or "Unable to generate forecast.",
        }
    except Exception as e:
        logger.warning("Error generating brief for %s: %s", ticker, e)
        return {
            "ticker": ticker,
            "news": [],
            "summary": "Error generating brief. Please try again.",
            "forecast": "Error generating forecast. Please try again.",
        }


@app.get("/health")
async def health():
    s = get_settings()
    return {
        "status": "healthy",
        "service": "tracker_api",
        "features": {
            "news_api": bool(s.news_api_key),
            "google_news_rss": True,
            "stocks": bool(s.alpha_vantage_key),
            "ai": bool(s.openai_api_key),
            "youtube": bool(s.youtube_api_key),
            "email": bool(s.resend_api_key),
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
