import httpx
import requests
from fastapi.testclient import TestClient

from packages.widget_adapter import WidgetAdapter
from services.tracker_api.app import app


class FakeResp:
    def __init__(self, payload, status_code=200, reason="OK"):
        self._payload = payload
        self.status_code = status_code
        self.reason = reason

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append((method, url, kwargs))
        resp = self.responses.get(url.split("?")[0])
        if isinstance(resp, Exception):
            raise resp
        return resp


def test_top_headlines_defaults():
    s = FakeSession({"http://api.test/api/news": FakeResp({"articles": [{"title": "A"}]})})
    out = WidgetAdapter("http://api.test/", session=s).call("/news-top-headlines", {})
    assert out == {"articles": [{"title": "A"}]}
    method, url, kwargs = s.calls[0]
    assert method == "GET" and url == "http://api.test/api/news"
    assert kwargs["params"] == {"category": "business", "pageSize": 50}


def test_news_search_error_surfaces_message():
    s = FakeSession({"/api/news": FakeResp({"error": "News API key not configured"}, 500)})
    out = WidgetAdapter(session=s).call("/news-search", {"q": "nvda"})
    assert out == {"articles": [], "error": "News API key not configured"}
    assert s.calls[0][2]["params"] == {"q": "nvda", "pageSize": 20}


def test_generate_text_reads_messages_first():
    s = FakeSession({"/api/ai/generate": FakeResp({"text": "hello"})})
    adapter = WidgetAdapter(session=s)
    out = adapter.call("/generate-text", {"messages": [{"role": "user", "content": "Hi"}], "prompt": "ignored"})
    assert out == {"text": "hello", "content": "hello"}
    assert s.calls[0][2]["json"] == {"prompt": "Hi", "model": "gpt-4o-mini"}

    adapter.call("/generate-text", {"prompt": "P", "model": "gpt-4o"})
    assert s.calls[1][2]["json"] == {"prompt": "P", "model": "gpt-4o"}


def test_generate_text_network_failure():
    s = FakeSession({"/api/ai/generate": requests.ConnectionError("refused")})
    out = WidgetAdapter(session=s).call("/generate-text", {"prompt": "x"})
    assert out == {"text": "", "content": "", "error": "refused"}


def test_search_stocks_accepts_term():
    s = FakeSession({"/api/stocks": FakeResp({"results": [{"symbol": "AAPL"}]})})
    out = WidgetAdapter(session=s).call("/search-stocks", {"term": "apple"})
    assert out == {"results": [{"symbol": "AAPL"}]}
    assert s.calls[0][2]["params"] == {"query": "apple"}


def test_null_query_falls_back_to_alternate_keys():
    s = FakeSession({
        "/api/stocks": FakeResp({"results": []}),
        "/api/social/linkedin": FakeResp({"results": []}),
        "/api/social/youtube": FakeResp({"results": []}),
    })
    adapter = WidgetAdapter(session=s)
    adapter.call("/search-stocks", {"query": None, "term": "msft"})
    adapter.call("/linkedin-search-profiles", {"q": None, "query": None, "name": "Ada"})
    adapter.call("/youtube-search", {"q": None, "query": "rates", "maxResults": None})
    assert s.calls[0][2]["params"] == {"query": "msft"}
    assert s.calls[1][2]["params"] == {"q": "Ada"}
    assert s.calls[2][2]["params"] == {"q": "rates", "maxResults": 20}


def test_linkedin_profiles_get_link():
    s = FakeSession({"/api/social/linkedin": FakeResp({"results": [{"name": "x", "searchUrl": "https://li/x"}]})})
    out = WidgetAdapter(session=s).call("/linkedin-search-profiles", {"name": "x"})
    assert out["profiles"] == [{"name": "x", "searchUrl": "https://li/x", "link": "https://li/x"}]


def test_youtube_items_take_youtube_shape():
    r = {"id": "v1", "name": "Markets", "channelTitle": "TV", "description": "d",
         "publishedAt": "2025", "videoId": "v1", "channelId": None}
    s = FakeSession({"/api/social/youtube": FakeResp({"results": [r]})})
    out = WidgetAdapter(session=s).call("/youtube-search", {"query": "markets"})
    assert out["results"] == [r]
    item = out["items"][0]
    assert item["id"] == {"videoId": "v1", "channelId": None}
    assert item["snippet"]["title"] == "Markets"
    assert s.calls[0][2]["params"] == {"q": "markets", "maxResults": 20}


def test_send_email_and_unknown_endpoint():
    s = FakeSession({})
    adapter = WidgetAdapter(session=s)
    assert adapter.call("/send-email", {"to": "a@b.co"}) == {"ok": True}
    assert adapter.call("/nope") == {"error": "Unknown endpoint: /nope"}
    assert s.calls == []


def test_adapter_against_app(monkeypatch):
    monkeypatch.setenv("NEWS_API_KEY", "k")

    class Resp:
        status_code = 200

        def json(self):
            return {"status": "ok", "articles": [{"title": "Live", "url": "https://n/1"}]}

    async def fake_get(self, url, params=None, **kwargs):
        return Resp()

    monkeypatch.setattr(httpx.AsyncClient, "get", fake_get, raising=True)
    adapter = WidgetAdapter(session=TestClient(app))
    out = adapter.call("/news-top-headlines", {"pageSize": 3})
    assert out["articles"][0]["title"] == "Live"
    li = adapter.call("/linkedin-search-profiles", {"q": "Jane"})
    assert li["profiles"][0]["link"].endswith("keywords=Jane")
