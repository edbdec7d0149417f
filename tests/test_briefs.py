import pytest

from src.news.briefs import (
    Digest,
    digest_prompt,
    escape_html,
    rank_movers,
    render_digest_email,
    ticker_brief_prompt,
    ticker_forecast_prompt,
    validate_email,
)


def test_digest_prompt_lists_headlines_and_ranked_movers():
    articles = [{"title": f"Headline {i}"} for i in range(25)]
    articles[0]["title"] = "NVDA soars, AAPL flat"
    articles[1]["description"] = "nvda guidance raised"
    prompt = digest_prompt(articles, ["AAPL", "NVDA", "MSFT"])
    assert "- Headline 19" in prompt
    assert "- Headline 20" not in prompt
    assert "Key movers (NVDA, AAPL, MSFT)" in prompt


def test_rank_movers_caps_at_five():
    ranked = rank_movers([], ["A", "B", "C", "D", "E", "F"])
    assert [t for t, _ in ranked] == ["A", "B", "C", "D", "E"]


def test_ticker_prompts_mention_ticker():
    p = ticker_brief_prompt("TSLA", [{"title": "Tesla recall"}])
    assert "ticker TSLA" in p and "- Tesla recall" in p
    assert "Bull Case" in ticker_forecast_prompt("TSLA")


@pytest.mark.parametrize("raw,expected", [
    ("  Jane@Example.COM ", "jane@example.com"),
    ("a@b.co", "a@b.co"),
])
def test_validate_email_normalizes(raw, expected):
    assert validate_email(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "no-at-sign", "a@b", "a b@c.com"])
def test_validate_email_rejects(raw):
    with pytest.raises(ValueError):
        validate_email(raw)


def test_render_digest_email_escapes_and_limits():
    articles = [{"title": f"<b>Story {i}</b>", "url": f"https://x.test/{i}?a=1&b=2"} for i in range(12)]
    articles.append({})
    subject, html = render_digest_email(Digest(date="1/2/2025", content='Rates & "risk"', articles=articles))
    assert subject == "Your Daily Market Digest – 1/2/2025"
    assert "&lt;b&gt;Story 0&lt;/b&gt;" in html
    assert "a=1&amp;b=2" in html
    assert "Rates &amp; &quot;risk&quot;" in html
    assert html.count("<li>") == 10
    assert "<b>" not in html


def test_escape_html_handles_apostrophes_and_none():
    assert escape_html("Investors' <focus>") == "Investors&#x27; &lt;focus&gt;"
    assert escape_html(None) == ""
