from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from src.news.catalysts import tag_items
from src.news.clustering import cluster_stories
from src.news.models import Cluster, NewsItem, TaggedNewsItem
from src.news.taxonomy import DEFAULT_TAXONOMY, Taxonomy, sector_query

logger = logging.getLogger(__name__)


def parse_articles(articles: Iterable[Dict[str, Any]]) -> List[NewsItem]:
    """Convert raw provider dicts to NewsItem; missing title or url become empty strings."""
    return [NewsItem.from_newsapi(a) for a in articles if isinstance(a, dict)]


def dedupe_by_url(items: Iterable[TaggedNewsItem]) -> List[TaggedNewsItem]:
    """Keep one entry per url: the last one seen, at the position of the first."""
    by_url: Dict[str, TaggedNewsItem] = {}
    for it in items:
        by_url[it.url] = it
    return list(by_url.values())


def filter_news(
    items: Iterable[TaggedNewsItem],
    catalysts: Optional[Sequence[str]] = None,
    query: Optional[str] = None,
) -> List[TaggedNewsItem]:
    out = list(items)
    if catalysts:
        wanted = set(catalysts)
        out = [it for it in out if any(c in wanted for c in it.catalysts)]
    if query:
        q = query.lower()
        out = [
            it for it in out
            if q in (it.title or "").lower() or q in (it.description or "").lower()
        ]
    return out


def build_sector_queries(sector_ids: Iterable[str], taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> List[str]:
    queries = []
    for sid in sector_ids:
        sector = taxonomy.sector(sid)
        if sector is None:
            logger.warning("Unknown sector id %s, skipping", sid)
            continue
        q = sector_query(sector)
        if q:
            queries.append(q)
    return queries


def prepare_feed(
    articles: Iterable[Dict[str, Any]],
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
    catalysts: Optional[Sequence[str]] = None,
    query: Optional[str] = None,
) -> List[TaggedNewsItem]:
    """Tag, dedupe and filter raw articles in the order the dashboard applies them."""
    tagged = tag_items(parse_articles(articles), taxonomy)
    unique = dedupe_by_url(tagged)
    return filter_news(unique, catalysts=catalysts, query=query)


def build_clusters(
    articles: Iterable[Dict[str, Any]],
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
    catalysts: Optional[Sequence[str]] = None,
    query: Optional[str] = None,
) -> List[Cluster]:
    return cluster_stories(prepare_feed(articles, taxonomy, catalysts=catalysts, query=query))
