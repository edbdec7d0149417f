from __future__ import annotations
from typing import Iterable, List, Union

from src.news.models import NewsItem, TaggedNewsItem
from src.news.taxonomy import DEFAULT_TAXONOMY, Taxonomy


def detect_catalysts(item: Union[NewsItem, TaggedNewsItem], taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> List[str]:
    """
    Return the ids of every catalyst with at least one keyword in the item's title or description.

    Matching is plain case-insensitive substring containment, so short keywords also hit inside
    longer words ("EPS" in "sweeps", "law" in "lawn"). Ids come back in taxonomy order.
    """
    text = f"{item.title or ''} {item.description or ''}".lower()
    return [
        c.id
        for c in taxonomy.catalysts
        if any(kw.lower() in text for kw in c.keywords)
    ]


def tag_item(item: NewsItem, taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> TaggedNewsItem:
    return TaggedNewsItem(item=item, catalysts=tuple(detect_catalysts(item, taxonomy)))


def tag_items(items: Iterable[NewsItem], taxonomy: Taxonomy = DEFAULT_TAXONOMY) -> List[TaggedNewsItem]:
    return [tag_item(it, taxonomy) for it in items]
