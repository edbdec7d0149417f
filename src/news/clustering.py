from __future__ import annotations
import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence

from src.news.models import Cluster, TaggedNewsItem

logger = logging.getLogger(__name__)

MIN_WORD_LEN = 5
MATCH_THRESHOLD = 0.3
MAX_TOP_CATALYSTS = 3
FALLBACK_KEY = "other"

_NON_WORD = re.compile(r"[^\w\s]")


def significant_words(title: Optional[str]) -> List[str]:
    """Lower-cased title tokens longer than four characters, punctuation treated as whitespace."""
    text = _NON_WORD.sub(" ", (title or "").lower())
    return [w for w in text.split() if len(w) >= MIN_WORD_LEN]


def _match_score(words: Sequence[str], key: str) -> float:
    key_words = key.split(" ")
    matches = sum(1 for w in words if w in key_words)
    return matches / max(len(key_words), len(words))


def top_catalysts(stories: Iterable[TaggedNewsItem], limit: int = MAX_TOP_CATALYSTS) -> List[str]:
    counts: Dict[str, int] = {}
    for story in stories:
        for cat in story.catalysts or ():
            counts[cat] = counts.get(cat, 0) + 1
    # sorted() is stable: equal counts keep first-seen order
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [cat for cat, _ in ranked[:limit]]


def cluster_stories(items: Iterable[TaggedNewsItem]) -> List[Cluster]:
    """
    Greedy single-pass grouping of tagged articles by shared title words.

    Each article joins the earliest-created cluster with the best key-overlap score above
    MATCH_THRESHOLD; otherwise it goes to the cluster keyed by its first significant word
    (or "other"), which is created if it does not exist yet. Clusters are returned largest
    first, equal sizes in creation order.
    """
    groups: Dict[str, List[TaggedNewsItem]] = {}

    for item in items:
        words = significant_words(item.title)

        best_key: Optional[str] = None
        best_score = 0.0
        for key in groups:
            score = _match_score(words, key)
            if score > MATCH_THRESHOLD and score > best_score:
                best_score = score
                best_key = key

        if best_key is None:
            best_key = words[0] if words else FALLBACK_KEY
            groups.setdefault(best_key, [])
        groups[best_key].append(item)

    clusters = [
        Cluster(key=key, stories=stories, top_catalysts=top_catalysts(stories))
        for key, stories in groups.items()
    ]
    clusters.sort(key=lambda c: c.size, reverse=True)
    logger.debug("Clustered %d stories into %d clusters", sum(c.size for c in clusters), len(clusters))
    return clusters
