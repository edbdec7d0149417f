from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class NewsItem:
    title: str
    url: str
    description: Optional[str] = None
    published_at: str = ""
    source_name: str = ""
    url_to_image: Optional[str] = None

    @classmethod
    def from_newsapi(cls, article: Dict[str, Any]) -> "NewsItem":
        """Build from a NewsAPI article dict (camelCase) or the snake_case shape used internally."""
        source = article.get("source") or {}
        if isinstance(source, dict):
            source_name = source.get("name") or ""
        else:
            source_name = str(source)
        return cls(
            title=article.get("title") or "",
            url=article.get("url") or "",
            description=article.get("description"),
            published_at=article.get("publishedAt") or article.get("published_at") or "",
            source_name=source_name or article.get("source_name") or "",
            url_to_image=article.get("urlToImage") or article.get("url_to_image"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "publishedAt": self.published_at,
            "source": {"name": self.source_name},
        }
        if self.url_to_image:
            out["urlToImage"] = self.url_to_image
        return out


@dataclass(frozen=True)
class TaggedNewsItem:
    item: NewsItem
    catalysts: Tuple[str, ...] = ()

    @property
    def title(self) -> str:
        return self.item.title

    @property
    def description(self) -> Optional[str]:
        return self.item.description

    @property
    def url(self) -> str:
        return self.item.url

    @property
    def published_at(self) -> str:
        return self.item.published_at

    @property
    def source_name(self) -> str:
        return self.item.source_name

    def to_dict(self) -> Dict[str, Any]:
        out = self.item.to_dict()
        out["catalysts"] = list(self.catalysts)
        return out


@dataclass
class Cluster:
    key: str
    stories: List[TaggedNewsItem] = field(default_factory=list)
    top_catalysts: List[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.stories)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "size": self.size,
            "topCatalysts": list(self.top_catalysts),
            "stories": [s.to_dict() for s in self.stories],
        }
