from __future__ import annotations
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class Catalyst:
    id: str
    name: str
    color: str
    keywords: Tuple[str, ...]

    def to_dict(self):
        return {"id": self.id, "name": self.name, "color": self.color, "keywords": list(self.keywords)}


@dataclass(frozen=True)
class Sector:
    id: str
    name: str
    keywords: Tuple[str, ...]
    custom: bool = False

    def to_dict(self):
        return {"id": self.id, "name": self.name, "keywords": list(self.keywords), "custom": self.custom}


CATALYSTS: Tuple[Catalyst, ...] = (
    Catalyst("earnings", "Earnings", "#3b82f6", ("earnings", "revenue", "profit", "quarterly", "EPS")),
    Catalyst("guidance", "Guidance", "#10b981", ("guidance", "forecast", "outlook", "expectations")),
    Catalyst("macro", "Macro", "#f59e0b", ("Fed", "inflation", "interest rates", "GDP", "economic")),
    Catalyst("regulation", "Regulation", "#ef4444", ("SEC", "regulation", "compliance", "law", "legal")),
    Catalyst("product", "Product", "#8b5cf6", ("launch", "release", "product", "unveil")),
    Catalyst("m-a", "M&A", "#ec4899", ("merger", "acquisition", "deal", "buyout")),
)

SECTORS: Tuple[Sector, ...] = (
    Sector("technology", "Technology", ("tech", "software", "AI", "cloud", "SaaS")),
    Sector("healthcare", "Healthcare", ("pharma", "biotech", "medical", "health")),
    Sector("finance", "Finance", ("banking", "financial", "investment", "trading")),
    Sector("energy", "Energy", ("oil", "gas", "renewable", "energy")),
    Sector("consumer", "Consumer", ("retail", "consumer", "goods", "brands")),
    Sector("industrial", "Industrial", ("manufacturing", "industrial", "machinery")),
    Sector("real-estate", "Real Estate", ("real estate", "REIT", "property")),
    Sector("materials", "Materials", ("materials", "chemicals", "mining")),
)


@dataclass(frozen=True)
class Taxonomy:
    """Read-only catalyst and sector tables shared by the tagger and the query builder."""

    catalysts: Tuple[Catalyst, ...] = CATALYSTS
    sectors: Tuple[Sector, ...] = field(default=SECTORS)

    def catalyst(self, catalyst_id: str) -> Optional[Catalyst]:
        for c in self.catalysts:
            if c.id == catalyst_id:
                return c
        return None

    def sector(self, sector_id: str) -> Optional[Sector]:
        for s in self.sectors:
            if s.id == sector_id:
                return s
        return None

    def with_custom_sectors(self, sectors: Iterable[Sector]) -> "Taxonomy":
        extra = tuple(replace(s, custom=True) for s in sectors)
        return replace(self, sectors=self.sectors + extra)


DEFAULT_TAXONOMY = Taxonomy()


def make_custom_sector(name: str, keywords: Iterable[str]) -> Sector:
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-") or "custom"
    kws = tuple(k.strip() for k in keywords if k and k.strip())
    return Sector(id=f"custom-{slug}", name=name.strip(), keywords=kws, custom=True)


def sector_query(sector: Sector) -> str:
    """NewsAPI boolean query for a sector, e.g. 'oil OR gas OR renewable OR energy'."""
    return " OR ".join(sector.keywords)
