import argparse
import asyncio
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd
import yaml

from src.core.config import get_settings
from src.core.log import setup_logging
from src.core.report import make_report
from src.news.feed import build_clusters, build_sector_queries
from src.news.models import Cluster
from src.news.price_moves import parse_price_move
from src.news.taxonomy import DEFAULT_TAXONOMY, Taxonomy, make_custom_sector
from src.providers.news import fetch_news

logger = logging.getLogger(__name__)

DEFAULT_RUN_DIR = "artifacts/digest_{date}"


def run_dir_for(cfg: Dict[str, Any], today: Optional[datetime] = None) -> str:
    pattern = (cfg.get("outputs") or {}).get("path") or DEFAULT_RUN_DIR
    return pattern.format(date=(today or datetime.now()).strftime("%Y%m%d"))


def export_table(df: pd.DataFrame, run_dir: str, name: str) -> str:
    """Write <name>.parquet, or <name>.csv when no parquet engine can handle the frame."""
    path = os.path.join(run_dir, f"{name}.parquet")
    try:
        df.to_parquet(path, index=False)
    except (ImportError, ValueError) as e:
        logger.info("Parquet unavailable for %s (%s), writing CSV", name, e)
        path = os.path.join(run_dir, f"{name}.csv")
        df.to_csv(path, index=False)
    return path


def load_config(path: str) -> Dict[str, Any]:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_articles(path: str) -> List[Dict[str, Any]]:
    """Read articles from a JSON file holding either a list or a NewsAPI payload with 'articles'."""
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("articles") or []
    return [a for a in data if isinstance(a, dict)]


def taxonomy_from_config(cfg: Dict[str, Any]) -> Taxonomy:
    custom = [
        make_custom_sector(s.get("name", ""), s.get("keywords") or [])
        for s in cfg.get("custom_sectors") or []
        if s.get("name")
    ]
    return DEFAULT_TAXONOMY.with_custom_sectors(custom) if custom else DEFAULT_TAXONOMY


def clusters_frame(clusters: List[Cluster]) -> pd.DataFrame:
    rows = [
        {
            "rank": i + 1,
            "key": c.key,
            "size": c.size,
            "top_catalysts": ",".join(c.top_catalysts),
            "lead_title": c.stories[0].title if c.stories else "",
        }
        for i, c in enumerate(clusters)
    ]
    return pd.DataFrame(rows, columns=["rank", "key", "size", "top_catalysts", "lead_title"])


def stories_frame(clusters: List[Cluster]) -> pd.DataFrame:
    rows = []
    for c in clusters:
        for s in c.stories:
            move = parse_price_move(s)
            rows.append({
                "cluster": c.key,
                "title": s.title,
                "url": s.url,
                "source": s.source_name,
                "published_at": s.published_at,
                "catalysts": ",".join(s.catalysts),
                "price_move": move.change if move else None,
                "price_move_kind": move.kind if move else None,
            })
    df = pd.DataFrame(rows, columns=[
        "cluster", "title", "url", "source", "published_at",
        "catalysts", "price_move", "price_move_kind",
    ])
    if not df.empty:
        df["published_at"] = pd.to_datetime(df["published_at"], errors="coerce", utc=True)
    return df


def run(cfg: Dict[str, Any], input_path: Optional[str] = None) -> str:
    taxonomy = taxonomy_from_config(cfg)
    news_cfg = cfg.get("news", {})
    sector_ids = news_cfg.get("sectors") or []

    if input_path:
        articles = load_articles(input_path)
        logger.info("Loaded %d articles from %s", len(articles), input_path)
    else:
        settings = get_settings()
        queries = build_sector_queries(sector_ids, taxonomy)
        articles = asyncio.run(
            fetch_news(queries, settings.news_api_key, settings.http_timeout, news_cfg.get("page_size"))
        )
        logger.info("Fetched %d articles for %d queries", len(articles), len(queries))

    filters = cfg.get("filters", {})
    clusters = build_clusters(
        articles,
        taxonomy,
        catalysts=filters.get("catalysts") or None,
        query=filters.get("search") or None,
    )

    run_dir = run_dir_for(cfg)
    os.makedirs(run_dir, exist_ok=True)
    export_table(clusters_frame(clusters), run_dir, "clusters")
    export_table(stories_frame(clusters), run_dir, "stories")
    with open(os.path.join(run_dir, "clusters.json"), "w") as f:
        json.dump([c.to_dict() for c in clusters], f, indent=2)

    print(make_report(clusters, outdir=run_dir))
    return run_dir


def main(argv=None):
    ap = argparse.ArgumentParser(description="Tag, cluster and export a news digest")
    ap.add_argument("--config", required=True)
    ap.add_argument("--input", help="JSON file of articles; fetch from the news provider when omitted")
    args = ap.parse_args(argv)

    setup_logging(get_settings().log_level)
    run(load_config(args.config), args.input)


if __name__ == "__main__":
    main()
