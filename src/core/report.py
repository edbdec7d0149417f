from __future__ import annotations
import json
import os
from collections import Counter
from typing import List

from src.news.models import Cluster


def make_report(clusters: List[Cluster], outdir: str | None = None, top_n: int = 10) -> str:
    total = sum(c.size for c in clusters)
    lines = [
        "=== News Digest Report ===",
        f"Stories: {total}  Clusters: {len(clusters)}",
        "\nTop clusters:",
    ]
    for c in clusters[:top_n]:
        cats = ", ".join(c.top_catalysts) or "-"
        lines.append(f"- {c.key} ({c.size}) [{cats}] {c.stories[0].title}")

    text = "\n".join(lines)

    if outdir:
        os.makedirs(outdir, exist_ok=True)
        catalyst_counts = Counter(cat for c in clusters for s in c.stories for cat in s.catalysts)
        report = {
            "stories": total,
            "clusters": len(clusters),
            "singletons": sum(1 for c in clusters if c.size == 1),
            "largest_cluster": clusters[0].size if clusters else 0,
            "catalyst_counts": dict(catalyst_counts),
        }
        with open(os.path.join(outdir, "report.json"), "w") as f:
            json.dump(report, f, indent=2)
    return text
