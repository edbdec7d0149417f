from __future__ import annotations
import logging
from typing import Optional


def setup_logging(level: Optional[str] = None) -> None:
    """Configure standard logging format for the API and CLI entrypoints."""
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
