from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional

_PERCENT_MOVE = re.compile(r"(?:up|down|rose|fell|gained|lost)\s+([\d.]+)%", re.IGNORECASE)
_DOLLAR_AMOUNT = re.compile(r"\$([\d,]+\.?\d*)")


@dataclass(frozen=True)
class PriceMove:
    change: float
    kind: str  # "percent" or "price"


def _to_float(raw: str) -> Optional[float]:
    try:
        return float(raw)
    except ValueError:
        return None


def parse_price_move(item) -> Optional[PriceMove]:
    """
    Pull a headline price move out of an article: "shares fell 4.2%" -> 4.2 percent,
    else the first dollar figure ("$1,234.50" -> 1234.5 price). Percent moves win.
    """
    text = f"{item.title or ''} {item.description or ''}"
    m = _PERCENT_MOVE.search(text)
    if m:
        val = _to_float(m.group(1))
        if val is not None:
            return PriceMove(change=val, kind="percent")
    m = _DOLLAR_AMOUNT.search(text)
    if m:
        val = _to_float(m.group(1).replace(",", ""))
        if val is not None:
            return PriceMove(change=val, kind="price")
    return None
