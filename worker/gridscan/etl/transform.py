"""Utilities for transforming DataForSEO Maps items into RankItem objects."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from gridscan.core.models import ORGANIC, PAID, RankItem, RankRating

logger = logging.getLogger(__name__)

PAID_ITEM_TYPE = "maps_paid_item"


def to_rank_item(raw: Dict[str, Any], fallback_rank: int) -> RankItem:
    rating_raw = raw.get("rating")
    rating = None
    if isinstance(rating_raw, dict):
        rating = RankRating(
            value=_safe_float(rating_raw.get("value")),
            count=_safe_int(rating_raw.get("votes_count")),
        )

    rank_absolute = _safe_int(raw.get("rank_absolute"))
    return RankItem(
        kind=PAID if raw.get("type") == PAID_ITEM_TYPE else ORGANIC,
        rank_absolute=rank_absolute if rank_absolute is not None else fallback_rank,
        place_id=_strip_or_none(raw.get("place_id")) or "",
        title=_strip_or_none(raw.get("title")) or "",
        lat=_safe_float(raw.get("latitude")),
        lng=_safe_float(raw.get("longitude")),
        rating=rating,
        address=_strip_or_none(raw.get("address")),
        phone=_strip_or_none(raw.get("phone")),
        category=_strip_or_none(raw.get("category")),
        raw=raw,
    )


def to_rank_items(items: Optional[Iterable[Any]]) -> List[RankItem]:
    """Convert raw provider items, preserving provider order and skipping malformed entries."""
    rank_items: List[RankItem] = []
    for position, raw in enumerate(items or [], start=1):
        if not isinstance(raw, dict):
            logger.debug("Skipping non-dict provider item at position %d: %r", position, raw)
            continue
        rank_items.append(to_rank_item(raw, fallback_rank=position))
    return rank_items


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        digits = "".join(ch for ch in value if ch.isdigit())
        if digits:
            return int(digits)
    return None
