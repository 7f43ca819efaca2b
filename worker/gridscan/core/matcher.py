"""Locate a target business within one grid point's Maps results."""

from typing import List, Optional, Sequence

from gridscan.core.models import BusinessMatch, RankItem


def organic_items(items: Sequence[RankItem]) -> List[RankItem]:
    return [item for item in items if not item.is_paid]


def find_business_rank(
    items: Sequence[RankItem],
    business_name: Optional[str] = None,
    place_id: Optional[str] = None,
) -> BusinessMatch:
    """Return the 1-based rank of the business among organic items.

    Paid items never occupy a rank slot. Each item is checked against the place id
    first and then the name, and the first item satisfying either wins.
    """
    normalized_search = business_name.lower().strip() if business_name else ""

    for index, item in enumerate(organic_items(items)):
        if place_id and item.place_id == place_id:
            return BusinessMatch(rank=index + 1, item=item)
        if normalized_search and normalized_search in item.title.lower():
            return BusinessMatch(rank=index + 1, item=item)

    return BusinessMatch()


def top_organic_title(items: Sequence[RankItem]) -> Optional[str]:
    for item in items:
        if not item.is_paid:
            return item.title or None
    return None
