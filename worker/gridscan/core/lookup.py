"""Resolve the center of a grid scan before any grid point is queried."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from gridscan.core.models import RankItem
from gridscan.vendors.dataforseo import DataForSEOError, find_business

logger = logging.getLogger(__name__)

BusinessLookup = Callable[[str, str, str], Optional[RankItem]]


class ScanRequestError(ValueError):
    """Raised when a scan cannot start because its center is unresolvable."""


class BusinessNotFoundError(ScanRequestError):
    """Raised when the business lookup returns no usable listing."""


@dataclass(frozen=True, slots=True)
class ScanCenter:
    lat: float
    lng: float
    business_name: Optional[str] = None
    place_id: Optional[str] = None


def resolve_scan_center(
    keyword: str,
    *,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    business_name: Optional[str] = None,
    location: Optional[str] = None,
    place_id: Optional[str] = None,
    lookup: Optional[BusinessLookup] = None,
) -> ScanCenter:
    """Direct coordinates win; otherwise the business is looked up by name and location."""
    if lat is not None and lng is not None:
        return ScanCenter(lat=lat, lng=lng, business_name=business_name, place_id=place_id)

    if not (business_name or "").strip() or not (location or "").strip():
        raise ScanRequestError(
            "Must provide either lat/lng coordinates, or businessName + location for lookup"
        )

    lookup = lookup or find_business
    try:
        business = lookup(keyword, business_name, location)
    except (DataForSEOError, requests.RequestException) as exc:
        logger.warning("Business lookup failed for %s in %s: %s", business_name, location, exc)
        raise BusinessNotFoundError(
            f'Could not look up "{business_name}" in "{location}" for keyword "{keyword}": {exc}'
        ) from exc

    if business is None or business.lat is None or business.lng is None:
        raise BusinessNotFoundError(
            f'Could not find "{business_name}" in "{location}" for keyword "{keyword}"'
        )

    logger.info(
        "Resolved business=%s place_id=%s at (%.6f,%.6f)",
        business.title,
        business.place_id,
        business.lat,
        business.lng,
    )
    return ScanCenter(
        lat=business.lat,
        lng=business.lng,
        business_name=business.title or business_name,
        place_id=business.place_id or place_id,
    )
