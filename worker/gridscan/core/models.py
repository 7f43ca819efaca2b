"""Core data models shared by the grid scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

ORGANIC = "organic"
PAID = "paid"


@dataclass(frozen=True, slots=True)
class GridPoint:
    """One sampled coordinate of the scan lattice; row 0 is the northernmost row."""

    lat: float
    lng: float
    row: int
    col: int


@dataclass(frozen=True, slots=True)
class RankRating:
    value: Optional[float] = None
    count: Optional[int] = None


@dataclass(frozen=True, slots=True)
class RankItem:
    """Normalized entry of a provider result list for a single grid point."""

    kind: str
    rank_absolute: int
    place_id: str
    title: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    rating: Optional[RankRating] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    category: Optional[str] = None
    raw: Optional[Dict[str, Any]] = field(default=None, repr=False, compare=False)

    @property
    def is_paid(self) -> bool:
        return self.kind == PAID


@dataclass(frozen=True, slots=True)
class BusinessMatch:
    rank: Optional[int] = None
    item: Optional[RankItem] = None


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Per-scan configuration, always passed explicitly to the scanner."""

    grid_size: int = 5
    radius_miles: float = 5.0
    delay_ms: int = 100
    concurrency: int = 3
    depth: int = 20
    unit_cost: float = 0.002


@dataclass(frozen=True, slots=True)
class ScanPointResult:
    point: GridPoint
    rank: Optional[int] = None
    top_result: Optional[str] = None
    business_found: Optional[str] = None

    @classmethod
    def failed(cls, point: GridPoint) -> "ScanPointResult":
        return cls(point=point)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lat": self.point.lat,
            "lng": self.point.lng,
            "row": self.point.row,
            "col": self.point.col,
            "rank": self.rank,
            "topResult": self.top_result,
            "businessFound": self.business_found,
        }


@dataclass(frozen=True, slots=True)
class ScanStats:
    average_rank: Optional[float]
    visibility_percent: int
    top3_count: int
    top10_count: int
    total_points: int
    ranked_points: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "averageRank": self.average_rank,
            "visibilityPercent": self.visibility_percent,
            "top3Count": self.top3_count,
            "top10Count": self.top10_count,
            "totalPoints": self.total_points,
            "rankedPoints": self.ranked_points,
        }


@dataclass(frozen=True, slots=True)
class ScanSummary:
    """Terminal artifact of a grid scan; `results` is indexed by row * grid_size + col."""

    grid_size: int
    radius_miles: float
    center_lat: float
    center_lng: float
    keyword: str
    business: str
    place_id: Optional[str]
    results: List[ScanPointResult]
    stats: ScanStats
    cost: float

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "gridSize": self.grid_size,
            "radiusMiles": self.radius_miles,
            "centerLat": self.center_lat,
            "centerLng": self.center_lng,
            "keyword": self.keyword,
            "business": self.business,
            "results": [result.to_dict() for result in self.results],
            "stats": self.stats.to_dict(),
            "cost": self.cost,
        }
        if self.place_id:
            payload["placeId"] = self.place_id
        return payload
