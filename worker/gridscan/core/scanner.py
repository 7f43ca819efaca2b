"""Grid scan orchestration: fan out one Maps query per grid point under a bounded worker pool."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from gridscan.core.aggregate import compute_stats, estimate_cost
from gridscan.core.grid import generate_grid
from gridscan.core.matcher import find_business_rank, top_organic_title
from gridscan.core.models import GridPoint, RankItem, ScanOptions, ScanPointResult, ScanSummary
from gridscan.vendors.dataforseo import query_maps_point

logger = logging.getLogger(__name__)

QueryPoint = Callable[[str, float, float, int], Sequence[RankItem]]


class _Cursor:
    """Shared work index; claiming is the only synchronized step between workers."""

    def __init__(self, limit: int) -> None:
        self._next = 0
        self._limit = limit
        self._lock = threading.Lock()

    def claim(self) -> Optional[int]:
        with self._lock:
            if self._next >= self._limit:
                return None
            index = self._next
            self._next += 1
            return index


def scan_point(
    point: GridPoint,
    keyword: str,
    business_name: Optional[str],
    place_id: Optional[str],
    depth: int,
    query_point: QueryPoint,
) -> ScanPointResult:
    """Query and match a single point; any failure becomes an unranked result."""
    try:
        items = query_point(keyword, point.lat, point.lng, depth)
        match = find_business_rank(items, business_name=business_name, place_id=place_id)
        top_result = top_organic_title(items)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Error at point (%d,%d): %s", point.row, point.col, exc)
        return ScanPointResult.failed(point)

    return ScanPointResult(
        point=point,
        rank=match.rank,
        top_result=top_result,
        business_found=match.item.title if match.item else None,
    )


def run_grid_scan(
    keyword: str,
    center_lat: float,
    center_lng: float,
    business_name: Optional[str] = None,
    place_id: Optional[str] = None,
    options: Optional[ScanOptions] = None,
    *,
    query_point: Optional[QueryPoint] = None,
) -> ScanSummary:
    """Scan every grid point around the center and summarize the business's visibility.

    Workers share one cursor over the row-major point list and write results by
    index, so output order follows the grid regardless of completion order. Each
    worker sleeps ``delay_ms`` after every point, so the aggregate request rate
    grows with ``concurrency``.
    """
    if not keyword or not keyword.strip():
        raise ValueError("keyword must be provided for a grid scan")

    options = options or ScanOptions()
    query_point = query_point or query_maps_point

    points = generate_grid(center_lat, center_lng, options.grid_size, options.radius_miles)
    results: List[Optional[ScanPointResult]] = [None] * len(points)
    cursor = _Cursor(len(points))
    delay_seconds = options.delay_ms / 1000

    def worker() -> None:
        while True:
            index = cursor.claim()
            if index is None:
                return
            results[index] = scan_point(
                points[index],
                keyword,
                business_name,
                place_id,
                options.depth,
                query_point,
            )
            if delay_seconds > 0:
                time.sleep(delay_seconds)

    concurrency = max(1, min(options.concurrency, len(points)))
    logger.info(
        "Starting grid scan keyword=%s center=(%.6f,%.6f) grid=%dx%d radius=%.1fmi workers=%d",
        keyword,
        center_lat,
        center_lng,
        options.grid_size,
        options.grid_size,
        options.radius_miles,
        concurrency,
    )

    with ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="gridscan") as executor:
        futures = [executor.submit(worker) for _ in range(concurrency)]
        for future in futures:
            future.result()

    completed = [
        result if result is not None else ScanPointResult.failed(points[index])
        for index, result in enumerate(results)
    ]
    stats = compute_stats(completed, total_points=len(points))
    logger.info(
        "Completed grid scan keyword=%s ranked=%d/%d average_rank=%s",
        keyword,
        stats.ranked_points,
        stats.total_points,
        stats.average_rank,
    )

    return ScanSummary(
        grid_size=options.grid_size,
        radius_miles=options.radius_miles,
        center_lat=center_lat,
        center_lng=center_lng,
        keyword=keyword,
        business=business_name or place_id or "Unknown",
        place_id=place_id,
        results=completed,
        stats=stats,
        cost=estimate_cost(len(points), options.unit_cost),
    )
