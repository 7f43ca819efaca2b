"""Area-wide visibility statistics for a completed grid scan."""

import math
from typing import Optional, Sequence

from gridscan.core.models import ScanPointResult, ScanStats


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def compute_stats(results: Sequence[ScanPointResult], total_points: int) -> ScanStats:
    ranks = [result.rank for result in results if result.rank is not None]

    average_rank: Optional[float] = None
    if ranks:
        average_rank = round_half_up(sum(ranks) / len(ranks), 1)

    visibility_percent = 0
    if total_points > 0:
        visibility_percent = int(round_half_up(100 * len(ranks) / total_points))

    return ScanStats(
        average_rank=average_rank,
        visibility_percent=visibility_percent,
        top3_count=sum(1 for rank in ranks if rank <= 3),
        top10_count=sum(1 for rank in ranks if rank <= 10),
        total_points=total_points,
        ranked_points=len(ranks),
    )


def estimate_cost(total_points: int, unit_cost: float) -> float:
    """Provider bills every attempted query, failed points included."""
    return total_points * unit_cost
