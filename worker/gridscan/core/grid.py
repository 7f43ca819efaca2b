"""Square lattice of sample points around a center coordinate."""

import math
from typing import List

from gridscan.core.models import GridPoint

MILES_PER_DEGREE_LAT = 69.0


def generate_grid(
    center_lat: float,
    center_lng: float,
    grid_size: int = 5,
    radius_miles: float = 5.0,
) -> List[GridPoint]:
    """Return grid_size * grid_size points spanning 2 * radius_miles on each axis.

    Uses a flat-earth approximation: one mile is 1/69 degrees of latitude, and the
    longitude scale is taken at the center latitude. Points are row-major, row 0
    northernmost and column 0 westernmost.
    """
    if grid_size < 2:
        raise ValueError("grid_size must be at least 2")
    if radius_miles <= 0:
        raise ValueError("radius_miles must be positive")

    lat_deg_per_mile = 1 / MILES_PER_DEGREE_LAT
    lng_deg_per_mile = 1 / (MILES_PER_DEGREE_LAT * math.cos(math.radians(center_lat)))

    lat_range = radius_miles * lat_deg_per_mile * 2
    lng_range = radius_miles * lng_deg_per_mile * 2

    lat_step = lat_range / (grid_size - 1)
    lng_step = lng_range / (grid_size - 1)

    start_lat = center_lat + lat_range / 2
    start_lng = center_lng - lng_range / 2

    return [
        GridPoint(
            lat=start_lat - row * lat_step,
            lng=start_lng + col * lng_step,
            row=row,
            col=col,
        )
        for row in range(grid_size)
        for col in range(grid_size)
    ]
