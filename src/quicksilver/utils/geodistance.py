"""
Great-circle distance and travel time between two points.

Distances use the haversine formula on a sphere of radius
:data:`EARTH_RADIUS_M`. Travel time assumes a constant average courier speed
and is truncated to whole seconds, which is the resolution of the dispatch
clock.
"""

import math
from typing import Optional

from quicksilver.core_types import Coordinates
from quicksilver.registry import register_travel_time_estimator

EARTH_RADIUS_M = 6_371_000.0
AVG_SPEED_MPS = 4.17  # ~15 km/h


def haversine_distance(
    origin: Optional[Coordinates], destination: Optional[Coordinates]
) -> float:
    """Return the surface distance in meters between two points.

    An absent point yields 0. This is a fallback for incomplete input, not a
    claim that the points coincide.
    """
    if origin is None or destination is None:
        return 0.0

    lat1 = math.radians(origin.lat)
    lon1 = math.radians(origin.lon)
    lat2 = math.radians(destination.lat)
    lon2 = math.radians(destination.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    # Rounding can push near-antipodal pairs just past 1
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def travel_time_seconds(
    origin: Optional[Coordinates],
    destination: Optional[Coordinates],
    avg_speed_mps: float = AVG_SPEED_MPS,
) -> int:
    """Whole seconds needed to cover the distance at ``avg_speed_mps``."""
    return int(haversine_distance(origin, destination) / avg_speed_mps)


@register_travel_time_estimator("haversine")
class HaversineTravelTime:
    """Straight-line travel at a constant average speed."""

    def __init__(self, avg_speed_mps: float = AVG_SPEED_MPS):
        if avg_speed_mps <= 0:
            raise ValueError("avg_speed_mps must be positive")
        self.avg_speed_mps = avg_speed_mps

    def travel_time(
        self, origin: Optional[Coordinates], destination: Optional[Coordinates]
    ) -> int:
        return travel_time_seconds(origin, destination, self.avg_speed_mps)
