"""Spherical-earth geometry for waypoint tracks.

Every distance in this package is expressed in kilometres so thresholds can
be compared directly.
"""

from __future__ import annotations

import math
from typing import List, Sequence

from .config import EARTH_RADIUS_KM, MIN_RETENTION_DISTANCE_KM
from .models import Coordinate, Waypoint


def distance_km(first: Coordinate, second: Coordinate) -> float:
    """Return the haversine great-circle distance between two coordinates."""

    sin = math.sin
    cos = math.cos
    radians = math.radians
    lat1_rad = radians(first.lat)
    lat2_rad = radians(second.lat)
    delta_lat = lat2_rad - lat1_rad
    delta_lon = radians(second.lng - first.lng)
    sin_half_lat = sin(delta_lat / 2.0)
    sin_half_lon = sin(delta_lon / 2.0)
    a = sin_half_lat**2 + cos(lat1_rad) * cos(lat2_rad) * sin_half_lon**2
    # Rounding near antipodal points can push a marginally outside [0, 1].
    a = min(1.0, max(0.0, a))
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_KM * c


def prune_waypoints(
    waypoints: Sequence[Waypoint],
    min_distance_km: float = MIN_RETENTION_DISTANCE_KM,
) -> List[Waypoint]:
    """Drop waypoints that sit too close to the previously kept one.

    The input must already be ordered by timestamp. The first waypoint is
    always kept; every later waypoint is kept only when it is at least
    ``min_distance_km`` away from the last *kept* waypoint. All waypoints must
    carry a location.
    """

    if len(waypoints) <= 1:
        return list(waypoints)

    kept: List[Waypoint] = [waypoints[0]]
    last_kept = waypoints[0]
    for waypoint in waypoints[1:]:
        if distance_km(last_kept.location, waypoint.location) >= min_distance_km:
            kept.append(waypoint)
            last_kept = waypoint
    return kept


def geofence_suffix(waypoints: Sequence[Waypoint], radius_km: float) -> List[Waypoint]:
    """Return the longest trailing run of waypoints within ``radius_km`` of the last.

    Scans backwards from the newest waypoint and stops at the first one that
    is farther than ``radius_km`` from it; everything after that point is
    returned. The visible window therefore follows the current position.
    """

    if not waypoints:
        return []
    anchor = waypoints[-1].location
    for index in range(len(waypoints) - 1, -1, -1):
        if distance_km(anchor, waypoints[index].location) > radius_km:
            return list(waypoints[index + 1 :])
    return list(waypoints)


__all__ = ["distance_km", "prune_waypoints", "geofence_suffix"]
