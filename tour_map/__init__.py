"""Live GPS tour map: merged, pruned and geofenced track over HTTP."""

from .errors import InvalidSinceError, LiveFeedError, TourMapError
from .models import Coordinate, Waypoint
from .state import AppState

__all__ = [
    "AppState",
    "Coordinate",
    "InvalidSinceError",
    "LiveFeedError",
    "TourMapError",
    "Waypoint",
]
