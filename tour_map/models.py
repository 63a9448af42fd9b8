from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping

from .errors import WaypointFormatError
from .utils import format_rfc3339, parse_rfc3339


@dataclass(frozen=True, slots=True)
class Coordinate:
    lat: float
    lng: float

    def as_pair(self) -> List[float]:
        return [self.lat, self.lng]


def _coordinate_value(raw_location: Mapping[str, Any], key: str) -> float:
    """Return a finite JSON number from the location object."""

    if key not in raw_location:
        raise WaypointFormatError(f"waypoint location has no '{key}'")
    value = raw_location[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise WaypointFormatError(f"waypoint '{key}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise WaypointFormatError(f"waypoint '{key}' is not finite: {value!r}")
    return float(value)


@dataclass(frozen=True, slots=True)
class Waypoint:
    """A timestamped position. ``location`` is None for position-less records."""

    location: Coordinate | None
    timestamp: datetime

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Waypoint":
        """Build a waypoint from the live-feed / archive JSON shape.

        The payload looks like ``{"location": {"lat": .., "lng": ..},
        "updatedAt": "2024-06-01T10:00:00Z"}``; ``location`` may be absent or
        null.
        """

        if not isinstance(payload, Mapping):
            raise WaypointFormatError("waypoint payload must be a JSON object")
        raw_ts = payload.get("updatedAt")
        if not isinstance(raw_ts, str):
            raise WaypointFormatError("waypoint payload has no 'updatedAt' timestamp")
        try:
            timestamp = parse_rfc3339(raw_ts)
        except ValueError as exc:
            raise WaypointFormatError(str(exc)) from exc

        raw_location = payload.get("location")
        if raw_location is None:
            return cls(location=None, timestamp=timestamp)
        if not isinstance(raw_location, Mapping):
            raise WaypointFormatError("waypoint 'location' must be an object")
        location = Coordinate(
            lat=_coordinate_value(raw_location, "lat"),
            lng=_coordinate_value(raw_location, "lng"),
        )
        return cls(location=location, timestamp=timestamp)

    def to_payload(self) -> Dict[str, Any]:
        location = None
        if self.location is not None:
            location = {"lat": self.location.lat, "lng": self.location.lng}
        return {"location": location, "updatedAt": format_rfc3339(self.timestamp)}


__all__ = ["Coordinate", "Waypoint"]
