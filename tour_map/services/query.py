"""Access tiers and incremental track queries.

Visitors presenting a known access code see the whole track; everybody else
sees only the geofenced tail around the current position. The ``since``
cursor is applied inside the visible set so a restricted visitor can never
page outside it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Sequence

from ..config import GEOFENCE_RADIUS_KM
from ..errors import InvalidSinceError
from ..geo import geofence_suffix
from ..models import Coordinate, Waypoint
from ..state import AccessCodeSet, AppState
from ..utils import parse_rfc3339


class AccessTier(str, enum.Enum):
    FULL = "full"
    RESTRICTED = "restricted"


def resolve_tier(codes: AccessCodeSet, secret: str | None) -> AccessTier:
    if secret and secret in codes:
        return AccessTier.FULL
    return AccessTier.RESTRICTED


def parse_since(raw: str | None) -> datetime | None:
    """Parse the ``since`` query value; empty or missing means no cursor."""

    if raw is None or raw == "":
        return None
    try:
        return parse_rfc3339(raw)
    except ValueError as exc:
        raise InvalidSinceError(
            "Invalid 'since' timestamp format, use RFC3339"
        ) from exc


def visible_waypoints(
    waypoints: Sequence[Waypoint], tier: AccessTier, radius_km: float
) -> List[Waypoint]:
    if tier is AccessTier.FULL:
        return list(waypoints)
    return geofence_suffix(waypoints, radius_km)


@dataclass(slots=True)
class UpdateResult:
    tier: AccessTier
    waypoints: List[Waypoint]
    # Timestamp of the newest visible waypoint, even when none are returned.
    last_modified: datetime | None
    images: Dict[str, Coordinate] = field(default_factory=dict)


def query_updates(
    state: AppState,
    since: datetime | None,
    secret: str | None,
    *,
    radius_km: float = GEOFENCE_RADIUS_KM,
    include_images: bool = True,
) -> UpdateResult:
    """Return the waypoints a caller may see that are newer than ``since``."""

    tier = resolve_tier(state.codes, secret)
    with state.track.reading() as waypoints:
        eligible = visible_waypoints(waypoints, tier, radius_km)
    if since is None:
        selected = eligible
    else:
        selected = [wp for wp in eligible if wp.timestamp > since]
    last_modified = eligible[-1].timestamp if eligible else None
    images = state.images.snapshot() if include_images else {}
    return UpdateResult(
        tier=tier, waypoints=selected, last_modified=last_modified, images=images
    )


__all__ = [
    "AccessTier",
    "UpdateResult",
    "parse_since",
    "query_updates",
    "resolve_tier",
    "visible_waypoints",
]
