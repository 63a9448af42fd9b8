"""Service layer package.

Exports high-level services consumed by the entry point and the web layer.
"""

from .image_service import ImageScanner
from .live_feed_service import LiveFeedConfig, LiveFeedIntegrator
from .query import AccessTier, UpdateResult, parse_since, query_updates, resolve_tier
from .scheduler import PeriodicTask, Supervisor
from .track_merger import TrackMerger, TrackMergerConfig, merge_waypoints

__all__ = [
    "AccessTier",
    "ImageScanner",
    "LiveFeedConfig",
    "LiveFeedIntegrator",
    "PeriodicTask",
    "Supervisor",
    "TrackMerger",
    "TrackMergerConfig",
    "UpdateResult",
    "merge_waypoints",
    "parse_since",
    "query_updates",
    "resolve_tier",
]
