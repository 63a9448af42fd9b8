"""Central error types used across the application."""

from __future__ import annotations


class TourMapError(RuntimeError):
    """Base error for the tour map service."""


class WaypointFormatError(TourMapError):
    """Raised when a waypoint payload is missing fields or has bad values."""


class SourceReadError(TourMapError):
    """Raised when an input file (archive, FIT, image, codes) cannot be read."""


class LiveFeedError(TourMapError):
    """Base error for live-tracking feed failures."""


class TrackingTokenNotFoundError(LiveFeedError):
    """Raised when the feed reports the share token as unknown (HTTP 404)."""


class InvalidSinceError(TourMapError):
    """Raised when an update cursor is not an RFC3339 timestamp."""


__all__ = [
    "TourMapError",
    "WaypointFormatError",
    "SourceReadError",
    "LiveFeedError",
    "TrackingTokenNotFoundError",
    "InvalidSinceError",
]
