"""Central configuration for the tour map service.

All values are constants imported by the rest of the package. Every value can
be overridden through environment variables (optionally via a local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Files and directories
# ---------------------------------------------------------------------------
# Paths can be absolute or relative to the working directory.

# Archived waypoint JSON files (one waypoint per file). Accepted live-feed
# positions are written here as well.
DATA_DIR = os.getenv("TOUR_MAP_DATA_DIR", "./data")

# Activity recorder (.fit) files.
FIT_DIR = os.getenv("TOUR_MAP_FIT_DIR", "./fit")

# Geotagged photos shown on the map and served under /images/.
IMAGES_DIR = os.getenv("TOUR_MAP_IMAGES_DIR", "./images")

# Single line holding the current live-tracking share token.
TRACKING_TOKEN_FILE = os.getenv("TOUR_MAP_TRACKING_TOKEN_FILE", "./tracking_token.txt")

# Newline-delimited access codes granting the full track.
CODES_FILE = os.getenv("TOUR_MAP_CODES_FILE", "./codes.txt")


# ---------------------------------------------------------------------------
# Track geometry
# ---------------------------------------------------------------------------
# Mean earth radius used by the haversine distance.
EARTH_RADIUS_KM = 6371.0

# Consecutive track points closer than this are pruned (20 metres).
MIN_RETENTION_DISTANCE_KM = _env_float("TOUR_MAP_MIN_RETENTION_DISTANCE_KM", 0.02)

# Visitors without an access code only see the trailing part of the track that
# stays within this radius of the current position. Shared by the map page and
# the update API.
GEOFENCE_RADIUS_KM = _env_float("TOUR_MAP_GEOFENCE_RADIUS_KM", 10.0)


# ---------------------------------------------------------------------------
# Background refresh
# ---------------------------------------------------------------------------
IMAGE_SCAN_INTERVAL_SECONDS = _env_float("TOUR_MAP_IMAGE_SCAN_INTERVAL_SECONDS", 300.0)
LIVE_FEED_INTERVAL_SECONDS = _env_float("TOUR_MAP_LIVE_FEED_INTERVAL_SECONDS", 15.0)

# Run the background tasks at all. Disable for read-only replays of the
# archived data.
BACKGROUND_TASKS_ENABLED = _env_bool("TOUR_MAP_BACKGROUND_TASKS_ENABLED", True)


# ---------------------------------------------------------------------------
# Live tracking feed (Hammerhead share links)
# ---------------------------------------------------------------------------
HAMMERHEAD_TRACKING_URL = os.getenv(
    "TOUR_MAP_TRACKING_URL", "https://dashboard.hammerhead.io/v1/shares/tracking"
)

# Request timeout in seconds. A stalled feed must never stall the poll loop.
REQUEST_TIMEOUT = _env_float("TOUR_MAP_REQUEST_TIMEOUT", 15.0)

# HTTP session pool sizes.
HTTP_POOL_CONNECTIONS = 2
HTTP_POOL_MAXSIZE = 2

# Connection-level retries for transient 5xx answers within a single poll.
HTTP_MAX_RETRIES = _env_int("TOUR_MAP_HTTP_MAX_RETRIES", 1)


# ---------------------------------------------------------------------------
# Web server
# ---------------------------------------------------------------------------
HTTP_HOST = os.getenv("TOUR_MAP_HOST", "0.0.0.0")
HTTP_PORT = _env_int("TOUR_MAP_PORT", 8080)

# Browser cache lifetime for served photos (3 days).
IMAGE_CACHE_MAX_AGE_SECONDS = _env_int("TOUR_MAP_IMAGE_CACHE_MAX_AGE", 259200)

# Map view used before any waypoint is known.
MAP_DEFAULT_CENTER = (
    _env_float("TOUR_MAP_DEFAULT_LAT", 48.0),
    _env_float("TOUR_MAP_DEFAULT_LNG", 10.0),
)
MAP_DEFAULT_ZOOM = _env_int("TOUR_MAP_DEFAULT_ZOOM", 5)

# Milliseconds between browser polls of /api/updates.
MAP_POLL_INTERVAL_MS = _env_int("TOUR_MAP_POLL_INTERVAL_MS", 30000)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("TOUR_MAP_LOG_LEVEL", "INFO").upper()
