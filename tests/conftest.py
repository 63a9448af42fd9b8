"""Global pytest fixtures & helpers.

Adds project root to path and provides waypoint factories shared by the
merge, query and web tests.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from tour_map.models import Coordinate, Waypoint
from tour_map.state import AppState

BASE_TIME = datetime(2023, 12, 1, 10, 0, 0, tzinfo=timezone.utc)


# --- Factory helpers -------------------------------------------------
def make_waypoint(lat, lng, minutes=0):
    return Waypoint(
        location=Coordinate(lat=lat, lng=lng),
        timestamp=BASE_TIME + timedelta(minutes=minutes),
    )


def make_track(points):
    """Build waypoints one minute apart from ``(lat, lng)`` pairs."""
    return [make_waypoint(lat, lng, minutes=i) for i, (lat, lng) in enumerate(points)]


# --- Fixtures --------------------------------------------------------
@pytest.fixture(name="make_waypoint")
def fixture_make_waypoint():
    return make_waypoint


@pytest.fixture(name="make_track")
def fixture_make_track():
    return make_track


@pytest.fixture
def base_time():
    return BASE_TIME


@pytest.fixture
def app_state():
    return AppState()


@pytest.fixture
def nearby_track():
    # Two points roughly 1 km apart in Manhattan, both inside any 10 km fence.
    return [
        make_waypoint(40.7128, -74.0060, minutes=0),
        make_waypoint(40.7200, -74.0070, minutes=60),
    ]


@pytest.fixture
def long_track():
    # Starts ~60 km south of the current position and ends with a local loop.
    return make_track(
        [
            (40.1600, -74.0060),
            (40.4000, -74.0060),
            (40.6900, -74.0060),
            (40.7000, -74.0060),
            (40.7128, -74.0060),
        ]
    )
