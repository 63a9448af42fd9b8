"""Tests for the trailing-radius geofence."""

from __future__ import annotations

import random

from tour_map.geo import distance_km, geofence_suffix


def test_geofence_empty_track():
    assert geofence_suffix([], 10.0) == []


def test_geofence_keeps_everything_within_radius(nearby_track):
    assert geofence_suffix(nearby_track, 10.0) == nearby_track


def test_geofence_cuts_history_outside_radius(long_track):
    result = geofence_suffix(long_track, 10.0)
    # 40.69, 40.70 and 40.7128 are within ~2.5 km of the last point; 40.40 is ~35 km away.
    assert result == long_track[2:]


def test_geofence_stops_at_first_far_point_without_gaps(make_track):
    track = make_track(
        [
            (40.0000, -74.0000),  # within radius of the end, but before the excursion
            (40.2000, -74.0000),  # ~22 km away
            (40.0100, -74.0000),
            (40.0000, -74.0010),
        ]
    )
    assert geofence_suffix(track, 10.0) == track[2:]


def test_geofence_radius_is_exclusive_bound(make_track):
    track = make_track([(40.0, -74.0), (40.05, -74.0)])
    exact = distance_km(track[0].location, track[1].location)
    assert geofence_suffix(track, exact) == track
    assert geofence_suffix(track, exact * 0.999) == track[1:]


def test_geofence_single_point(make_waypoint):
    track = [make_waypoint(1.0, 2.0)]
    assert geofence_suffix(track, 0.0) == track


def test_geofence_properties_on_random_tracks(make_track):
    rng = random.Random(3)
    for _ in range(50):
        lat, lng = 45.0, 7.0
        points = []
        for _ in range(rng.randint(1, 60)):
            lat += rng.uniform(-0.05, 0.05)
            lng += rng.uniform(-0.05, 0.05)
            points.append((lat, lng))
        track = make_track(points)
        radius = rng.uniform(0.5, 20.0)

        result = geofence_suffix(track, radius)

        assert result, "the last point is always visible"
        assert result == track[len(track) - len(result) :]
        last = track[-1].location
        for waypoint in result:
            assert distance_km(last, waypoint.location) <= radius
