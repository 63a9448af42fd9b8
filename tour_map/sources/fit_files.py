"""Activity recorder (.fit) files parsed with fitparse."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, List, Mapping

from fitparse import FitFile, FitParseError

from ..errors import SourceReadError
from ..models import Coordinate, Waypoint
from ..utils import ensure_aware

_LOGGER = logging.getLogger(__name__)

# FIT stores positions as signed 32-bit semicircles.
_SEMICIRCLES_TO_DEGREES = 180.0 / 2**31


def semicircles_to_degrees(value: int | float) -> float:
    return float(value) * _SEMICIRCLES_TO_DEGREES


def record_to_waypoint(values: Mapping[str, Any]) -> Waypoint | None:
    """Convert the values of one ``record`` message into a waypoint.

    Records without a timestamp or without both position fields are skipped.
    """

    timestamp = values.get("timestamp")
    lat = values.get("position_lat")
    lng = values.get("position_long")
    if not isinstance(timestamp, datetime) or lat is None or lng is None:
        return None
    try:
        location = Coordinate(lat=semicircles_to_degrees(lat), lng=semicircles_to_degrees(lng))
    except (TypeError, ValueError):
        return None
    return Waypoint(location=location, timestamp=ensure_aware(timestamp))


def parse_fit_file(path: str | Path) -> List[Waypoint]:
    """Return the positioned records of one activity file.

    Raises:
        SourceReadError: If the file cannot be opened or decoded.
    """

    try:
        fit = FitFile(str(path))
        fit.parse()
        records = list(fit.get_messages("record"))
    except (OSError, FitParseError) as exc:
        raise SourceReadError(f"cannot decode FIT file {path}: {exc}") from exc

    waypoints: List[Waypoint] = []
    for record in records:
        waypoint = record_to_waypoint(record.get_values())
        if waypoint is not None:
            waypoints.append(waypoint)
    return waypoints


def load_recorded_waypoints(fit_dir: str | Path) -> List[Waypoint]:
    """Collect waypoints from every .fit file under ``fit_dir``.

    A missing directory yields no waypoints; bad files are logged and skipped.
    """

    base = Path(fit_dir)
    if not base.is_dir():
        _LOGGER.info("FIT directory %s does not exist; no recorder waypoints", base)
        return []

    waypoints: List[Waypoint] = []
    for path in sorted(base.rglob("*")):
        if not path.is_file() or path.suffix.lower() != ".fit":
            continue
        try:
            parsed = parse_fit_file(path)
        except SourceReadError as exc:
            _LOGGER.error("Error parsing FIT file %s: %s", path, exc)
            continue
        _LOGGER.debug("Read %d positioned records from %s", len(parsed), path)
        waypoints.extend(parsed)
    return waypoints


__all__ = [
    "load_recorded_waypoints",
    "parse_fit_file",
    "record_to_waypoint",
    "semicircles_to_degrees",
]
