"""Archived waypoint files: one JSON waypoint per file under the data directory.

Live-feed positions accepted at runtime are written back into the same
directory so that a restart replays them through the merge pipeline.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Iterator, List

from ..errors import SourceReadError, WaypointFormatError
from ..models import Waypoint

_LOGGER = logging.getLogger(__name__)


def _iter_files(base_dir: Path, suffix: str) -> Iterator[Path]:
    for path in sorted(base_dir.rglob("*")):
        if path.is_file() and path.suffix.lower() == suffix:
            yield path


def read_waypoint_file(path: Path) -> Waypoint:
    """Read a single archived waypoint.

    Raises:
        SourceReadError: If the file cannot be read or is not valid JSON.
        WaypointFormatError: If the JSON does not describe a waypoint.
    """

    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, ValueError) as exc:
        raise SourceReadError(f"cannot read {path}: {exc}") from exc
    return Waypoint.from_payload(payload)


def load_archived_waypoints(data_dir: str | Path) -> List[Waypoint]:
    """Return every archived waypoint that carries a location.

    Unreadable or malformed files are logged and skipped.
    """

    base = Path(data_dir)
    if not base.is_dir():
        _LOGGER.warning("Archive directory %s does not exist; no archived waypoints", base)
        return []

    waypoints: List[Waypoint] = []
    for path in _iter_files(base, ".json"):
        try:
            waypoint = read_waypoint_file(path)
        except (SourceReadError, WaypointFormatError) as exc:
            _LOGGER.error("Error parsing JSON file %s: %s", path, exc)
            continue
        if waypoint.location is None:
            _LOGGER.debug("Skipping archived waypoint without location: %s", path)
            continue
        waypoints.append(waypoint)
    return waypoints


class ArchiveWriter:
    """Best-effort persistence of accepted live waypoints."""

    def __init__(self, data_dir: str | Path) -> None:
        base = Path(data_dir)
        self._base_dir = base if base.is_absolute() else Path.cwd() / base
        self._lock = threading.Lock()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def path_for(self, waypoint: Waypoint) -> Path:
        stamp = waypoint.timestamp.strftime("%Y%m%d_%H%M%S")
        return self._base_dir / f"tracking_{stamp}.json"

    def write(self, waypoint: Waypoint, raw: bytes | None = None) -> Path:
        """Write ``waypoint`` to disk and return the file path.

        ``raw`` is the original feed body; when given it is stored verbatim so
        the archive keeps whatever extra fields the feed sent.
        """

        path = self.path_for(waypoint)
        if raw is None:
            raw = json.dumps(waypoint.to_payload(), ensure_ascii=True).encode("utf-8")
        with self._lock:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = path.with_suffix(".tmp")
            temp_path.write_bytes(raw)
            temp_path.replace(path)
        return path


__all__ = ["ArchiveWriter", "load_archived_waypoints", "read_waypoint_file"]
