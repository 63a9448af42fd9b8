"""Process-wide shared state, split into independently locked cells.

The application passes a single :class:`AppState` handle to every component
instead of relying on module globals. No operation holds locks from two cells
at the same time.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence

from .locks import ReadWriteLock
from .models import Coordinate, Waypoint


class TrackStore:
    """The merged track and its watermark, kept consistent under one lock.

    Invariant: whenever the track is non-empty the watermark equals the
    timestamp of its last waypoint.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._waypoints: List[Waypoint] = []
        self._watermark: datetime | None = None

    def replace(self, waypoints: Sequence[Waypoint]) -> None:
        """Install a freshly merged track and reset the watermark from it."""

        new_waypoints = list(waypoints)
        with self._lock.write_locked():
            self._waypoints = new_waypoints
            self._watermark = new_waypoints[-1].timestamp if new_waypoints else None

    def append_if_newer(self, waypoint: Waypoint) -> bool:
        """Append ``waypoint`` when it has a location and is past the watermark."""

        if waypoint.location is None:
            return False
        with self._lock.write_locked():
            if self._watermark is not None and waypoint.timestamp <= self._watermark:
                return False
            self._waypoints.append(waypoint)
            self._watermark = waypoint.timestamp
            return True

    @property
    def watermark(self) -> datetime | None:
        with self._lock.read_locked():
            return self._watermark

    @contextmanager
    def reading(self) -> Iterator[Sequence[Waypoint]]:
        """Hold the shared lock and expose the live track (do not mutate it)."""

        with self._lock.read_locked():
            yield self._waypoints

    def snapshot(self) -> List[Waypoint]:
        with self._lock.read_locked():
            return list(self._waypoints)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._waypoints)


class ImageLocationIndex:
    """Image file name to coordinate mapping, swapped wholesale on rescan."""

    def __init__(self, locations: Mapping[str, Coordinate] | None = None) -> None:
        self._lock = ReadWriteLock()
        self._locations: Dict[str, Coordinate] = dict(locations or {})

    def replace(self, locations: Mapping[str, Coordinate]) -> None:
        new_locations = dict(locations)
        with self._lock.write_locked():
            self._locations = new_locations

    def snapshot(self) -> Dict[str, Coordinate]:
        with self._lock.read_locked():
            return dict(self._locations)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._locations)


class AccessCodeSet:
    """Shared secrets granting the full track. Codes are never removed."""

    def __init__(self, codes: Iterable[str] = ()) -> None:
        self._lock = ReadWriteLock()
        self._codes: set[str] = {code for code in codes if code}

    def add_all(self, codes: Iterable[str]) -> int:
        """Add codes, ignoring blanks. Returns how many were new."""

        incoming = {code.strip() for code in codes if code and code.strip()}
        with self._lock.write_locked():
            before = len(self._codes)
            self._codes.update(incoming)
            return len(self._codes) - before

    def __contains__(self, code: object) -> bool:
        if not isinstance(code, str) or not code:
            return False
        with self._lock.read_locked():
            return code in self._codes

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._codes)


@dataclass
class AppState:
    """Handle threaded through every component entry point."""

    track: TrackStore = field(default_factory=TrackStore)
    images: ImageLocationIndex = field(default_factory=ImageLocationIndex)
    codes: AccessCodeSet = field(default_factory=AccessCodeSet)


__all__ = ["TrackStore", "ImageLocationIndex", "AccessCodeSet", "AppState"]
