"""Startup merge of archived and activity-recorder positions.

The pure :func:`merge_waypoints` holds the ordering/dedup policy; the
:class:`TrackMerger` service gathers the inputs and installs the result in the
shared track.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Sequence

from ..config import DATA_DIR, FIT_DIR, MIN_RETENTION_DISTANCE_KM
from ..geo import prune_waypoints
from ..models import Waypoint
from ..sources import load_archived_waypoints, load_recorded_waypoints
from ..state import TrackStore

WaypointLoader = Callable[[], List[Waypoint]]


def merge_waypoints(
    archived: Sequence[Waypoint],
    recorded: Sequence[Waypoint],
    *,
    min_distance_km: float = MIN_RETENTION_DISTANCE_KM,
) -> List[Waypoint]:
    """Combine both sources into one ordered, pruned track.

    Recorder positions are authoritative: archived positions at or before the
    latest recorder timestamp are dropped. The cut-off is the single newest
    recorder timestamp, not a per-file window.
    """

    archived = [wp for wp in archived if wp.location is not None]
    recorded = [wp for wp in recorded if wp.location is not None]

    if recorded:
        latest_recorded = max(wp.timestamp for wp in recorded)
        archived = [wp for wp in archived if wp.timestamp > latest_recorded]

    combined = sorted([*archived, *recorded], key=lambda wp: wp.timestamp)
    return prune_waypoints(combined, min_distance_km)


@dataclass(slots=True)
class MergeSummary:
    archived: int
    recorded: int
    total: int
    pruned: int


@dataclass(slots=True)
class TrackMergerConfig:
    archive_loader: WaypointLoader
    recorder_loader: WaypointLoader
    min_distance_km: float = MIN_RETENTION_DISTANCE_KM
    logger: logging.Logger | None = None

    @classmethod
    def from_directories(
        cls, data_dir: str | Path = DATA_DIR, fit_dir: str | Path = FIT_DIR
    ) -> "TrackMergerConfig":
        return cls(
            archive_loader=lambda: load_archived_waypoints(data_dir),
            recorder_loader=lambda: load_recorded_waypoints(fit_dir),
        )


class TrackMerger:
    def __init__(self, config: TrackMergerConfig | None = None):
        self.config = config or TrackMergerConfig.from_directories()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def load(self, track: TrackStore) -> MergeSummary:
        """Build the startup track and install it together with its watermark."""

        archived = self.config.archive_loader()
        recorded = self.config.recorder_loader()
        merged = merge_waypoints(
            archived, recorded, min_distance_km=self.config.min_distance_km
        )
        track.replace(merged)

        kept_archived = len(archived)
        if recorded:
            latest = max(wp.timestamp for wp in recorded)
            kept_archived = sum(1 for wp in archived if wp.timestamp > latest)
        summary = MergeSummary(
            archived=len(archived),
            recorded=len(recorded),
            total=kept_archived + len(recorded),
            pruned=len(merged),
        )
        self._log.info(
            "Loaded %d JSON files, %d FIT waypoints, %d total waypoints, %d after pruning",
            summary.archived,
            summary.recorded,
            summary.total,
            summary.pruned,
        )
        return summary


__all__ = ["MergeSummary", "TrackMerger", "TrackMergerConfig", "merge_waypoints"]
