"""Periodic rebuild of the photo location index."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict

from ..config import IMAGES_DIR
from ..models import Coordinate
from ..sources import scan_image_locations
from ..state import ImageLocationIndex

Scanner = Callable[[], Dict[str, Coordinate]]


class ImageScanner:
    def __init__(
        self,
        images_dir: str | Path = IMAGES_DIR,
        *,
        scanner: Scanner | None = None,
    ) -> None:
        self._scanner = scanner or (lambda: scan_image_locations(images_dir))
        self._log = logging.getLogger(self.__class__.__name__)

    def refresh(self, index: ImageLocationIndex) -> int:
        """Scan outside the lock, then swap the new map in. Returns its size."""

        locations = self._scanner()
        index.replace(locations)
        self._log.info("Indexed %d geotagged images", len(locations))
        return len(locations)


__all__ = ["ImageScanner"]
