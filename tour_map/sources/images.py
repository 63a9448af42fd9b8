"""EXIF GPS extraction for geotagged photos (via Pillow)."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

from PIL import Image, UnidentifiedImageError

from ..errors import SourceReadError
from ..models import Coordinate

_LOGGER = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".tif", ".tiff"})

_GPS_IFD_TAG = 0x8825
_GPS_LATITUDE_REF = 1
_GPS_LATITUDE = 2
_GPS_LONGITUDE_REF = 3
_GPS_LONGITUDE = 4


def is_image_file(path: str | Path) -> bool:
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS


def _dms_to_degrees(dms: Sequence[Any]) -> float:
    """Convert an EXIF (degrees, minutes, seconds) triple to decimal degrees."""

    parts = [float(part) for part in dms]
    if len(parts) != 3:
        raise ValueError(f"expected 3 DMS components, got {len(parts)}")
    degrees, minutes, seconds = parts
    return degrees + minutes / 60.0 + seconds / 3600.0


def _ref(value: Any) -> str:
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    return str(value or "").strip("\x00 ").upper()


def gps_ifd_to_coordinate(gps: Mapping[int, Any]) -> Coordinate | None:
    """Return the coordinate stored in an EXIF GPS IFD, or None when absent."""

    if _GPS_LATITUDE not in gps or _GPS_LONGITUDE not in gps:
        return None
    try:
        lat = _dms_to_degrees(gps[_GPS_LATITUDE])
        lng = _dms_to_degrees(gps[_GPS_LONGITUDE])
    except (TypeError, ValueError, ZeroDivisionError) as exc:
        raise SourceReadError(f"malformed GPS coordinates: {exc}") from exc
    # A 0/0 rational (no fix) converts to NaN.
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise SourceReadError(f"non-finite GPS coordinates: {lat}, {lng}")
    if _ref(gps.get(_GPS_LATITUDE_REF)) == "S":
        lat = -lat
    if _ref(gps.get(_GPS_LONGITUDE_REF)) == "W":
        lng = -lng
    return Coordinate(lat=lat, lng=lng)


def extract_gps_coordinate(path: str | Path) -> Coordinate | None:
    """Read the GPS position of a photo.

    Raises:
        SourceReadError: If the file is not a readable image.
    """

    try:
        with Image.open(path) as image:
            gps = image.getexif().get_ifd(_GPS_IFD_TAG)
    except (OSError, UnidentifiedImageError, SyntaxError) as exc:
        raise SourceReadError(f"cannot read EXIF from {path}: {exc}") from exc
    return gps_ifd_to_coordinate(gps)


def scan_image_locations(images_dir: str | Path) -> Dict[str, Coordinate]:
    """Map every geotagged photo under ``images_dir`` (by file name) to its position."""

    base = Path(images_dir)
    if not base.is_dir():
        _LOGGER.warning("Images directory %s does not exist", base)
        return {}

    locations: Dict[str, Coordinate] = {}
    for path in sorted(base.rglob("*")):
        if not path.is_file() or not is_image_file(path):
            continue
        try:
            coordinate = extract_gps_coordinate(path)
        except SourceReadError as exc:
            _LOGGER.warning("Error extracting GPS from %s: %s", path.name, exc)
            continue
        if coordinate is None:
            _LOGGER.debug("No GPS data in %s", path.name)
            continue
        locations[path.name] = coordinate
    return locations


__all__ = [
    "IMAGE_EXTENSIONS",
    "extract_gps_coordinate",
    "gps_ifd_to_coordinate",
    "is_image_file",
    "scan_image_locations",
]
