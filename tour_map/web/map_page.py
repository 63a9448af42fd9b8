"""Full-page map rendering with folium.

The page embeds the same datasets the update API returns for the caller and
polls ``/api/updates`` to extend the track as new positions arrive.
"""

from __future__ import annotations

import html
import json
from typing import Any, Dict, List, Sequence, Tuple
from urllib.parse import quote

import folium  # Using folium to build an interactive Leaflet map.

from ..config import MAP_DEFAULT_CENTER, MAP_DEFAULT_ZOOM, MAP_POLL_INTERVAL_MS
from ..models import Coordinate
from ..services.query import UpdateResult
from ..utils import format_rfc3339

LatLon = Tuple[float, float]

_TRACK_COLOR = "#2c7bb6"
_CURRENT_COLOR = "#d73027"

_POLL_SCRIPT = """
(function (map, data) {
  var seen = {};
  Object.keys(data.images).forEach(function (name) { seen[name] = true; });
  var tail = data.waypoints.length ? [data.waypoints[data.waypoints.length - 1]] : [];
  var live = L.polyline(tail, {color: "%(color)s", weight: 4, opacity: 0.8}).addTo(map);
  var since = data.lastModified;
  function imagePopup(name) {
    var url = "/images/" + encodeURIComponent(name);
    return '<a href="' + url + '" target="_blank"><img src="' + url + '" width="200"></a>';
  }
  function poll() {
    var params = new URLSearchParams();
    if (since && since !== "%(zero)s") { params.set("since", since); }
    if (data.code) { params.set("code", data.code); }
    fetch("/api/updates?" + params.toString(), {cache: "no-store"})
      .then(function (resp) { return resp.ok ? resp.json() : null; })
      .then(function (update) {
        if (!update) { return; }
        (update.waypoints || []).forEach(function (point) { live.addLatLng(point); });
        Object.keys(update.images || {}).forEach(function (name) {
          if (seen[name]) { return; }
          seen[name] = true;
          L.marker(update.images[name]).bindPopup(imagePopup(name)).addTo(map);
        });
        since = update.lastModified;
      })
      .catch(function () {});
  }
  setInterval(poll, %(interval)d);
})(%(map_name)s, %(data)s);
"""


def _bounds(points: Sequence[LatLon]) -> List[List[float]]:
    lats = [p[0] for p in points]
    lngs = [p[1] for p in points]
    return [[min(lats), min(lngs)], [max(lats), max(lngs)]]


def _script_json(value: Any) -> str:
    """JSON for embedding inside a <script> element."""

    return json.dumps(value, allow_nan=False).replace("</", "<\\/")


def _image_popup(name: str) -> folium.Popup:
    url = "/images/" + quote(name)
    return folium.Popup(
        html=f'<a href="{url}" target="_blank"><img src="{url}" width="200"></a>',
        max_width=220,
    )


def page_data(result: UpdateResult, code: str | None) -> Dict[str, Any]:
    """Inline dataset shared with the polling script."""

    return {
        "waypoints": [wp.location.as_pair() for wp in result.waypoints],
        "images": {name: coord.as_pair() for name, coord in result.images.items()},
        "lastModified": format_rfc3339(result.last_modified),
        "code": code or "",
    }


def build_map(
    result: UpdateResult,
    code: str | None = None,
    *,
    default_center: LatLon = MAP_DEFAULT_CENTER,
    default_zoom: int = MAP_DEFAULT_ZOOM,
    poll_interval_ms: int = MAP_POLL_INTERVAL_MS,
) -> folium.Map:
    points: List[LatLon] = [
        (wp.location.lat, wp.location.lng) for wp in result.waypoints
    ]
    center = points[-1] if points else default_center
    folium_map = folium.Map(location=center, zoom_start=default_zoom, control_scale=True)

    if points:
        folium.PolyLine(
            points,
            color=_TRACK_COLOR,
            weight=4,
            opacity=0.8,
            tooltip="Track",
        ).add_to(folium_map)
        folium.CircleMarker(
            location=points[-1],
            radius=7,
            color=_CURRENT_COLOR,
            fill=True,
            fill_color=_CURRENT_COLOR,
            tooltip="Current position",
        ).add_to(folium_map)
        if len(points) > 1:
            folium_map.fit_bounds(_bounds(points))

    images: Dict[str, Coordinate] = result.images
    for name in sorted(images):
        coord = images[name]
        folium.Marker(
            location=(coord.lat, coord.lng),
            popup=_image_popup(name),
            tooltip=html.escape(name),
        ).add_to(folium_map)

    script = _POLL_SCRIPT % {
        "color": _TRACK_COLOR,
        "zero": format_rfc3339(None),
        "interval": poll_interval_ms,
        "map_name": folium_map.get_name(),
        "data": _script_json(page_data(result, code)),
    }
    folium_map.get_root().script.add_child(folium.Element(script))
    return folium_map


def render_map_page(result: UpdateResult, code: str | None = None, **kwargs: Any) -> str:
    """Return the complete HTML document for the map page."""

    return build_map(result, code, **kwargs).get_root().render()


__all__ = ["build_map", "page_data", "render_map_page"]
