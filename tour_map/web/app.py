"""Flask application: update API, map page and photo files."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from flask import Flask, Response, request, send_from_directory

from ..config import GEOFENCE_RADIUS_KM, IMAGE_CACHE_MAX_AGE_SECONDS, IMAGES_DIR
from ..errors import InvalidSinceError
from ..services.query import UpdateResult, parse_since, query_updates
from ..state import AppState
from ..utils import format_rfc3339
from .map_page import render_map_page

LOGGER = logging.getLogger(__name__)

NO_CACHE = "no-cache, no-store, must-revalidate"


def update_payload(result: UpdateResult) -> Dict[str, Any]:
    return {
        "waypoints": [wp.location.as_pair() for wp in result.waypoints],
        "images": {name: coord.as_pair() for name, coord in result.images.items()},
        "lastModified": format_rfc3339(result.last_modified),
    }


def _plain_error(message: str, status: int) -> Response:
    return Response(message + "\n", status=status, mimetype="text/plain")


def create_app(
    state: AppState,
    *,
    images_dir: str | Path = IMAGES_DIR,
    radius_km: float = GEOFENCE_RADIUS_KM,
    image_max_age: int = IMAGE_CACHE_MAX_AGE_SECONDS,
    map_options: Dict[str, Any] | None = None,
) -> Flask:
    """Build the web app around an already initialised :class:`AppState`."""

    app = Flask(__name__)
    images_root = os.path.abspath(images_dir)
    page_options = dict(map_options or {})

    @app.get("/api/updates")
    def updates() -> Response:
        try:
            since = parse_since(request.args.get("since"))
        except InvalidSinceError as exc:
            return _plain_error(str(exc), 400)

        result = query_updates(
            state, since, request.args.get("code"), radius_km=radius_km
        )
        try:
            body = json.dumps(update_payload(result), allow_nan=False)
        except (TypeError, ValueError) as exc:
            LOGGER.error("Error encoding JSON response: %s", exc, exc_info=True)
            return _plain_error("Internal server error", 500)

        response = Response(body, mimetype="application/json")
        response.headers["Cache-Control"] = NO_CACHE
        return response

    @app.get("/")
    def index() -> Response:
        code = request.args.get("code")
        result = query_updates(state, None, code, radius_km=radius_km)
        try:
            page = render_map_page(result, code, **page_options)
        except (TypeError, ValueError) as exc:
            LOGGER.error("Error rendering map page: %s", exc, exc_info=True)
            return _plain_error("Internal server error", 500)
        response = Response(page, mimetype="text/html")
        response.headers["Cache-Control"] = NO_CACHE
        return response

    @app.get("/images/<path:filename>")
    def images(filename: str) -> Response:
        response = send_from_directory(images_root, filename, max_age=image_max_age)
        response.headers["Cache-Control"] = f"public, max-age={image_max_age}"
        return response

    return app


__all__ = ["NO_CACHE", "create_app", "update_payload"]
