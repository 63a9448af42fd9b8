"""Client for the Hammerhead live-tracking share feed.

Each poll returns at most one position: the latest location the head unit
shared for a tracking token.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import requests

from ..config import HAMMERHEAD_TRACKING_URL, REQUEST_TIMEOUT
from ..errors import (
    LiveFeedError,
    SourceReadError,
    TrackingTokenNotFoundError,
    WaypointFormatError,
)
from ..models import Waypoint
from .session import create_default_session

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LiveFetch:
    """One decoded feed answer plus the raw body for archiving."""

    waypoint: Waypoint
    raw: bytes


def read_tracking_token(path: str | Path) -> str:
    """Return the stripped tracking token (may be empty).

    Raises:
        SourceReadError: If the token file cannot be read.
    """

    try:
        return Path(path).read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise SourceReadError(f"cannot read tracking token file {path}: {exc}") from exc


def _extract_error_text(resp: requests.Response) -> Optional[str]:
    """Best-effort plain-text snippet of an error body."""

    text = getattr(resp, "text", "")
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    return (trimmed[:197] + "...") if len(trimmed) > 200 else trimmed


class LiveFeedClient:
    """Polls the share endpoint for a single tracking token."""

    def __init__(
        self,
        base_url: str = HAMMERHEAD_TRACKING_URL,
        *,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or create_default_session()
        self._timeout = timeout

    def url_for(self, token: str) -> str:
        return f"{self._base_url}/{quote(token, safe='')}"

    def fetch(self, token: str) -> LiveFetch:
        """Fetch the latest shared position for ``token``.

        Raises:
            TrackingTokenNotFoundError: The feed does not know the token.
            LiveFeedError: Network failure, unexpected status or bad payload.
        """

        url = self.url_for(token)
        _LOGGER.debug("GET %s", url)
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise LiveFeedError(f"error fetching tracking data: {exc}") from exc

        status = response.status_code
        if status == 404:
            raise TrackingTokenNotFoundError(f"tracking token {token} not found")
        if status != 200:
            detail = _extract_error_text(response)
            message = f"non-OK HTTP status {status}"
            raise LiveFeedError(f"{message} | {detail}" if detail else message)

        raw = response.content
        try:
            payload = response.json()
        except ValueError as exc:
            raise LiveFeedError(f"error decoding tracking JSON: {exc}") from exc
        try:
            waypoint = Waypoint.from_payload(payload)
        except WaypointFormatError as exc:
            raise LiveFeedError(f"unexpected tracking payload: {exc}") from exc
        return LiveFetch(waypoint=waypoint, raw=raw)


__all__ = ["LiveFeedClient", "LiveFetch", "read_tracking_token"]
