"""Periodic live-feed integration.

Every tick refreshes the access codes and then asks the live-tracking feed for
the newest position. A position is appended to the shared track only when it
is strictly newer than the watermark; appended positions are archived to disk
on a best-effort basis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol

from ..config import CODES_FILE, DATA_DIR, TRACKING_TOKEN_FILE
from ..errors import LiveFeedError, SourceReadError, TrackingTokenNotFoundError
from ..models import Waypoint
from ..sources import (
    ArchiveWriter,
    LiveFeedClient,
    LiveFetch,
    read_access_codes,
    read_tracking_token,
)
from ..state import AppState


class FeedClient(Protocol):
    def fetch(self, token: str) -> LiveFetch: ...


class WaypointWriter(Protocol):
    def write(self, waypoint: Waypoint, raw: bytes | None = None) -> Path: ...


@dataclass(slots=True)
class LiveFeedConfig:
    client: FeedClient
    writer: WaypointWriter
    token_reader: Callable[[], str]
    codes_reader: Callable[[], list[str]]
    logger: logging.Logger | None = None

    @classmethod
    def from_files(
        cls,
        *,
        token_file: str | Path = TRACKING_TOKEN_FILE,
        codes_file: str | Path = CODES_FILE,
        data_dir: str | Path = DATA_DIR,
        client: FeedClient | None = None,
    ) -> "LiveFeedConfig":
        return cls(
            client=client or LiveFeedClient(),
            writer=ArchiveWriter(data_dir),
            token_reader=lambda: read_tracking_token(token_file),
            codes_reader=lambda: read_access_codes(codes_file),
        )


class LiveFeedIntegrator:
    """Owns the token bookkeeping and the admission rule for live positions."""

    def __init__(self, state: AppState, config: LiveFeedConfig):
        self.state = state
        self.config = config
        self._log = config.logger or logging.getLogger(self.__class__.__name__)
        self._last_token: str | None = None
        self._suspended = False

    @property
    def suspended(self) -> bool:
        """True while polling is paused for the current token."""

        return self._suspended

    def tick(self) -> None:
        self.refresh_access_codes()
        self.poll_once()

    def refresh_access_codes(self) -> int:
        """Merge the codes file into the shared code set. Returns new codes."""

        try:
            codes = self.config.codes_reader()
        except SourceReadError as exc:
            self._log.warning("Error reading access codes: %s", exc)
            return 0
        added = self.state.codes.add_all(codes)
        if added:
            self._log.info("Added %d access code(s); %d known", added, len(self.state.codes))
        return added

    def _current_token(self) -> str | None:
        """Return the token to poll, or None when this tick should be skipped."""

        try:
            token = self.config.token_reader()
        except SourceReadError as exc:
            self._log.warning("%s", exc)
            return None

        if token != self._last_token:
            self._last_token = token
            self._suspended = False
            if token:
                self._log.info("Using new tracking token: %s", token)
        if self._suspended:
            return None
        if not token:
            self._log.warning("Tracking token file is empty; pausing live polling")
            self._suspended = True
            return None
        return token

    def poll_once(self) -> bool:
        """Fetch one candidate and admit it. Returns True when appended."""

        token = self._current_token()
        if token is None:
            return False

        try:
            fetched = self.config.client.fetch(token)
        except TrackingTokenNotFoundError:
            self._log.warning(
                "Tracking token %s not found, stopping further requests", token
            )
            self._suspended = True
            return False
        except LiveFeedError as exc:
            self._log.warning("%s", exc)
            return False

        return self.admit(fetched.waypoint, fetched.raw)

    def admit(self, waypoint: Waypoint, raw: bytes | None = None) -> bool:
        """Append ``waypoint`` if it is new, then archive it."""

        if not self.state.track.append_if_newer(waypoint):
            self._log.debug(
                "Ignoring live waypoint at %s (no location or not newer)",
                waypoint.timestamp,
            )
            return False

        self._log.info("Appended live waypoint at %s", waypoint.timestamp)
        try:
            path = self.config.writer.write(waypoint, raw)
        except OSError as exc:
            self._log.error("Failed to persist live waypoint %s: %s", waypoint.timestamp, exc)
        else:
            self._log.debug("Persisted live waypoint to %s", path)
        return True


__all__ = ["LiveFeedConfig", "LiveFeedIntegrator"]
