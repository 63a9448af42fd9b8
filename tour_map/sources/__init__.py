"""Input sources feeding the track and the photo index."""

from .access_codes import read_access_codes  # noqa: F401
from .archive import ArchiveWriter, load_archived_waypoints  # noqa: F401
from .fit_files import load_recorded_waypoints  # noqa: F401
from .images import scan_image_locations  # noqa: F401
from .live_feed import LiveFeedClient, LiveFetch, read_tracking_token  # noqa: F401
