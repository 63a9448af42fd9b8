"""HTTP presentation layer."""

from .app import NO_CACHE, create_app, update_payload
from .map_page import render_map_page

__all__ = ["NO_CACHE", "create_app", "render_map_page", "update_payload"]
