# makemyloop/loop/export.py
# -*- coding: utf-8 -*-

"""
Export a loop to Google Maps walking directions.

The deep link carries the loop's address as both origin and destination and
a downsampled list of intermediate stops taken from the routed path, since
the directions URL only accepts a handful of waypoints.
"""

from __future__ import annotations

import webbrowser
from typing import List, Optional
from urllib.parse import quote

from makemyloop.core.config import get_loop_defaults
from makemyloop.core.models import Loop
from makemyloop.core.types import LatLonPath
from makemyloop.infra.logging import get_logger

_log = get_logger(__name__)

GOOGLE_MAPS_DIR_URL = "https://www.google.com/maps/dir/"

# characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def export_stops(path: LatLonPath, *, max_stops: Optional[int] = None) -> List[str]:
    """
    Intermediate stops of `path` as "lat,lon" strings.

    Every `len(path) // max_stops`-th point is kept (every point when that
    is 0), plus the last one; the first and last of the selection are then
    dropped because origin and destination travel separately.

    A 23-point path yields indices 2, 4, ..., 20; a 5-point path 1, 2, 3.
    """
    n = len(path)
    step = n // (max_stops or get_loop_defaults().export_stops)
    if step == 0:
        step = 1

    picked = [p for i, p in enumerate(path) if i % step == 0 or i == n - 1]
    stops = [f"{lat},{lon}" for lat, lon in picked[1:-1]]
    _log.debug("export_stops: n=%s step=%s selected=%s stops=%s", n, step, len(picked), len(stops))
    return stops


def navigation_url(address: str, path: LatLonPath, *, max_stops: Optional[int] = None) -> str:
    """Google Maps multi-stop walking directions, starting and ending at `address`."""
    place = quote(address, safe=_URI_COMPONENT_SAFE)
    waypoints = "|".join(export_stops(path, max_stops=max_stops))
    return (
        f"{GOOGLE_MAPS_DIR_URL}?api=1"
        f"&origin={place}"
        f"&destination={place}"
        f"&waypoints={waypoints}"
        f"&travelmode=walking"
    )


def open_in_navigation(loop: Loop) -> str:
    """Open the loop's deep link in a new browser tab and return the URL."""
    url = navigation_url(loop.address, loop.path)
    _log.info("Opening loop %s in Google Maps", loop.id)
    webbrowser.open_new_tab(url)
    return url
