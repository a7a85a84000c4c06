# makemyloop/loop/materializer.py
# -*- coding: utf-8 -*-

"""
Turn candidate anchors into a routed loop.

The router answers in (lon, lat) and meters; the rest of the project speaks
(lat, lon) and kilometres, and estimates durations at its own fixed pace.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Sequence

from makemyloop.core.config import get_loop_defaults
from makemyloop.core.models import MaterializedRoute
from makemyloop.core.types import LatLonPair, LonLatPair
from makemyloop.infra.logging import get_logger
from makemyloop.services.common import Unroutable

_log = get_logger(__name__)


def estimate_minutes(distance_km: float) -> int:
    """Minutes to cover `distance_km` at the assumed pace (12 min/km at 5 km/h)."""
    return int(round(distance_km * get_loop_defaults().minutes_per_km))


def _first_route(data: Dict[str, Any]) -> Dict[str, Any]:
    routes = (data or {}).get("routes") or []
    if not routes:
        raise Unroutable(f"Routing service returned no route (code={(data or {}).get('code')})")
    return routes[0]


def _distance_m(route: Dict[str, Any]) -> float:
    raw = route.get("distance")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or not math.isfinite(raw):
        raise Unroutable(f"Route has no usable distance: {raw!r}")
    return float(raw)


def _latlon_path(geometry: Any) -> List[LatLonPair]:
    coords = (geometry or {}).get("coordinates") if isinstance(geometry, dict) else None
    return [(float(c[1]), float(c[0])) for c in (coords or [])]


def materialize(anchors: Sequence[LonLatPair], *, client) -> MaterializedRoute:
    """
    Route through `anchors` on foot and normalize the answer.

    `client` is anything exposing `route_foot(coords_lonlat)`, normally a
    LoopServicesClient.

    Raises
    ------
    Unroutable
        No route, a geometry too short to draw, or no reported distance.
    """
    data = client.route_foot([list(a) for a in anchors])
    route = _first_route(data)

    path = _latlon_path(route.get("geometry"))
    if len(path) < 2:
        raise Unroutable(f"Route geometry has {len(path)} point(s)")

    distance_km = round(_distance_m(route) / 1000.0, 2)
    # the router's own "duration" is never read
    duration_min = estimate_minutes(distance_km)

    _log.info(
        "Materialized loop: %.2f km, ~%s min, %s points",
        distance_km, duration_min, len(path)
    )
    return MaterializedRoute(
          path=tuple(path)
        , distance_km=distance_km
        , duration_min=duration_min
    )
