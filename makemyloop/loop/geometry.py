# makemyloop/loop/geometry.py
# -*- coding: utf-8 -*-

"""
Candidate loop geometry.

A loop is synthesized as an out-and-back: origin → far point → origin. The far
point sits half the target distance away, in a random direction, using a
flat-earth approximation (1° ≈ 111 km on both axes).

Longitude offsets are NOT scaled by cos(latitude). Far from the equator the
leg is stretched east-west; the routing service corrects the final distance
anyway, and `actual_distance_km` always comes from it.
"""

from __future__ import annotations

import math
import random
from typing import Optional

from makemyloop.core.config import get_loop_defaults
from makemyloop.core.types import Anchors, HasLatLon, RandomSource
from makemyloop.infra.logging import get_logger

_log = get_logger(__name__)

_default_rng = random.Random()


def random_bearing(rng: Optional[RandomSource] = None) -> float:
    """Uniform bearing in [0, 2π) radians."""
    return (rng or _default_rng).random() * 2.0 * math.pi


def far_point(
      lat: float
    , lon: float
    , one_way_km: float
    , bearing: float
    , *
    , km_per_degree: Optional[float] = None
) -> tuple[float, float]:
    """
    (lat, lon) of the point `one_way_km` away along `bearing`, flat-earth.
    """
    scale = km_per_degree or get_loop_defaults().km_per_degree
    offset = one_way_km / scale
    return lat + offset * math.sin(bearing), lon + offset * math.cos(bearing)


def synthesize(
      origin: HasLatLon
    , target_total_km: float
    , *
    , rng: Optional[RandomSource] = None
    , km_per_degree: Optional[float] = None
) -> Anchors:
    """
    Anchors of a candidate loop around `origin`.

    Parameters
    ----------
    origin : HasLatLon
        Resolved start point.
    target_total_km : float
        Full loop length; must be > 0 (checked by the caller).
    rng : RandomSource, optional
        Source of the bearing; pass a seeded random.Random for repeatable runs.

    Returns
    -------
    ((lon, lat), (far_lon, far_lat), (lon, lat))
    """
    one_way_km = target_total_km / 2.0
    bearing = random_bearing(rng)
    far_lat, far_lon = far_point(
          origin.lat
        , origin.lon
        , one_way_km
        , bearing
        , km_per_degree=km_per_degree
    )

    start = (origin.lon, origin.lat)
    anchors: Anchors = (start, (far_lon, far_lat), start)
    _log.debug(
        "synthesize: total=%.3fkm one_way=%.3fkm bearing=%.4frad far=(%.6f, %.6f)",
        target_total_km, one_way_km, bearing, far_lat, far_lon
    )
    return anchors
