# makemyloop/loop/builder.py
# -*- coding: utf-8 -*-

"""
Build Loop records.

Given a resolved origin and the user's target (value + unit), this module:

  1. validates the target (finite, > 0)
  2. converts a duration target to a distance at the assumed pace
  3. synthesizes candidate anchors            (loop.geometry)
  4. routes them                              (loop.materializer)
  5. commits the Loop to history, colored by its insertion index

Any failure leaves the history untouched: nothing is committed until the
route is in hand.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Any, Optional, Sequence

from makemyloop.core.config import LoopDefaults, get_loop_defaults
from makemyloop.core.models import GeoPoint, Loop, LoopUnit
from makemyloop.core.types import RandomSource
from makemyloop.infra.logging import get_logger
from makemyloop.loop.geometry import synthesize
from makemyloop.loop.history import HistoryStore
from makemyloop.loop.materializer import materialize
from makemyloop.services.common import InvalidTarget

_log = get_logger(__name__)


# ────────────────────────────────────────────────────────────────────────────────
# Identifiers
# ────────────────────────────────────────────────────────────────────────────────

_id_lock = threading.Lock()
_last_id = 0


def next_loop_id() -> int:
    """Millisecond timestamp, bumped when needed so ids strictly increase."""
    global _last_id
    with _id_lock:
        _last_id = max(_last_id + 1, time.time_ns() // 1_000_000)
        return _last_id


# ────────────────────────────────────────────────────────────────────────────────
# Target handling
# ────────────────────────────────────────────────────────────────────────────────

def parse_target(value: Any) -> float:
    """
    Return `value` as a float, or raise InvalidTarget.

    Numbers and numeric strings are accepted; the result must be finite and > 0.
    """
    if isinstance(value, bool):
        raise InvalidTarget(f"Invalid target value: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidTarget(f"Invalid target value: {value!r}") from None
    if not math.isfinite(number) or number <= 0:
        raise InvalidTarget(f"Target must be a finite number > 0, got {value!r}")
    return number


def target_distance_km(
      value: float
    , unit: LoopUnit
    , *
    , defaults: Optional[LoopDefaults] = None
) -> float:
    """Loop length to aim for. Durations convert at the assumed pace."""
    d = defaults or get_loop_defaults()
    if unit is LoopUnit.DURATION:
        return value * d.km_per_minute
    return value


def color_for_index(index: int, palette: Sequence[str]) -> str:
    """Palette color for the loop at `index` in history (cyclic)."""
    return palette[index % len(palette)]


# ────────────────────────────────────────────────────────────────────────────────
# Builder
# ────────────────────────────────────────────────────────────────────────────────

def build_loop(
      address: str
    , requested_value: Any
    , unit: LoopUnit | str
    , origin: GeoPoint
    , history: HistoryStore
    , *
    , client
    , rng: Optional[RandomSource] = None
    , defaults: Optional[LoopDefaults] = None
) -> Loop:
    """
    Generate one loop from `origin` and commit it to `history`.

    Parameters
    ----------
    address : str
        Label stored on the loop (typed or reverse-geocoded).
    requested_value : number | str
        Target distance (km) or duration (min).
    unit : LoopUnit | str
        "km"/"distance" or "min"/"duration".
    origin : GeoPoint
        Already-resolved start point.
    history : HistoryStore
        Where the loop is committed on success.
    client
        Routing client exposing `route_foot()`.
    rng : RandomSource, optional
        Bearing source; seed it for repeatable loops.

    Raises
    ------
    InvalidTarget
        Bad value; raised before any network call.
    Unroutable
        No route through the synthesized anchors.
    """
    d = defaults or get_loop_defaults()
    value = parse_target(requested_value)
    loop_unit = LoopUnit.parse(unit)
    distance_km = target_distance_km(value, loop_unit, defaults=d)

    _log.info(
        "Building loop from %r: target=%s %s (→ %.3f km)",
        address, value, loop_unit.value, distance_km
    )

    anchors = synthesize(origin, distance_km, rng=rng, km_per_degree=d.km_per_degree)
    route = materialize(anchors, client=client)

    loop = history.commit(
        lambda index: Loop(
              id=next_loop_id()
            , address=address
            , requested_value=value
            , requested_unit=loop_unit
            , actual_distance_km=route.distance_km
            , actual_duration_min=route.duration_min
            , color=color_for_index(index, d.palette)
            , path=route.path
            , anchors=anchors
        )
    )
    _log.info(
        "Loop %s stored: %.2f km, %s min, color=%s",
        loop.id, loop.actual_distance_km, loop.actual_duration_min, loop.color
    )
    return loop
