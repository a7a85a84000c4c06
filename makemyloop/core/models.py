# makemyloop/core/models.py
# -*- coding: utf-8 -*-

"""
Core domain models (pure dataclasses).

    - GeoPoint: a labelled geographic coordinate
    - LoopUnit: whether a loop was requested as a distance or a duration
    - MaterializedRoute: normalized answer of the routing service
    - Loop: one generated closed route plus its display/export metadata

No HTTP imports, no logging, no randomness. Safe to import from anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from makemyloop.core.types import Anchors, LatLonPair


# ────────────────────────────────────────────────────────────────────────────────
# Basic geographic point
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GeoPoint:
    """
    A labelled geographic point.

    Attributes
    ----------
    lat : float
        Latitude in decimal degrees.
    lon : float
        Longitude in decimal degrees.
    label : str
        Human-readable label (geocoder display name or typed address).
    """

    lat: float
    lon: float
    label: str = ""


# ────────────────────────────────────────────────────────────────────────────────
# Requested unit
# ────────────────────────────────────────────────────────────────────────────────

class LoopUnit(str, Enum):
    """Unit of the user's target. The value doubles as the display unit."""

    DISTANCE = "km"
    DURATION = "min"

    @classmethod
    def parse(cls, value: "LoopUnit | str") -> "LoopUnit":
        """
        Accept a LoopUnit, its value ("km"/"min") or its name
        ("distance"/"duration"), case-insensitive.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for unit in cls:
            if text in (unit.value, unit.name.lower()):
                return unit
        raise ValueError(f"Unknown loop unit: {value!r}")


# ────────────────────────────────────────────────────────────────────────────────
# Routing result
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MaterializedRoute:
    """
    A routed loop as returned by the routing service, normalized.

    Attributes
    ----------
    path : tuple[(lat, lon), ...]
        Routed polyline, at least two points.
    distance_km : float
        Reported distance in km, rounded to two decimals.
    duration_min : int
        Local estimate at the assumed pace, never the service's own figure.
    """

    path: Tuple[LatLonPair, ...]
    distance_km: float
    duration_min: int


# ────────────────────────────────────────────────────────────────────────────────
# Loop
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Loop:
    """
    One generated loop. Immutable once stored in history.

    Attributes
    ----------
    id : int
        Time-derived identifier, strictly increasing within the process.
    address : str
        Address the loop starts from, as typed or reverse-geocoded.
    requested_value : float
        User target, in `requested_unit`.
    requested_unit : LoopUnit
        Distance ("km") or duration ("min").
    actual_distance_km : float
        Routed distance, two decimals.
    actual_duration_min : int
        Estimated duration of the routed distance.
    color : str
        Palette color picked from the insertion index.
    path : tuple[(lat, lon), ...]
        Routed polyline.
    anchors : tuple[(lon, lat), (lon, lat), (lon, lat)]
        Origin, synthesized far point, origin.
    """

    id: int
    address: str
    requested_value: float
    requested_unit: LoopUnit
    actual_distance_km: float
    actual_duration_min: int
    color: str
    path: Tuple[LatLonPair, ...]
    anchors: Anchors

    def bounds(self) -> Tuple[LatLonPair, LatLonPair]:
        """
        South-west and north-east corners of the path, for fitting a map
        viewport to the loop.
        """
        lats = [p[0] for p in self.path]
        lons = [p[1] for p in self.path]
        return (min(lats), min(lons)), (max(lats), max(lons))

    def to_dict(self) -> dict:
        return {
              "id": self.id
            , "address": self.address
            , "requested_value": self.requested_value
            , "requested_unit": self.requested_unit.value
            , "actual_distance_km": self.actual_distance_km
            , "actual_duration_min": self.actual_duration_min
            , "color": self.color
            , "path": [list(p) for p in self.path]
            , "anchors": [list(a) for a in self.anchors]
        }
