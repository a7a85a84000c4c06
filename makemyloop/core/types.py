# makemyloop/core/types.py
# -*- coding: utf-8 -*-

"""
Shared type aliases and lightweight protocols.

Contents
--------
- JSON* aliases: JSONScalar, JSONValue, JSONList, JSONDict
- LatLonPair / LonLatPair: the two coordinate orders used in the pipeline
- RandomSource: anything with a `random()` method (e.g. random.Random)
- HasLatLon: duck-typed objects exposing lat/lon
"""

from __future__ import annotations

from typing import (
      Dict
    , List
    , Protocol
    , Sequence
    , Tuple
    , Union
    , runtime_checkable
)


# ────────────────────────────────────────────────────────────────────────────────
# JSON-like structures
# ────────────────────────────────────────────────────────────────────────────────

JSONScalar = Union[str, int, float, bool, None]
"""Scalar values allowed inside JSON structures."""

JSONValue = Union["JSONScalar", "JSONList", "JSONDict"]
"""Recursive JSON value type."""

JSONList = List[JSONValue]
"""List of JSON values."""

JSONDict = Dict[str, JSONValue]
"""Dictionary with string keys and JSON values."""


# ────────────────────────────────────────────────────────────────────────────────
# Geographic helpers
# ────────────────────────────────────────────────────────────────────────────────

LatLonPair = Tuple[float, float]
"""(lat, lon) in decimal degrees. Order used by map surfaces and deep links."""

LonLatPair = Tuple[float, float]
"""(lon, lat) in decimal degrees. Order used by the routing service."""

LatLonPath = Sequence[LatLonPair]
"""Routed polyline as (lat, lon) points."""

Anchors = Tuple[LonLatPair, LonLatPair, LonLatPair]
"""Origin, far point, origin in (lon, lat) order."""


# ────────────────────────────────────────────────────────────────────────────────
# Lightweight protocols
# ────────────────────────────────────────────────────────────────────────────────

@runtime_checkable
class HasLatLon(Protocol):
    """
    Protocol for objects that expose `lat` and `lon` attributes.
    """

    lat: float
    lon: float


class RandomSource(Protocol):
    """
    Source of uniform floats in [0, 1).

    `random.Random` satisfies it; tests pass a stub returning a fixed value.
    """

    def random(self) -> float:
        ...
