# tests/conftest.py
# -*- coding: utf-8 -*-
"""
Shared fixtures: a scripted stand-in for LoopServicesClient and a fixed
random source, so no test touches the network.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from makemyloop.core.models import GeoPoint


class FixedRandom:
    """random() always returns the same value → a fixed bearing."""

    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


def osrm_answer(anchors, distance_m: float = 5123.0, n_points: int = 23, duration_s: float = 999.0) -> Dict[str, Any]:
    """OSRM-shaped route going straight from the first to the second anchor and back."""
    (lon0, lat0), (lon1, lat1) = anchors[0], anchors[1]
    half = n_points // 2
    coords: List[List[float]] = []
    for i in range(n_points):
        t = i / half if i <= half else (n_points - 1 - i) / (n_points - 1 - half)
        coords.append([lon0 + (lon1 - lon0) * t, lat0 + (lat1 - lat0) * t])
    return {
        "code": "Ok",
        "routes": [
            {
                "distance": distance_m,
                "duration": duration_s,
                "geometry": {"type": "LineString", "coordinates": coords},
            }
        ],
    }


class FakeClient:
    """
    Scripted client. Each answer can be a value or an exception to raise.
    Calls are recorded in `calls` as (method, args).
    """

    def __init__(
        self,
        places: Optional[List[Dict[str, Any]]] = None,
        reverse: Any = None,
        route: Any = None,
        distance_m: float = 5123.0,
        n_points: int = 23,
    ) -> None:
        self.places = places if places is not None else [
            {"lat": "47.7484", "lon": "-3.3700", "display_name": "Lorient, Morbihan, France"}
        ]
        self.reverse = reverse if reverse is not None else {"display_name": "Quai des Indes, Lorient"}
        self.route = route
        self.distance_m = distance_m
        self.n_points = n_points
        self.calls: List[tuple] = []

    @staticmethod
    def _answer(value):
        if isinstance(value, BaseException):
            raise value
        return value

    def geocode_search(self, text, limit=1):
        self.calls.append(("geocode_search", text))
        return self._answer(self.places)

    def geocode_reverse(self, lat, lon):
        self.calls.append(("geocode_reverse", (lat, lon)))
        return self._answer(self.reverse)

    def route_foot(self, coords_lonlat):
        self.calls.append(("route_foot", [tuple(c) for c in coords_lonlat]))
        if self.route is not None:
            return self._answer(self.route)
        return osrm_answer(coords_lonlat, distance_m=self.distance_m, n_points=self.n_points)

    def methods_called(self) -> List[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def fixed_rng() -> FixedRandom:
    return FixedRandom(0.25)


@pytest.fixture
def origin() -> GeoPoint:
    return GeoPoint(lat=47.7484, lon=-3.37, label="Lorient")
