# makemyloop/services/mixins.py
# -*- coding: utf-8 -*-
"""
Reusable mixins for the HTTP client:
- GeocodingMixin: Nominatim free-text search and reverse lookup
- RoutingMixin: OSRM multi-point route with full geometry

Expectations for the concrete client class that inherits these mixins:
- Attributes:
    self.cfg                 : ServiceConfig (see makemyloop.services.common)
- Methods:
    self._get(base_url, path, params=None, cache=True,
              empty_on_client_error=False)           -> dict | list | None

Both mixins return raw JSON; normalization happens in the pipeline modules
(addressing.resolver, loop.materializer).
"""

from __future__ import annotations

from typing import Any as _Any, Dict as _Dict, Sequence as _Sequence

from makemyloop.core.types import JSONDict, JSONList
from makemyloop.infra.logging import get_logger
from .common import _short

_log = get_logger(__name__)


# ────────────────────────────────────────────────────────────────────────────────
# Geocoding
# ────────────────────────────────────────────────────────────────────────────────

class GeocodingMixin:
    """
    Free-text and reverse geocoding over Nominatim.

    Requires concrete client to provide:
      - self._get(...)
      - self.cfg.geocoder_url, self.cfg.language, self.cfg.contact_email
    """

    def _geocoder_params(self, **params: _Any) -> _Dict[str, _Any]:
        out: _Dict[str, _Any] = {"format": "json", **params}
        if self.cfg.language:
            out["accept-language"] = self.cfg.language
        if self.cfg.contact_email:
            out["email"] = self.cfg.contact_email
        return out

    def geocode_search(self, text: str, limit: int = 1) -> JSONList:
        """
        Search by free text.

        The text goes out untouched. Empty or malformed input yields an empty
        list, including when Nominatim refuses it with a 4xx
        ("Nothing to search for.").

        Returns
        -------
        list[dict]    # Nominatim places: {"lat": "..", "lon": "..", "display_name": ..}
        """
        _log.info("GEOCODE search q=%s limit=%s", _short(text), limit)
        raw = self._get(
              self.cfg.geocoder_url
            , "/search"
            , self._geocoder_params(q=text, limit=limit)
            , empty_on_client_error=True
        )
        places = raw if isinstance(raw, list) else []
        _log.debug("GEOCODE search got %s places", len(places))
        return places

    def geocode_reverse(self, lat: float, lon: float) -> JSONDict:
        """
        Reverse lookup for a clicked coordinate.

        Returns raw JSON. Nominatim answers `{"error": "Unable to geocode"}`
        for points with no address (open sea, etc.).
        """
        _log.info("GEOCODE reverse lat=%.6f lon=%.6f", lat, lon)
        raw = self._get(
              self.cfg.geocoder_url
            , "/reverse"
            , self._geocoder_params(lat=lat, lon=lon, addressdetails=1)
        )
        out = raw if isinstance(raw, dict) else {}
        _log.debug("GEOCODE reverse keys=%s", sorted(out.keys()))
        return out


# ────────────────────────────────────────────────────────────────────────────────
# Routing
# ────────────────────────────────────────────────────────────────────────────────

class RoutingMixin:
    """
    OSRM route helper.

    Requires concrete client to provide:
      - self._get(...)
      - self.cfg.router_url, self.cfg.routing_profile
    """

    def route_foot(
        self,
        coords_lonlat: _Sequence[_Sequence[float]],
        profile: str | None = None,
    ) -> JSONDict:
        """
        Route through the given (lon, lat) points in order, requesting the
        full GeoJSON geometry.

        Routes are not cached: anchors are random, so keys would never repeat.

        Returns
        -------
        dict : raw OSRM response ({"code": "Ok", "routes": [...], ...})
        """
        prof = profile or self.cfg.routing_profile
        joined = ";".join(f"{lon},{lat}" for lon, lat in coords_lonlat)
        _log.info("ROUTE %s coords=%s", prof, _short([list(c) for c in coords_lonlat]))
        data = self._get(
              self.cfg.router_url
            , f"/route/v1/{prof}/{joined}"
            , {"overview": "full", "geometries": "geojson"}
            , cache=False
        )
        out = data if isinstance(data, dict) else {}
        _log.debug(
            "ROUTE %s code=%s n_routes=%s",
            prof, out.get("code"), len(out.get("routes") or []),
        )
        return out
