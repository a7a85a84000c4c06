# makemyloop/addressing/resolver.py
# -*- coding: utf-8 -*-
"""
Address resolver: free text ⇄ coordinates.

- resolve_address(text)     → GeoPoint, or AddressNotFound
- reverse_resolve(lat, lon) → human label, or a "lat, lon" fallback

The text is never validated locally. Whatever the user typed goes to the
geocoder and an empty answer is the only failure signal.
"""

from __future__ import annotations

from typing import Optional

from makemyloop.core.models import GeoPoint
from makemyloop.infra.logging import get_logger
from makemyloop.services.common import AddressNotFound, _short

from makemyloop.addressing.coords import (
      coordinate_label
    , filter_hits
)

_log = get_logger(__name__)


# ------------------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------------------

def resolve_address(text: str, *, client) -> GeoPoint:
    """
    Geocode `text` and return the first place found.

    `client` is anything exposing `geocode_search(text, limit=...)`,
    normally a LoopServicesClient.

    Raises
    ------
    AddressNotFound
        When the geocoder returns no usable place.
    """
    places = client.geocode_search(text, limit=1)
    hits = filter_hits(places)
    if not hits:
        _log.warning("Address not found: %s", _short(text))
        raise AddressNotFound(f"Could not geocode text: {text!r}")

    h = hits[0]
    point = GeoPoint(
          lat=h["lat"]
        , lon=h["lon"]
        , label=h["label"] or coordinate_label(h["lat"], h["lon"])
    )
    _log.info("Resolved %s → (%.6f, %.6f)", _short(text), point.lat, point.lon)
    return point


def reverse_resolve(lat: float, lon: float, *, client) -> str:
    """
    Label for a clicked map coordinate: the geocoder's display name, else
    "{lat:.4f}, {lon:.4f}".
    """
    data = client.geocode_reverse(lat, lon)
    name: Optional[str] = (data or {}).get("display_name")
    if name:
        return str(name)

    label = coordinate_label(lat, lon)
    _log.info(
        "Reverse geocode gave no name for (%.6f, %.6f) (%s) → %s",
        lat, lon, (data or {}).get("error", "empty answer"), label
    )
    return label


if __name__ == "__main__":
    """
    Quick manual check:
        python -m makemyloop.addressing.resolver "Lorient, France"
    """
    import json
    import sys

    from makemyloop.infra.logging import init_logging
    from makemyloop.services.client import LoopServicesClient

    init_logging(level="INFO")

    with LoopServicesClient.from_env() as client:
        for raw in sys.argv[1:] or ["Lorient, France"]:
            try:
                pt = resolve_address(raw, client=client)
            except AddressNotFound as exc:
                print(f"\nINPUT : {raw!r}\nERROR : {exc}")
                continue
            print(f"\nINPUT : {raw!r}")
            print(json.dumps({"lat": pt.lat, "lon": pt.lon, "label": pt.label}, ensure_ascii=False, indent=2))
