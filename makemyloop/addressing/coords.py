# makemyloop/addressing/coords.py
# -*- coding: utf-8 -*-

"""
Coordinate / geocoder-hit helpers for the addressing subsystem.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from makemyloop.infra.logging import get_logger

_log = get_logger(__name__)


# ------------------------------------------------------------------------------
# Fallback label for a bare coordinate
# ------------------------------------------------------------------------------

def coordinate_label(lat: float, lon: float) -> str:
    """'47.7484, -3.3700' style label, four decimals."""
    return f"{lat:.4f}, {lon:.4f}"


# ------------------------------------------------------------------------------
# Normalize raw Nominatim place
# ------------------------------------------------------------------------------

def normalize_hit(raw: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Normalize a Nominatim place to:
        {"lat": float, "lon": float, "label": str|None}

    Nominatim sends lat/lon as strings. Returns None when they are missing
    or not numeric.
    """
    if not isinstance(raw, dict):
        return None
    try:
        lat = float(raw["lat"])
        lon = float(raw["lon"])
    except (KeyError, TypeError, ValueError):
        _log.debug("normalize_hit: dropping place without numeric lat/lon: %r", raw)
        return None

    label = raw.get("display_name") or raw.get("name")
    return {"lat": lat, "lon": lon, "label": label}


def filter_hits(places: Any) -> List[Dict[str, Any]]:
    """
    Normalize a list of places, keeping provider order and dropping the
    ones without usable coordinates.
    """
    if not isinstance(places, list):
        return []
    hits = [h for h in (normalize_hit(p) for p in places) if h is not None]
    _log.debug("filter_hits: kept %s of %s places", len(hits), len(places))
    return hits
