# makemyloop/loop/formatting.py
# -*- coding: utf-8 -*-

"""
Display strings for loop lists.

Distance loops show the target with one decimal in km, duration loops with
no decimals in min; the routed distance (two decimals) and estimated minutes
are always shown.
"""

from __future__ import annotations

from makemyloop.core.models import Loop, LoopUnit


def format_target(loop: Loop) -> str:
    if loop.requested_unit is LoopUnit.DURATION:
        return f"{loop.requested_value:.0f} min"
    return f"{loop.requested_value:.1f} km"


def format_actual(loop: Loop) -> str:
    return f"{loop.actual_distance_km:.2f} km / {loop.actual_duration_min} min"


def format_summary(loop: Loop) -> str:
    """
    e.g. "5.0 km → 5.12 km (61 min)" or "60 min → 61 min / 5.12 km".
    """
    if loop.requested_unit is LoopUnit.DURATION:
        return (
            f"{format_target(loop)} → {loop.actual_duration_min} min"
            f" / {loop.actual_distance_km:.2f} km"
        )
    return (
        f"{format_target(loop)} → {loop.actual_distance_km:.2f} km"
        f" ({loop.actual_duration_min} min)"
    )
