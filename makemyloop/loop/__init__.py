from __future__ import annotations

# ── geometry + routing ──────────────────────────────────────────────────────────
from .geometry import synthesize, far_point, random_bearing
from .materializer import materialize, estimate_minutes

# ── records + history ───────────────────────────────────────────────────────────
from .builder import (
      build_loop
    , parse_target
    , target_distance_km
    , color_for_index
)
from .history import HistoryStore

# ── export + display ────────────────────────────────────────────────────────────
from .export import export_stops, navigation_url, open_in_navigation
from .formatting import format_target, format_summary

__all__ = [
      "synthesize"
    , "far_point"
    , "random_bearing"
    , "materialize"
    , "estimate_minutes"
    , "build_loop"
    , "parse_target"
    , "target_distance_km"
    , "color_for_index"
    , "HistoryStore"
    , "export_stops"
    , "navigation_url"
    , "open_in_navigation"
    , "format_target"
    , "format_summary"
]
