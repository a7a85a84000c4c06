# makemyloop/core/config.py
# -*- coding: utf-8 -*-

"""
Core configuration models and globals.

Pure configuration structures, independent of the HTTP layer. Safe to import
from anywhere.

Current contents
----------------
- ProjectConfig: high-level defaults for the whole project
- LoopDefaults: constants of the loop pipeline (pace, palette, sampling)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


# ────────────────────────────────────────────────────────────────────────────────
# High-level project configuration
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProjectConfig:
    """
    Global project configuration.

    Attributes
    ----------
    app_name : str
        Name sent in the User-Agent of outgoing requests.
    default_language : str
        Language tag sent to the geocoder for labels.
    """

    app_name: str = "MakeMyLoop"
    default_language: str = "fr"


# ────────────────────────────────────────────────────────────────────────────────
# Loop pipeline defaults
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LoopDefaults:
    """
    Constants shared by the loop pipeline.

    Attributes
    ----------
    pace_kmh : float
        Assumed walking pace. Drives both the duration -> distance conversion
        of requests and the duration estimate of routed loops.
    km_per_degree : float
        Flat-earth scale used to place the far point (1° ≈ 111 km).
    palette : tuple[str, ...]
        Ordered display colors, assigned cyclically by insertion index.
    export_stops : int
        Target number of intermediate stops in a navigation deep link.
    visible_loops : int
        How many of the most recent loops the UI lists.
    """

    pace_kmh: float = 5.0
    km_per_degree: float = 111.0
    palette: Tuple[str, ...] = (
          "#ff6b6b"
        , "#4ecdc4"
        , "#45b7d1"
        , "#f9ca24"
        , "#f0932b"
    )
    export_stops: int = 10
    visible_loops: int = 6

    @property
    def km_per_minute(self) -> float:
        """Distance covered in one minute at `pace_kmh`."""
        return self.pace_kmh / 60.0

    @property
    def minutes_per_km(self) -> float:
        """Minutes needed for one kilometre at `pace_kmh` (12 at 5 km/h)."""
        return 60.0 / self.pace_kmh


# ────────────────────────────────────────────────────────────────────────────────
# Singleton-style instances
# ────────────────────────────────────────────────────────────────────────────────

PROJECT_CONFIG = ProjectConfig()
LOOP_DEFAULTS = LoopDefaults()


def get_project_config() -> ProjectConfig:
    """
    Return the global project configuration.

    A function rather than a constant so it can become dynamic later without
    touching call sites.
    """
    return PROJECT_CONFIG


def get_loop_defaults() -> LoopDefaults:
    """
    Return the global loop pipeline defaults.
    """
    return LOOP_DEFAULTS
