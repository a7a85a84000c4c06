# makemyloop/app/session.py
# -*- coding: utf-8 -*-

"""
One user session: the state behind the map page.

LoopSession wires the pipeline together for a front end:

    address → resolve → synthesize → materialize → Loop in history

and turns every failure into a short status string. Nothing here raises for
an expected failure (bad target, unknown address, no route, transport error);
the triggering action just ends with a message and history is unchanged.

Map clicks go through `handle_map_click`, which reverse-geocodes the point
and makes its label the current address.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, List, Optional

import requests

from makemyloop.addressing.coords import coordinate_label
from makemyloop.addressing.resolver import resolve_address, reverse_resolve
from makemyloop.core.config import LoopDefaults, get_loop_defaults
from makemyloop.core.models import Loop, LoopUnit
from makemyloop.core.types import RandomSource
from makemyloop.infra.logging import get_logger
from makemyloop.loop.builder import build_loop, parse_target
from makemyloop.loop.export import navigation_url
from makemyloop.loop.formatting import format_summary
from makemyloop.loop.history import HistoryStore
from makemyloop.services.common import InvalidTarget, LoopError

_log = get_logger(__name__)

NETWORK_ERROR_MESSAGE = "Network error, try again"


def _parse_unit(unit: LoopUnit | str) -> LoopUnit:
    try:
        return LoopUnit.parse(unit)
    except ValueError as exc:
        raise InvalidTarget(str(exc)) from exc


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of one generate action: a loop, or None plus the reason."""

    loop: Optional[Loop]
    status: str
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.loop is not None


class LoopSession:
    """
    Pipeline + history for one user.

    Parameters
    ----------
    client
        LoopServicesClient (or any object with geocode_search,
        geocode_reverse and route_foot).
    rng : RandomSource, optional
        Bearing source shared by every loop of the session.
    defaults : LoopDefaults, optional
        Pace, palette and window sizes.
    """

    def __init__(
        self,
        client,
        *,
        rng: Optional[RandomSource] = None,
        defaults: Optional[LoopDefaults] = None,
        history: Optional[HistoryStore] = None,
    ) -> None:
        self.client = client
        self.rng = rng or random.Random()
        self.defaults = defaults or get_loop_defaults()
        self.history = history if history is not None else HistoryStore()
        self.address = ""

    # ────────────────────────────────────────────────────────────────────────
    # Actions
    # ────────────────────────────────────────────────────────────────────────
    def generate_loop(
        self,
        value: Any,
        unit: LoopUnit | str = LoopUnit.DISTANCE,
        address: Optional[str] = None,
    ) -> GenerationOutcome:
        """
        Run the whole pipeline for one loop.

        `address` defaults to the current session address, captured now: a
        map click landing while this runs does not affect it.
        """
        text = self.address if address is None else address

        try:
            # before any network call
            loop_unit = _parse_unit(unit)
            parse_target(value)
            origin = resolve_address(text, client=self.client)
            loop = build_loop(
                  text
                , value
                , loop_unit
                , origin
                , self.history
                , client=self.client
                , rng=self.rng
                , defaults=self.defaults
            )
        except LoopError as exc:
            _log.warning("Loop generation for %r rejected: %s", text, exc)
            return GenerationOutcome(loop=None, status=exc.user_message, error=exc)
        except requests.RequestException as exc:
            _log.error("Loop generation for %r failed: %s: %s", text, type(exc).__name__, exc)
            return GenerationOutcome(loop=None, status=NETWORK_ERROR_MESSAGE, error=exc)

        return GenerationOutcome(loop=loop, status=format_summary(loop))

    def handle_map_click(self, lat: float, lon: float) -> str:
        """
        Reverse-geocode a clicked point and make it the current address.

        Falls back to the "lat, lon" label when the geocoder cannot be reached.
        """
        try:
            label = reverse_resolve(lat, lon, client=self.client)
        except (LoopError, requests.RequestException) as exc:
            _log.warning("Reverse geocode failed for (%.6f, %.6f): %s", lat, lon, exc)
            label = coordinate_label(lat, lon)
        self.address = label
        return label

    # ────────────────────────────────────────────────────────────────────────
    # Views
    # ────────────────────────────────────────────────────────────────────────
    @property
    def loop_count(self) -> int:
        return len(self.history)

    def recent_loops(self, n: Optional[int] = None) -> List[Loop]:
        """Loops the sidebar lists, oldest first."""
        return self.history.recent(self.defaults.visible_loops if n is None else n)

    def navigation_url(self, loop: Loop) -> str:
        return navigation_url(loop.address, loop.path, max_stops=self.defaults.export_stops)
