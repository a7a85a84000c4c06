# tests/test_session.py
from __future__ import annotations

import pytest
import requests

from makemyloop.app.session import NETWORK_ERROR_MESSAGE, LoopSession
from makemyloop.core.config import get_loop_defaults
from makemyloop.core.models import LoopUnit
from makemyloop.services.common import (
      AddressNotFound
    , InvalidTarget
    , RateLimited
    , Unroutable
)

from conftest import FakeClient, FixedRandom


def _session(client=None) -> LoopSession:
    return LoopSession(client or FakeClient(), rng=FixedRandom(0.3))


def test_generate_loop_success():
    session = _session(FakeClient(distance_m=5123.0))

    outcome = session.generate_loop(5, "km", address="Lorient")

    assert outcome.ok
    assert outcome.error is None
    assert outcome.loop.address == "Lorient"
    assert outcome.status == "5.0 km → 5.12 km (61 min)"
    assert session.loop_count == 1


def test_pipeline_order_is_resolve_then_route():
    client = FakeClient()
    _session(client).generate_loop(30, LoopUnit.DURATION, address="Lorient")

    assert client.methods_called() == ["geocode_search", "route_foot"]


@pytest.mark.parametrize("value", ["abc", 0, -5, "", float("nan")])
def test_invalid_target_issues_no_network_call(value):
    client = FakeClient()
    session = _session(client)

    outcome = session.generate_loop(value, "km", address="Lorient")

    assert not outcome.ok
    assert outcome.status == InvalidTarget.user_message
    assert client.calls == []
    assert session.loop_count == 0


def test_unknown_unit_is_reported_as_invalid_target():
    client = FakeClient()
    session = _session(client)

    outcome = session.generate_loop(5, "miles", address="Lorient")

    assert outcome.status == InvalidTarget.user_message
    assert isinstance(outcome.error, InvalidTarget)
    assert client.calls == []
    assert session.loop_count == 0


def test_address_not_found_halts_before_routing():
    client = FakeClient(places=[])
    session = _session(client)

    outcome = session.generate_loop(5, "km", address="zzzz")

    assert outcome.status == AddressNotFound.user_message
    assert isinstance(outcome.error, AddressNotFound)
    assert client.methods_called() == ["geocode_search"]
    assert session.loop_count == 0


@pytest.mark.parametrize(
    "route, expected",
    [
        ({"code": "NoRoute", "routes": []}, Unroutable.user_message),
        (Unroutable("NoSegment"), Unroutable.user_message),
        (RateLimited("429"), RateLimited.user_message),
        (requests.ConnectionError("down"), NETWORK_ERROR_MESSAGE),
        (requests.HTTPError("500"), NETWORK_ERROR_MESSAGE),
    ],
)
def test_routing_failures_become_status_strings(route, expected):
    session = _session(FakeClient(route=route))

    outcome = session.generate_loop(5, "km", address="Lorient")

    assert outcome.loop is None
    assert outcome.status == expected
    assert session.loop_count == 0


def test_geocoder_transport_error_is_reported():
    session = _session(FakeClient(places=requests.Timeout("slow")))

    outcome = session.generate_loop(5, "km", address="Lorient")

    assert outcome.status == NETWORK_ERROR_MESSAGE
    assert session.loop_count == 0


def test_map_click_sets_current_address():
    client = FakeClient(reverse={"display_name": "Quai des Indes, Lorient"})
    session = _session(client)

    label = session.handle_map_click(47.75, -3.36)
    outcome = session.generate_loop(5)

    assert label == "Quai des Indes, Lorient"
    assert session.address == label
    assert outcome.loop.address == label
    assert ("geocode_search", label) in client.calls


def test_map_click_falls_back_when_geocoder_unreachable():
    session = _session(FakeClient(reverse=requests.ConnectionError("down")))

    assert session.handle_map_click(47.748412, -3.370012) == "47.7484, -3.3700"


def test_recent_loops_shows_last_six_of_nine():
    session = _session()
    loops = [session.generate_loop(2 + i, "km", address=f"a{i}").loop for i in range(9)]

    recent = session.recent_loops()

    assert len(recent) == get_loop_defaults().visible_loops == 6
    assert recent == loops[3:]


def test_duration_summary_and_navigation_url():
    session = _session(FakeClient(distance_m=5000.0))

    outcome = session.generate_loop("60", "min", address="Lorient")
    url = session.navigation_url(outcome.loop)

    assert outcome.status == "60 min → 60 min / 5.00 km"
    assert "origin=Lorient&destination=Lorient" in url
    assert url.endswith("&travelmode=walking")
