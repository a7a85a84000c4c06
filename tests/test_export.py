# tests/test_export.py
from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from makemyloop.core.models import Loop, LoopUnit
from makemyloop.loop import export
from makemyloop.loop.export import export_stops, navigation_url, open_in_navigation


def _path(n: int):
    # point i encodes its own index so selections are easy to read back
    return [(float(i), float(-i)) for i in range(n)]


def _indices(stops):
    return [int(float(s.split(",")[0])) for s in stops]


def test_23_points_give_every_second_index_minus_ends():
    stops = export_stops(_path(23))

    assert _indices(stops) == list(range(2, 21, 2))
    assert len(stops) == 10


def test_short_path_uses_every_point():
    assert _indices(export_stops(_path(5))) == [1, 2, 3]


def test_two_point_path_has_no_intermediate_stop():
    assert export_stops(_path(2)) == []


def test_last_point_is_always_selected_then_dropped():
    # step 2 over 22 points: 0, 2, ..., 20 plus the last index 21
    assert _indices(export_stops(_path(22))) == list(range(2, 21, 2))


def test_long_path_stays_near_ten_stops():
    stops = export_stops(_path(1000))

    assert _indices(stops) == list(range(100, 901, 100))


def test_stop_format_is_lat_comma_lon():
    stops = export_stops([(47.7484, -3.37), (47.75, -3.36), (47.7484, -3.37)])

    assert stops == ["47.75,-3.36"]


def test_navigation_url_reuses_address_and_walks():
    url = navigation_url("1 Rue de Paris, Lorient", _path(5))
    parts = urlsplit(url)
    query = parse_qs(parts.query)

    assert url.startswith("https://www.google.com/maps/dir/?api=1")
    assert query["origin"] == ["1 Rue de Paris, Lorient"]
    assert query["destination"] == query["origin"]
    assert query["travelmode"] == ["walking"]
    assert query["waypoints"] == ["1.0,-1.0|2.0,-2.0|3.0,-3.0"]
    assert "1%20Rue%20de%20Paris%2C%20Lorient" in url


def test_open_in_navigation_opens_new_tab(monkeypatch):
    opened = []
    monkeypatch.setattr(export.webbrowser, "open_new_tab", opened.append)
    loop = Loop(
          id=1
        , address="Lorient"
        , requested_value=5.0
        , requested_unit=LoopUnit.DISTANCE
        , actual_distance_km=5.0
        , actual_duration_min=60
        , color="#ff6b6b"
        , path=tuple(_path(5))
        , anchors=((0.0, 0.0), (1.0, 1.0), (0.0, 0.0))
    )

    url = open_in_navigation(loop)

    assert opened == [url]
    assert "origin=Lorient" in url
