# tests/test_resolver.py
from __future__ import annotations

import pytest

from makemyloop.addressing.coords import coordinate_label, filter_hits, normalize_hit
from makemyloop.addressing.resolver import resolve_address, reverse_resolve
from makemyloop.services.common import AddressNotFound

from conftest import FakeClient


def test_resolve_takes_first_place():
    client = FakeClient(
        places=[
            {"lat": "47.7484", "lon": "-3.3700", "display_name": "Lorient"},
            {"lat": "48.0", "lon": "-4.0", "display_name": "Elsewhere"},
        ]
    )

    point = resolve_address("Lorient", client=client)

    assert (point.lat, point.lon) == (47.7484, -3.37)
    assert point.label == "Lorient"


@pytest.mark.parametrize("text", ["", "   ", "%%%", "nowhere at all"])
def test_text_is_sent_untouched_and_empty_answer_is_not_found(text):
    client = FakeClient(places=[])

    with pytest.raises(AddressNotFound):
        resolve_address(text, client=client)

    assert client.calls == [("geocode_search", text)]


def test_places_without_coordinates_are_skipped():
    client = FakeClient(places=[{"display_name": "broken"}, {"lat": "1.5", "lon": "2.5"}])

    point = resolve_address("x", client=client)

    assert (point.lat, point.lon) == (1.5, 2.5)
    assert point.label == "1.5000, 2.5000"


def test_reverse_uses_display_name():
    client = FakeClient(reverse={"display_name": "Port de Lorient, France"})

    assert reverse_resolve(47.7, -3.36, client=client) == "Port de Lorient, France"


@pytest.mark.parametrize("answer", [{}, {"error": "Unable to geocode"}, {"display_name": ""}])
def test_reverse_falls_back_to_numeric_label(answer):
    label = reverse_resolve(47.748412, -3.370012, client=FakeClient(reverse=answer))

    assert label == "47.7484, -3.3700"


def test_coordinate_label_precision():
    assert coordinate_label(-0.123456, 179.99999) == "-0.1235, 180.0000"


def test_normalize_and_filter_hits():
    assert normalize_hit({"lat": "x", "lon": "1"}) is None
    assert normalize_hit("nope") is None
    assert normalize_hit({"lat": 1, "lon": 2, "name": "n"}) == {"lat": 1.0, "lon": 2.0, "label": "n"}
    assert filter_hits(None) == []
    assert len(filter_hits([{"lat": 1, "lon": 2}, {}])) == 1
