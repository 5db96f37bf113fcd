import math

import pytest

from routegeo.geometry import LatLon
from routegeo.great_circle import distance
from routegeo.rhumb import (
    rhumb_bearing,
    rhumb_destination_point,
    rhumb_distance,
    rhumb_midpoint,
)

DOVER = LatLon(51.127, 1.338)
CALAIS = LatLon(50.964, 1.853)


class TestDoverToCalais:
    """Reference values for a Channel crossing."""

    def test_distance(self):
        assert rhumb_distance(DOVER, CALAIS) == pytest.approx(40310, abs=10)

    def test_bearing(self):
        assert rhumb_bearing(DOVER, CALAIS) == pytest.approx(116.7, abs=0.05)

    def test_destination_point(self):
        dest = rhumb_destination_point(DOVER, 40300, 116.7)
        assert dest.latitude == pytest.approx(50.9642, abs=1e-4)
        assert dest.longitude == pytest.approx(1.8530, abs=1e-4)

    def test_midpoint(self):
        mid = rhumb_midpoint(DOVER, CALAIS)
        assert mid.latitude == pytest.approx(51.0455, abs=1e-4)
        assert mid.longitude == pytest.approx(1.5957, abs=1e-4)


def test_rhumb_is_never_shorter_than_great_circle():
    p1, p2 = LatLon(40.7, -74.0), LatLon(51.5, -0.1)
    assert rhumb_distance(p1, p2) > distance(p1, p2)


def test_east_west_course_is_finite():
    p1, p2 = LatLon(10, 0), LatLon(10, 1)
    dist = rhumb_distance(p1, p2)
    assert math.isfinite(dist)
    assert dist == pytest.approx(6371e3 * math.cos(math.radians(10)) * math.radians(1))
    assert rhumb_bearing(p1, p2) == pytest.approx(90)
    assert rhumb_bearing(p2, p1) == pytest.approx(270)


def test_crossing_antimeridian_takes_shorter_path():
    p1, p2 = LatLon(0, 179), LatLon(0, -179)
    assert rhumb_distance(p1, p2) == pytest.approx(distance(LatLon(0, 0), LatLon(0, 2)))
    assert rhumb_bearing(p1, p2) == pytest.approx(90)
    assert rhumb_bearing(p2, p1) == pytest.approx(270)


def test_bearing_of_coincident_points_is_undefined():
    assert rhumb_bearing(DOVER, LatLon(51.127, 1.338)) is None


def test_distance_rejects_non_latlon():
    with pytest.raises(TypeError, match="p1"):
        rhumb_distance("51.127, 1.338", CALAIS)


def test_destination_east_west():
    dest = rhumb_destination_point(LatLon(10, 0), 6371e3 * math.radians(1), 90)
    assert dest.latitude == pytest.approx(10)
    assert dest.longitude == pytest.approx(1 / math.cos(math.radians(10)))


def test_destination_past_pole_is_reflected():
    dest = rhumb_destination_point(LatLon(80, 0), 6371e3 * math.radians(20), 0)
    assert dest.latitude == pytest.approx(80)
    assert -90 <= dest.latitude <= 90


def test_destination_round_trip():
    dest = rhumb_destination_point(
        DOVER, rhumb_distance(DOVER, CALAIS), rhumb_bearing(DOVER, CALAIS)
    )
    assert dest.latitude == pytest.approx(CALAIS.latitude, abs=1e-6)
    assert dest.longitude == pytest.approx(CALAIS.longitude, abs=1e-6)


def test_midpoint_along_parallel_uses_mean_longitude():
    mid = rhumb_midpoint(LatLon(10, 0), LatLon(10, 20))
    assert mid.latitude == pytest.approx(10)
    assert mid.longitude == pytest.approx(10)


def test_midpoint_across_antimeridian():
    mid = rhumb_midpoint(LatLon(0, 179), LatLon(10, -179))
    assert mid.latitude == pytest.approx(5)
    assert abs(mid.longitude) > 179
    assert -180 < mid.longitude <= 180
