import pytest
import math
from hypothesis import given, strategies as st, assume
from pyproj import Geod

from routegeo.dms import parse_dms, to_lat, to_lon
from routegeo.geometry import LatLon, wrap180, wrap360
from routegeo.great_circle import (
    cross_track_distance,
    destination_point,
    distance,
    initial_bearing,
    midpoint,
)
from routegeo.rhumb import rhumb_distance

# Strategy for valid coordinates
valid_lat = st.floats(-89.0, 89.0)
valid_lon = st.floats(-180.0, 180.0)
valid_position = st.builds(LatLon, latitude=valid_lat, longitude=valid_lon)
angles = st.floats(-1e4, 1e4, allow_nan=False, allow_infinity=False)

# Sphere with the mean earth radius
SPHERE = Geod(a=6371e3, b=6371e3)


class TestDistanceProperties:

    @given(valid_position, valid_position)
    def test_distance_is_non_negative(self, pos1, pos2):
        """Distance between any two points is always non-negative."""
        assert distance(pos1, pos2) >= 0

    @given(valid_position)
    def test_distance_to_self_is_zero(self, pos):
        """Distance from a point to itself is always zero."""
        assert distance(pos, pos) == 0

    @given(valid_position, valid_position)
    def test_distance_is_symmetric(self, pos1, pos2):
        """Distance from A to B equals distance from B to A."""
        assert abs(distance(pos1, pos2) - distance(pos2, pos1)) < 1e-6

    @given(valid_position, valid_position)
    def test_distance_is_at_most_half_circumference(self, pos1, pos2):
        """No two points on the sphere are further apart than pi * R."""
        assert distance(pos1, pos2) <= math.pi * 6371e3 + 1e-6

    @given(valid_position, valid_position)
    def test_rhumb_line_is_never_shorter(self, pos1, pos2):
        """The great circle is the shortest path."""
        assert rhumb_distance(pos1, pos2) >= distance(pos1, pos2) * (1 - 1e-5) - 1e-3

    @given(valid_position, valid_position)
    def test_matches_geodesic_on_sphere(self, pos1, pos2):
        """Haversine distance agrees with pyproj's geodesic on a sphere."""
        _, _, expected = SPHERE.inv(
            pos1.longitude, pos1.latitude, pos2.longitude, pos2.latitude
        )
        assert distance(pos1, pos2) == pytest.approx(expected, rel=1e-6, abs=1e-3)


class TestBearingProperties:

    @given(valid_position, valid_position)
    def test_bearing_range(self, pos1, pos2):
        """Bearing is always in range [0, 360)."""
        assume(distance(pos1, pos2) > 1e-6)  # Avoid identical points

        bearing = initial_bearing(pos1, pos2)
        assert 0 <= bearing < 360

    @given(valid_position, valid_position)
    def test_matches_geodesic_azimuth(self, pos1, pos2):
        """Initial bearing agrees with pyproj's forward azimuth on a sphere."""
        dist = distance(pos1, pos2)
        # Azimuths are ill-conditioned for very close and near-antipodal points
        assume(1000 < dist < 19000e3)

        az12, _, _ = SPHERE.inv(
            pos1.longitude, pos1.latitude, pos2.longitude, pos2.latitude
        )
        difference = wrap180(initial_bearing(pos1, pos2) - wrap360(az12))
        assert abs(difference) < 1e-5


class TestWrapProperties:

    @given(angles)
    def test_wrap180_range(self, degrees):
        """wrap180 always lands in (-180, 180]."""
        wrapped = wrap180(degrees)
        assert -180 < wrapped <= 180

    @given(angles)
    def test_wrap360_range(self, degrees):
        """wrap360 always lands in [0, 360)."""
        wrapped = wrap360(degrees)
        assert 0 <= wrapped < 360

    @given(angles)
    def test_wrap180_preserves_direction(self, degrees):
        """Wrapping changes an angle by a whole number of turns."""
        turns = (degrees - wrap180(degrees)) / 360
        assert turns == pytest.approx(round(turns), abs=1e-9)


class TestDestinationProperties:

    @given(
        st.builds(LatLon, latitude=st.floats(-80.0, 80.0), longitude=valid_lon),
        st.floats(0.0, 1e7),
        st.floats(0.0, 360.0),
    )
    def test_destination_is_at_distance(self, start, dist, bearing):
        """The destination point lies at the requested distance from the start."""
        dest = destination_point(start, dist, bearing)
        assert distance(start, dest) == pytest.approx(dist, abs=0.1)
        assert -90 <= dest.latitude <= 90
        assert -180 < dest.longitude <= 180

    @given(valid_position, valid_position)
    def test_midpoint_is_equidistant(self, pos1, pos2):
        """The midpoint is halfway along the great circle."""
        dist = distance(pos1, pos2)
        assume(dist < 19000e3)

        mid = midpoint(pos1, pos2)
        assert distance(pos1, mid) == pytest.approx(dist / 2, abs=0.1)
        assert distance(mid, pos2) == pytest.approx(dist / 2, abs=0.1)

    @given(valid_position, valid_position)
    def test_endpoints_are_on_their_own_path(self, pos1, pos2):
        """Both ends of a path have no cross-track offset."""
        assume(1000 < distance(pos1, pos2) < 19000e3)
        assert cross_track_distance(pos2, pos1, pos2) == pytest.approx(0, abs=1e-3)


class TestDmsProperties:

    @given(st.floats(-90.0, 90.0))
    def test_latitude_round_trip(self, degrees):
        """Formatting to hundredths of a second and parsing back is lossless enough."""
        text = to_lat(degrees, "dms", 2)
        assert parse_dms(text) == pytest.approx(degrees, abs=1e-5)

    @given(st.floats(-180.0, 180.0))
    def test_longitude_round_trip(self, degrees):
        """Formatting to hundredths of a second and parsing back is lossless enough."""
        text = to_lon(degrees, "dms", 2)
        assert parse_dms(text) == pytest.approx(degrees, abs=1e-5)

    @given(st.floats(-1e6, 1e6))
    def test_decimal_strings_parse(self, degrees):
        """Plain decimal text parses to the same number."""
        assert parse_dms(f"{degrees:.6f}") == pytest.approx(degrees, abs=1e-5)
