#!/usr/bin/env python3
"""
Great-circle calculations on a spherical earth model.

All functions take LatLon points in degrees and return degrees, distances
in the units of the radius argument (metres by default), or None where the
geometry has no unique answer.
"""

from typing import List, NamedTuple, Optional, Sequence
import logging
import math

from .geometry import (
    EARTH_RADIUS,
    LatLon,
    check_latlon,
    check_real,
    to_degrees,
    to_radians,
    wrap180,
    wrap360,
)

logger = logging.getLogger(__name__)

# |sin α| below this means a path runs along the great circle through both points
SAME_CIRCLE_TOLERANCE = 1e-12


class ParallelCrossing(NamedTuple):
    """Longitudes where a great circle crosses a given latitude."""

    lon1: float
    lon2: float


def _clamp(value: float) -> float:
    """Clamp an acos/asin argument to [-1, 1] to absorb rounding."""
    return max(-1.0, min(1.0, value))


def _angular_distance(p1: LatLon, p2: LatLon) -> float:
    """Haversine angular separation in radians."""
    phi1, phi2 = p1.phi, p2.phi
    dphi = phi2 - phi1
    dlambda = p2.lambda_ - p1.lambda_

    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _bearing_radians(p1: LatLon, p2: LatLon) -> float:
    """Initial bearing in radians, in (-π, π]; 0 for coincident points."""
    phi1, phi2 = p1.phi, p2.phi
    dlambda = to_radians(p2.longitude - p1.longitude)

    y = math.sin(dlambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(
        dlambda
    )
    return math.atan2(y, x)


def _raw_bearing(p1: LatLon, p2: LatLon) -> float:
    return wrap360(to_degrees(_bearing_radians(p1, p2)))


def distance(p1: LatLon, p2: LatLon, radius: float = EARTH_RADIUS) -> float:
    """
    Distance between two points along a great circle (haversine formula).

    Args:
        p1: Start point
        p2: End point
        radius: Earth radius; the result is in the same units

    Returns:
        Non-negative distance

    Example:
        >>> distance(LatLon(52.205, 0.119), LatLon(48.857, 2.351))  # ~404.3 km
    """
    check_latlon(p1, "p1")
    check_latlon(p2, "p2")
    radius = check_real(radius, "radius")
    return _angular_distance(p1, p2) * radius


def initial_bearing(p1: LatLon, p2: LatLon) -> Optional[float]:
    """
    Initial bearing (forward azimuth) from p1 towards p2.

    Returns:
        Bearing in degrees in [0, 360), or None if the points coincide
    """
    check_latlon(p1, "p1")
    check_latlon(p2, "p2")
    if _angular_distance(p1, p2) == 0:
        return None
    return _raw_bearing(p1, p2)


def final_bearing(p1: LatLon, p2: LatLon) -> Optional[float]:
    """
    Bearing on arrival at p2 when travelling from p1 along a great circle.

    This is the initial bearing from p2 back to p1, reversed.

    Returns:
        Bearing in degrees in [0, 360), or None if the points coincide
    """
    check_latlon(p1, "p1")
    check_latlon(p2, "p2")
    reverse = initial_bearing(p2, p1)
    if reverse is None:
        return None
    return wrap360(reverse + 180)


def midpoint(p1: LatLon, p2: LatLon) -> LatLon:
    """Half-way point along the great circle between p1 and p2."""
    check_latlon(p1, "p1")
    check_latlon(p2, "p2")

    phi1, lambda1 = p1.phi, p1.lambda_
    phi2 = p2.phi
    dlambda = to_radians(p2.longitude - p1.longitude)

    bx = math.cos(phi2) * math.cos(dlambda)
    by = math.cos(phi2) * math.sin(dlambda)

    x = math.sqrt((math.cos(phi1) + bx) ** 2 + by * by)
    y = math.sin(phi1) + math.sin(phi2)
    phi3 = math.atan2(y, x)
    lambda3 = lambda1 + math.atan2(by, math.cos(phi1) + bx)

    return LatLon(to_degrees(phi3), wrap180(to_degrees(lambda3)))


def intermediate_point(p1: LatLon, p2: LatLon, fraction: float) -> LatLon:
    """
    Point at the given fraction along the great circle from p1 to p2.

    Args:
        p1: Start point
        p2: End point
        fraction: 0 gives p1, 1 gives p2; values outside [0, 1] extrapolate
            along the same great circle

    Returns:
        Intermediate point; p1 itself if the two points coincide
    """
    check_latlon(p1, "p1")
    check_latlon(p2, "p2")
    fraction = check_real(fraction, "fraction")

    delta = _angular_distance(p1, p2)
    if delta == 0:
        return p1

    phi1, lambda1 = p1.phi, p1.lambda_
    phi2, lambda2 = p2.phi, p2.lambda_

    a = math.sin((1 - fraction) * delta) / math.sin(delta)
    b = math.sin(fraction * delta) / math.sin(delta)

    x = a * math.cos(phi1) * math.cos(lambda1) + b * math.cos(phi2) * math.cos(lambda2)
    y = a * math.cos(phi1) * math.sin(lambda1) + b * math.cos(phi2) * math.sin(lambda2)
    z = a * math.sin(phi1) + b * math.sin(phi2)

    phi3 = math.atan2(z, math.sqrt(x * x + y * y))
    lambda3 = math.atan2(y, x)

    return LatLon(to_degrees(phi3), wrap180(to_degrees(lambda3)))


def destination_point(
    start: LatLon, distance: float, bearing: float, radius: float = EARTH_RADIUS
) -> LatLon:
    """
    Point reached by travelling a distance along a great circle.

    Args:
        start: Start point
        distance: Distance travelled, in the same units as radius
        bearing: Initial bearing in degrees from north
        radius: Earth radius

    Returns:
        Destination point
    """
    check_latlon(start, "start")
    delta = check_real(distance, "distance") / check_real(radius, "radius")
    theta = to_radians(check_real(bearing, "bearing"))

    phi1, lambda1 = start.phi, start.lambda_

    sin_phi2 = math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(
        delta
    ) * math.cos(theta)
    phi2 = math.asin(_clamp(sin_phi2))
    y = math.sin(theta) * math.sin(delta) * math.cos(phi1)
    x = math.cos(delta) - math.sin(phi1) * sin_phi2
    lambda2 = lambda1 + math.atan2(y, x)

    return LatLon(to_degrees(phi2), wrap180(to_degrees(lambda2)))


def _acos_ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return math.acos(_clamp(numerator / denominator))


def intersection(
    p1: LatLon, bearing1: float, p2: LatLon, bearing2: float
) -> Optional[LatLon]:
    """
    Intersection of two great-circle paths given by start points and bearings.

    See www.edwilliams.org/avform.htm#Intersection.

    Args:
        p1: First start point
        bearing1: Initial bearing from p1, in degrees
        p2: Second start point
        bearing2: Initial bearing from p2, in degrees

    Returns:
        Intersection point, or None if the points coincide, the paths are
        the same great circle, or the intersection is ambiguous (antipodal)
    """
    check_latlon(p1, "p1")
    check_latlon(p2, "p2")
    theta13 = to_radians(check_real(bearing1, "bearing1"))
    theta23 = to_radians(check_real(bearing2, "bearing2"))

    phi1, lambda1 = p1.phi, p1.lambda_
    phi2, lambda2 = p2.phi, p2.lambda_
    dphi = phi2 - phi1
    dlambda = lambda2 - lambda1

    delta12 = 2 * math.asin(
        math.sqrt(
            math.sin(dphi / 2) ** 2
            + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
        )
    )
    if delta12 == 0:
        logger.debug("No intersection: start points coincide")
        return None

    # initial/final bearings between the start points
    theta_a = _acos_ratio(
        math.sin(phi2) - math.sin(phi1) * math.cos(delta12),
        math.sin(delta12) * math.cos(phi1),
    )
    theta_b = _acos_ratio(
        math.sin(phi1) - math.sin(phi2) * math.cos(delta12),
        math.sin(delta12) * math.cos(phi2),
    )

    if math.sin(dlambda) > 0:
        theta12, theta21 = theta_a, 2 * math.pi - theta_b
    else:
        theta12, theta21 = 2 * math.pi - theta_a, theta_b

    alpha1 = theta13 - theta12  # angle 2-1-3
    alpha2 = theta21 - theta23  # angle 1-2-3

    if (
        abs(math.sin(alpha1)) < SAME_CIRCLE_TOLERANCE
        and abs(math.sin(alpha2)) < SAME_CIRCLE_TOLERANCE
    ):
        logger.debug("No intersection: paths lie on the same great circle")
        return None
    if math.sin(alpha1) * math.sin(alpha2) < 0:
        logger.debug("No intersection: ambiguous (antipodal) solution")
        return None

    alpha3 = math.acos(
        _clamp(
            -math.cos(alpha1) * math.cos(alpha2)
            + math.sin(alpha1) * math.sin(alpha2) * math.cos(delta12)
        )
    )
    delta13 = math.atan2(
        math.sin(delta12) * math.sin(alpha1) * math.sin(alpha2),
        math.cos(alpha2) + math.cos(alpha1) * math.cos(alpha3),
    )
    phi3 = math.asin(
        _clamp(
            math.sin(phi1) * math.cos(delta13)
            + math.cos(phi1) * math.sin(delta13) * math.cos(theta13)
        )
    )
    dlambda13 = math.atan2(
        math.sin(theta13) * math.sin(delta13) * math.cos(phi1),
        math.cos(delta13) - math.sin(phi1) * math.sin(phi3),
    )
    lambda3 = lambda1 + dlambda13

    return LatLon(to_degrees(phi3), wrap180(to_degrees(lambda3)))


def cross_track_distance(
    point: LatLon,
    path_start: LatLon,
    path_end: LatLon,
    radius: float = EARTH_RADIUS,
) -> Optional[float]:
    """
    Signed distance from a point to the great circle through a path.

    Args:
        point: The point to measure from
        path_start: Start of the great-circle path
        path_end: End of the great-circle path
        radius: Earth radius

    Returns:
        Distance to the path; negative if the point is left of the path,
        positive if right. None if path_start and path_end coincide.
    """
    check_latlon(point, "point")
    check_latlon(path_start, "path_start")
    check_latlon(path_end, "path_end")
    radius = check_real(radius, "radius")

    if _angular_distance(path_start, path_end) == 0:
        return None

    delta13 = _angular_distance(path_start, point)
    theta13 = _bearing_radians(path_start, point)
    theta12 = _bearing_radians(path_start, path_end)

    delta_xt = math.asin(_clamp(math.sin(delta13) * math.sin(theta13 - theta12)))
    return delta_xt * radius


def along_track_distance(
    point: LatLon,
    path_start: LatLon,
    path_end: LatLon,
    radius: float = EARTH_RADIUS,
) -> Optional[float]:
    """
    Distance from the start of a path to the closest point on it to a point.

    Args:
        point: The point whose projection onto the path is measured
        path_start: Start of the great-circle path
        path_end: End of the great-circle path
        radius: Earth radius

    Returns:
        Signed distance along the path; negative if the foot of the
        perpendicular lies behind path_start. None if the path has no
        direction or the point is a pole of the path's great circle.
    """
    check_latlon(point, "point")
    check_latlon(path_start, "path_start")
    check_latlon(path_end, "path_end")
    radius = check_real(radius, "radius")

    if _angular_distance(path_start, path_end) == 0:
        return None

    delta13 = _angular_distance(path_start, point)
    theta13 = _bearing_radians(path_start, point)
    theta12 = _bearing_radians(path_start, path_end)

    delta_xt = math.asin(_clamp(math.sin(delta13) * math.sin(theta13 - theta12)))
    cos_xt = abs(math.cos(delta_xt))
    if cos_xt == 0:
        return None

    delta_at = math.acos(_clamp(math.cos(delta13) / cos_xt))
    direction = math.cos(theta12 - theta13)
    sign = (direction > 0) - (direction < 0)

    return delta_at * sign * radius


def max_latitude(start: LatLon, bearing: float) -> float:
    """
    Maximum latitude reached on a great circle (Clairaut's formula).

    Negate the result for the minimum latitude in the southern hemisphere.

    Args:
        start: Point on the great circle
        bearing: Initial bearing from start, in degrees

    Returns:
        Maximum latitude in degrees
    """
    check_latlon(start, "start")
    theta = to_radians(check_real(bearing, "bearing"))
    phi_max = math.acos(_clamp(abs(math.sin(theta) * math.cos(start.phi))))
    return to_degrees(phi_max)


def crossing_parallels(
    p1: LatLon, p2: LatLon, latitude: float
) -> Optional[ParallelCrossing]:
    """
    Longitudes where the great circle through p1 and p2 crosses a latitude.

    Args:
        p1: First point on the great circle
        p2: Second point on the great circle
        latitude: Latitude of the parallel, in degrees

    Returns:
        ParallelCrossing with both longitudes, or None if the great circle
        does not reach the latitude (or p1 and p2 do not define one)
    """
    check_latlon(p1, "p1")
    check_latlon(p2, "p2")
    phi = to_radians(check_real(latitude, "latitude"))

    phi1, lambda1 = p1.phi, p1.lambda_
    phi2, lambda2 = p2.phi, p2.lambda_
    dlambda = lambda2 - lambda1

    x = math.sin(phi1) * math.cos(phi2) * math.cos(phi) * math.sin(dlambda)
    y = math.sin(phi1) * math.cos(phi2) * math.cos(phi) * math.cos(
        dlambda
    ) - math.cos(phi1) * math.sin(phi2) * math.cos(phi)
    z = math.cos(phi1) * math.cos(phi2) * math.sin(phi) * math.sin(dlambda)

    if z * z > x * x + y * y:
        return None  # great circle doesn't reach latitude
    if x * x + y * y == 0:
        return None

    lambda_max = math.atan2(-y, x)  # longitude at max latitude
    dlambda_i = math.acos(_clamp(z / math.sqrt(x * x + y * y)))

    lambda_i1 = lambda1 + lambda_max - dlambda_i
    lambda_i2 = lambda1 + lambda_max + dlambda_i

    return ParallelCrossing(
        lon1=wrap180(to_degrees(lambda_i1)), lon2=wrap180(to_degrees(lambda_i2))
    )


def _encloses_pole(ring: List[LatLon]) -> bool:
    """
    Check whether a closed ring encloses a pole.

    The sum of course changes around a pole is 0° rather than the normal
    ±360°; see blog.element84.com/determining-if-a-spherical-polygon-contains-a-pole.html.
    Rings with an edge that passes over a pole, e.g. (85,90), (85,0),
    (85,-90), can be misclassified.
    """
    total = 0.0
    previous = _raw_bearing(ring[0], ring[1])
    for v in range(len(ring) - 1):
        initial = _raw_bearing(ring[v], ring[v + 1])
        final = wrap360(_raw_bearing(ring[v + 1], ring[v]) + 180)
        total += (initial - previous + 540) % 360 - 180
        total += (final - initial + 540) % 360 - 180
        previous = final
    initial = _raw_bearing(ring[0], ring[1])
    total += (initial - previous + 540) % 360 - 180

    return abs(total) < 90  # 0°-ish


def area_of(polygon: Sequence[LatLon], radius: float = EARTH_RADIUS) -> float:
    """
    Area of a spherical polygon.

    Uses Karney's method: for each edge,
    tan(E/2) = tan(Δλ/2)·(tan(φ1/2) + tan(φ2/2)) / (1 + tan(φ1/2)·tan(φ2/2)),
    where E is the spherical excess of the trapezium obtained by extending
    the edge to the equator.

    Args:
        polygon: Vertices in order; the ring is closed implicitly and the
            sequence itself is left untouched
        radius: Earth radius; the result is in units of radius squared

    Returns:
        Unsigned area

    Raises:
        TypeError: If a vertex is not a LatLon
        ValueError: If the polygon has fewer than three vertices
    """
    radius = check_real(radius, "radius")
    ring = [check_latlon(vertex, f"polygon[{i}]") for i, vertex in enumerate(polygon)]
    if len(ring) < 3:
        raise ValueError("A polygon needs at least three vertices")

    if not ring[0].equals(ring[-1]):
        ring.append(ring[0])

    excess = 0.0  # steradians
    for v in range(len(ring) - 1):
        phi1 = ring[v].phi
        phi2 = ring[v + 1].phi
        dlambda = to_radians(ring[v + 1].longitude - ring[v].longitude)
        excess += 2 * math.atan2(
            math.tan(dlambda / 2) * (math.tan(phi1 / 2) + math.tan(phi2 / 2)),
            1 + math.tan(phi1 / 2) * math.tan(phi2 / 2),
        )

    if _encloses_pole(ring):
        logger.debug("Polygon encloses a pole; adjusting spherical excess")
        excess = abs(excess) - 2 * math.pi

    return abs(excess * radius * radius)
