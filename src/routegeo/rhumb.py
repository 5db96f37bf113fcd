#!/usr/bin/env python3
"""
Rhumb line (loxodrome) calculations.

A rhumb line keeps a constant compass bearing. On a Mercator projection it
is a straight line, so these formulas work in isometric latitude ψ rather
than along great-circle arcs. See www.edwilliams.org/avform.htm#Rhumb.
"""

from typing import Optional
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

# Below this |Δψ| the stretch factor Δφ/Δψ is ill-conditioned (0/0 on E-W courses)
PSI_TOLERANCE = 10e-12


def _isometric_latitude(phi: float) -> float:
    """Mercator isometric latitude ψ = ln(tan(π/4 + φ/2))."""
    t = math.tan(math.pi / 4 + phi / 2)
    if t <= 0:
        return -math.inf
    return math.log(t)


def _stretch_factor(dphi: float, dpsi: float, phi1: float) -> float:
    """East-west stretch factor q; falls back to cos φ1 on E-W courses."""
    if abs(dpsi) > PSI_TOLERANCE:
        return dphi / dpsi
    return math.cos(phi1)


def rhumb_distance(p1: LatLon, p2: LatLon, radius: float = EARTH_RADIUS) -> float:
    """
    Distance travelled along a rhumb line between two points.

    Args:
        p1: Start point
        p2: End point
        radius: Earth radius; the result is in the same units

    Returns:
        Non-negative distance
    """
    check_latlon(p1, "p1")
    check_latlon(p2, "p2")
    radius = check_real(radius, "radius")

    phi1, phi2 = p1.phi, p2.phi
    dphi = phi2 - phi1
    dlambda = to_radians(abs(p2.longitude - p1.longitude))
    # take the shorter rhumb line across the anti-meridian
    if dlambda > math.pi:
        dlambda -= 2 * math.pi

    dpsi = _isometric_latitude(phi2) - _isometric_latitude(phi1)
    q = _stretch_factor(dphi, dpsi, phi1)

    # Pythagoras on the 'stretched' Mercator projection
    delta = math.sqrt(dphi * dphi + q * q * dlambda * dlambda)
    return delta * radius


def rhumb_bearing(p1: LatLon, p2: LatLon) -> Optional[float]:
    """
    Constant bearing of the rhumb line from p1 to p2.

    Returns:
        Bearing in degrees in [0, 360), or None if the points coincide
    """
    check_latlon(p1, "p1")
    check_latlon(p2, "p2")

    phi1, phi2 = p1.phi, p2.phi
    dlambda = to_radians(p2.longitude - p1.longitude)
    if dlambda > math.pi:
        dlambda -= 2 * math.pi
    if dlambda < -math.pi:
        dlambda += 2 * math.pi

    if phi1 == phi2 and dlambda == 0:
        return None

    dpsi = _isometric_latitude(phi2) - _isometric_latitude(phi1)
    theta = math.atan2(dlambda, dpsi)
    return wrap360(to_degrees(theta))


def rhumb_destination_point(
    start: LatLon, distance: float, bearing: float, radius: float = EARTH_RADIUS
) -> LatLon:
    """
    Point reached by travelling a distance on a constant bearing.

    A course that would carry past a pole is reflected back across it.

    Args:
        start: Start point
        distance: Distance travelled, in the same units as radius
        bearing: Constant bearing in degrees from north
        radius: Earth radius

    Returns:
        Destination point
    """
    check_latlon(start, "start")
    delta = check_real(distance, "distance") / check_real(radius, "radius")
    theta = to_radians(check_real(bearing, "bearing"))

    phi1, lambda1 = start.phi, start.lambda_

    dphi = delta * math.cos(theta)
    phi2 = phi1 + dphi

    # past the pole: come back down the other side
    if abs(phi2) > math.pi / 2:
        phi2 = math.pi - phi2 if phi2 > 0 else -math.pi - phi2

    dpsi = _isometric_latitude(phi2) - _isometric_latitude(phi1)
    q = _stretch_factor(dphi, dpsi, phi1)

    dlambda = delta * math.sin(theta) / q if q != 0 else 0.0
    lambda2 = lambda1 + dlambda

    return LatLon(to_degrees(phi2), wrap180(to_degrees(lambda2)))


def rhumb_midpoint(p1: LatLon, p2: LatLon) -> LatLon:
    """
    Loxodromic midpoint between two points.

    See mathforum.org/kb/message.jspa?messageID=148837. Courses along a
    parallel of latitude use the mean longitude.
    """
    check_latlon(p1, "p1")
    check_latlon(p2, "p2")

    phi1, lambda1 = p1.phi, p1.lambda_
    phi2, lambda2 = p2.phi, p2.lambda_

    # crossing anti-meridian: bring lambda1 within π of lambda2
    if lambda2 - lambda1 > math.pi:
        lambda1 += 2 * math.pi
    elif lambda2 - lambda1 < -math.pi:
        lambda1 -= 2 * math.pi

    phi3 = (phi1 + phi2) / 2
    psi1 = _isometric_latitude(phi1)
    psi2 = _isometric_latitude(phi2)
    psi3 = _isometric_latitude(phi3)

    lambda3 = math.nan
    dpsi = psi2 - psi1
    if dpsi != 0 and math.isfinite(dpsi):
        lambda3 = ((lambda2 - lambda1) * psi3 + lambda1 * psi2 - lambda2 * psi1) / dpsi

    if not math.isfinite(lambda3):
        logger.debug("Degenerate rhumb midpoint; using mean longitude")
        lambda3 = (lambda1 + lambda2) / 2

    return LatLon(to_degrees(phi3), wrap180(to_degrees(lambda3)))
