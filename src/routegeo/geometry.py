#!/usr/bin/env python3
"""
Coordinate model and angle helpers for spherical geodesy.

Degrees are the only unit that crosses the public API; every formula works in
radians internally. The Degrees/Radians aliases keep the two apart for type
checkers without wrapping the float values themselves.
"""

from dataclasses import dataclass
from typing import NewType, Optional, Union
import logging
import math
import numbers

from .dms import DmsFormat, parse_dms, to_lat, to_lon

logger = logging.getLogger(__name__)

# Mean earth radius in metres
EARTH_RADIUS = 6371e3

Degrees = NewType("Degrees", float)
Radians = NewType("Radians", float)


def to_radians(degrees: float) -> Radians:
    """Convert an angle in degrees to radians."""
    return Radians(degrees * math.pi / 180)


def to_degrees(radians: float) -> Degrees:
    """Convert an angle in radians to degrees."""
    return Degrees(radians * 180 / math.pi)


def wrap180(degrees: float) -> Degrees:
    """
    Normalise a longitude (or signed angle) to the half-open range (-180, 180].

    Args:
        degrees: Angle in degrees, any real value

    Returns:
        Equivalent angle in (-180, 180]
    """
    wrapped = (degrees + 540) % 360 - 180
    if wrapped <= -180:
        wrapped += 360
    return Degrees(wrapped)


def wrap360(degrees: float) -> Degrees:
    """
    Normalise a bearing to the half-open range [0, 360).

    Args:
        degrees: Angle in degrees, any real value

    Returns:
        Equivalent angle in [0, 360)
    """
    wrapped = degrees % 360
    # float modulo of a tiny negative value rounds up to 360
    if wrapped >= 360:
        wrapped = 0.0
    return Degrees(wrapped)


def check_real(value: object, name: str) -> float:
    """
    Validate a scalar argument and return it as a float.

    Raises:
        TypeError: If value is not a real number (bools are rejected too)
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{name} must be a real number, not {type(value).__name__}")
    return float(value)


def check_latlon(value: object, name: str) -> "LatLon":
    """
    Validate a coordinate argument.

    Raises:
        TypeError: If value is not a LatLon
    """
    if not isinstance(value, LatLon):
        raise TypeError(f"{name} is not a LatLon object")
    return value


@dataclass(frozen=True)
class LatLon:
    """A point on the earth's surface, in decimal degrees.

    Latitude is expected to lie in [-90, 90] but is not range-checked.
    Longitude may be any real value; derived longitudes are always
    normalised to (-180, 180].
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "latitude", check_real(self.latitude, "latitude"))
        object.__setattr__(
            self, "longitude", check_real(self.longitude, "longitude")
        )

    @classmethod
    def from_dms(
        cls, latitude: Union[str, float], longitude: Union[str, float]
    ) -> "LatLon":
        """
        Build a LatLon from two degree/minute/second strings.

        Args:
            latitude: Latitude as decimal degrees or DMS text (e.g. "51° 28′ 40″ N")
            longitude: Longitude as decimal degrees or DMS text

        Returns:
            New LatLon

        Raises:
            ValueError: If either value cannot be parsed
        """
        lat = parse_dms(latitude)
        lon = parse_dms(longitude)
        if math.isnan(lat):
            raise ValueError(f"Cannot parse latitude: {latitude!r}")
        if math.isnan(lon):
            raise ValueError(f"Cannot parse longitude: {longitude!r}")
        return cls(lat, lon)

    @property
    def phi(self) -> Radians:
        """Latitude in radians."""
        return to_radians(self.latitude)

    @property
    def lambda_(self) -> Radians:
        """Longitude in radians."""
        return to_radians(self.longitude)

    def equals(self, other: "LatLon") -> bool:
        """
        Check whether two points are the same, with no tolerance.

        Raises:
            TypeError: If other is not a LatLon
        """
        check_latlon(other, "other")
        return self.latitude == other.latitude and self.longitude == other.longitude

    def to_string(
        self,
        fmt: Union[str, DmsFormat] = DmsFormat.DMS,
        dp: Optional[int] = None,
        separator: str = "",
    ) -> str:
        """
        Format the point as "lat, lon" in degrees/minutes/seconds.

        Args:
            fmt: One of 'd', 'dm', 'dms' (or the long names / DmsFormat members)
            dp: Decimal places; defaults to 4, 2 or 0 depending on fmt
            separator: Text inserted between the d/m/s parts and compass letter

        Returns:
            e.g. "52°12′18″N, 000°07′08″E"
        """
        return (
            to_lat(self.latitude, fmt, dp, separator)
            + ", "
            + to_lon(self.longitude, fmt, dp, separator)
        )

    def __str__(self) -> str:
        return self.to_string()
