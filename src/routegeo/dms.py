#!/usr/bin/env python3
"""
Parsing and formatting of degrees/minutes/seconds.

Latitude/longitude values may be written as decimal degrees or subdivided
into sexagesimal minutes and seconds, with a variety of separators and an
optional compass letter (e.g. 3° 37′ 09″W). Degree, prime and double prime
symbols are U+00B0, U+2032 and U+2033.
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union
import logging
import math
import numbers
import re

logger = logging.getLogger(__name__)

# Returned by the formatters in place of "NaN"
NO_VALUE = "–"

CARDINALS = (
    "N", "NNE", "NE", "ENE",
    "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW",
    "W", "WNW", "NW", "NNW",
)  # fmt: skip

_SEPARATORS = re.compile(r"[^0-9.,]+")
_LEADING_SIGN = re.compile(r"^-")
_COMPASS_SUFFIX = re.compile(r"[NSEW]$", re.IGNORECASE)
_NEGATIVE_SUFFIX = re.compile(r"[WS]$", re.IGNORECASE)


class DmsFormat(Enum):
    """Output style for degree formatting."""

    D = "d"
    DM = "dm"
    DMS = "dms"

    @property
    def default_dp(self) -> int:
        """Default number of decimal places for the smallest unit."""
        return {DmsFormat.D: 4, DmsFormat.DM: 2, DmsFormat.DMS: 0}[self]


_FORMAT_ALIASES = {
    "d": DmsFormat.D,
    "deg": DmsFormat.D,
    "dm": DmsFormat.DM,
    "deg+min": DmsFormat.DM,
    "dms": DmsFormat.DMS,
    "deg+min+sec": DmsFormat.DMS,
}


def resolve_format(fmt: Union[str, DmsFormat]) -> DmsFormat:
    """
    Look up a DmsFormat from its short or long name.

    Raises:
        ValueError: If fmt is not a known format
    """
    if isinstance(fmt, DmsFormat):
        return fmt
    try:
        return _FORMAT_ALIASES[fmt]
    except (KeyError, TypeError):
        raise ValueError(
            f"Unknown DMS format {fmt!r}; expected one of {sorted(_FORMAT_ALIASES)}"
        ) from None


def _to_fixed(value: float, dp: int) -> str:
    """Round half-up on the exact binary value and right-pad to dp places."""
    quantum = Decimal(1).scaleb(-dp)
    return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def _component(text: str) -> float:
    # an empty leading piece (e.g. from "+10") counts as zero
    if text == "":
        return 0.0
    try:
        return float(text)
    except ValueError:
        return math.nan


def parse_dms(value: Union[str, float]) -> float:
    """
    Parse a string of degrees/minutes/seconds into decimal degrees.

    Accepts signed decimal degrees, or deg-min-sec optionally suffixed by a
    compass direction (NSEW, any case). Seconds and minutes may be omitted.
    A leading '-' and a trailing S/W each negate the result, so '-10S'
    comes back as +10.

    Args:
        value: Degrees as a number, or text in one of the formats above

    Returns:
        Decimal degrees, or NaN if the value cannot be parsed

    Raises:
        TypeError: If value is neither a string nor a real number

    Example:
        >>> parse_dms("51° 28′ 40.12″ N")
        51.4778...
    """
    if isinstance(value, bool):
        raise TypeError("DMS value must be a string or a number, not bool")
    if isinstance(value, numbers.Real):
        number = float(value)
        return number if math.isfinite(number) else math.nan
    if not isinstance(value, str):
        raise TypeError(
            f"DMS value must be a string or a number, not {type(value).__name__}"
        )

    text = value.strip()
    stripped = _COMPASS_SUFFIX.sub("", _LEADING_SIGN.sub("", text))
    parts = _SEPARATORS.split(stripped)
    if parts[-1] == "":
        parts.pop()  # from trailing symbol

    if not parts or parts == [""] or len(parts) > 3:
        return math.nan

    components = [_component(part) for part in parts]
    degrees = components[0]
    if len(components) > 1:
        degrees += components[1] / 60
    if len(components) > 2:
        degrees += components[2] / 3600

    if _LEADING_SIGN.search(text):
        degrees = -degrees
    if _NEGATIVE_SUFFIX.search(text):
        degrees = -degrees

    return degrees


def to_dms(
    degrees: float,
    fmt: Union[str, DmsFormat] = DmsFormat.DMS,
    dp: Optional[int] = None,
    separator: str = "",
) -> str:
    """
    Format decimal degrees as deg/min/sec with three-digit degrees.

    The sign is discarded and no compass letter is added; see to_lat,
    to_lon and to_bearing for that.

    Args:
        degrees: Angle in decimal degrees
        fmt: 'd', 'dm' or 'dms' (or 'deg', 'deg+min', 'deg+min+sec')
        dp: Decimal places for the smallest unit; default 4, 2 or 0 by format
        separator: Text placed between the components

    Returns:
        Formatted string, or NO_VALUE if degrees is not finite

    Raises:
        TypeError: If degrees is not a number, or dp is not an integer
        ValueError: If fmt is unknown or dp is negative
    """
    if isinstance(degrees, bool) or not isinstance(degrees, numbers.Real):
        raise TypeError(f"degrees must be a number, not {type(degrees).__name__}")
    if not math.isfinite(degrees):
        return NO_VALUE

    style = resolve_format(fmt)
    if dp is None:
        dp = style.default_dp
    if isinstance(dp, bool) or not isinstance(dp, numbers.Integral):
        raise TypeError(f"Decimal places must be an integer, not {type(dp).__name__}")
    if dp < 0:
        raise ValueError(f"Decimal places must be non-negative, got {dp}")

    degrees = abs(float(degrees))

    if style is DmsFormat.D:
        d = _to_fixed(degrees, dp)
        # left-pad with zeros; may include decimals
        if float(d) < 100:
            d = "0" + d
        if float(d) < 10:
            d = "0" + d
        return d + "°"

    if style is DmsFormat.DM:
        whole = math.floor(degrees)
        m = _to_fixed((degrees * 60) % 60, dp)
        if float(m) == 60:
            m = _to_fixed(0, dp)
            whole += 1
        if float(m) < 10:
            m = "0" + m
        return f"{whole:03d}°{separator}{m}′"

    whole = math.floor(degrees)
    minutes = math.floor((degrees * 3600) / 60) % 60
    s = _to_fixed(degrees * 3600 % 60, dp)
    if float(s) == 60:
        s = _to_fixed(0, dp)
        minutes += 1
    if minutes == 60:
        minutes = 0
        whole += 1
    if float(s) < 10:
        s = "0" + s
    return f"{whole:03d}°{separator}{minutes:02d}′{separator}{s}″"


def to_lat(
    degrees: float,
    fmt: Union[str, DmsFormat] = DmsFormat.DMS,
    dp: Optional[int] = None,
    separator: str = "",
) -> str:
    """Format a latitude with two-digit degrees and an N/S suffix."""
    formatted = to_dms(degrees, fmt, dp, separator)
    if formatted == NO_VALUE:
        return NO_VALUE
    return formatted[1:] + separator + ("S" if degrees < 0 else "N")


def to_lon(
    degrees: float,
    fmt: Union[str, DmsFormat] = DmsFormat.DMS,
    dp: Optional[int] = None,
    separator: str = "",
) -> str:
    """Format a longitude with three-digit degrees and an E/W suffix."""
    formatted = to_dms(degrees, fmt, dp, separator)
    if formatted == NO_VALUE:
        return NO_VALUE
    return formatted + separator + ("W" if degrees < 0 else "E")


def to_bearing(
    degrees: float,
    fmt: Union[str, DmsFormat] = DmsFormat.DMS,
    dp: Optional[int] = None,
    separator: str = "",
) -> str:
    """
    Format a bearing in the range 0°..360°.

    Negative values are normalised first. If rounding carries the value up
    to 360° it is written as 0°.
    """
    if isinstance(degrees, bool) or not isinstance(degrees, numbers.Real):
        raise TypeError(f"degrees must be a number, not {type(degrees).__name__}")
    if not math.isfinite(degrees):
        return NO_VALUE
    formatted = to_dms(float(degrees) % 360, fmt, dp, separator)
    if formatted.startswith("360"):
        formatted = "0" + formatted[3:]
    return formatted


def compass_point(bearing: float, precision: int = 3) -> str:
    """
    Return the compass point for a bearing.

    Args:
        bearing: Bearing in degrees from north
        precision: 1 for 4 cardinal points, 2 for 8 intercardinal points,
            3 for 16 secondary-intercardinal points

    Returns:
        Compass point name, e.g. 'NNE'

    Raises:
        TypeError: If bearing is not a number
        ValueError: If bearing is not finite, or precision is not 1, 2 or 3

    Example:
        >>> compass_point(24)
        'NNE'
        >>> compass_point(24, 1)
        'N'
    """
    if isinstance(bearing, bool) or not isinstance(bearing, numbers.Real):
        raise TypeError(f"bearing must be a number, not {type(bearing).__name__}")
    if not math.isfinite(bearing):
        raise ValueError(f"bearing must be finite, got {bearing}")
    if precision not in (1, 2, 3):
        raise ValueError(f"Compass precision must be 1, 2 or 3, got {precision}")

    bearing = bearing % 360
    n = 4 * 2 ** (precision - 1)
    bucket = math.floor(bearing * n / 360 + 0.5) % n
    return CARDINALS[bucket * 16 // n]
