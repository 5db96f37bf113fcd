#!/usr/bin/env python3
"""
Route data model: an ordered list of nodes returned by a routing service.
"""

from typing import Any, Dict, List, Optional, TextIO, Tuple
import json
import logging
import math

import gpxpy
import gpxpy.gpx

from .dms import parse_dms
from .geometry import EARTH_RADIUS, LatLon
from .great_circle import area_of, distance, initial_bearing
from .rhumb import rhumb_distance

logger = logging.getLogger(__name__)


def round_significant(value: float, digits: int = 4) -> float:
    """
    Round a value to a number of significant figures.

    Args:
        value: Value to round
        digits: Significant figures to keep

    Returns:
        Rounded value, e.g. 404279.16 -> 404300.0 for four digits
    """
    if digits < 1:
        raise ValueError(f"digits must be at least 1, got {digits}")
    if value == 0 or not math.isfinite(value):
        return value
    return float(f"{value:.{digits}g}")


def leg_distance(
    lat1: Any, lon1: Any, lat2: Any, lon2: Any, radius: float = EARTH_RADIUS
) -> float:
    """
    Distance between two points given as decimal or DMS values.

    Each value goes through parse_dms, so routing responses that carry
    coordinates as strings can be used directly. The result is rounded to
    four significant figures.

    Raises:
        ValueError: If any value cannot be parsed
    """
    p1 = LatLon.from_dms(lat1, lon1)
    p2 = LatLon.from_dms(lat2, lon2)
    return round_significant(distance(p1, p2, radius), 4)


def _node_from_json(raw: Any, index: int) -> Tuple[LatLon, Any, Optional[float]]:
    """Convert one node object of a routing response."""
    if not isinstance(raw, dict):
        raise ValueError(f"Route node {index} is not an object: {raw!r}")
    if "lat" not in raw or "lon" not in raw:
        raise ValueError(f"Route node {index} has no lat/lon: {raw!r}")

    try:
        position = LatLon.from_dms(raw["lat"], raw["lon"])
    except (TypeError, ValueError) as e:
        raise ValueError(f"Route node {index} has invalid coordinates: {e}") from e

    weight = raw.get("w")
    if weight is not None:
        weight = float(weight)

    return position, raw.get("id"), weight


class Route:
    """An ordered sequence of route nodes with memoized distance calculations."""

    def __init__(
        self,
        coords: List[LatLon],
        node_ids: Optional[List[Any]] = None,
        weights: Optional[List[Optional[float]]] = None,
    ):
        """Initializes a Route object.

        Args:
            coords: LatLon points in route order
            node_ids: Optional routing-service node ids, one per point
            weights: Optional edge weights, one per point

        Raises:
            TypeError: If any coordinate is not a LatLon.
            ValueError: If there are fewer than two coordinates, or the ids or
                weights do not match the coordinates in length.
        """
        if len(coords) < 2:
            raise ValueError("Route must have at least two coordinates")
        for i, coord in enumerate(coords):
            if not isinstance(coord, LatLon):
                raise TypeError(f"Route point {i} is not a LatLon object")
        if node_ids is not None and len(node_ids) != len(coords):
            raise ValueError("node_ids must have one entry per coordinate")
        if weights is not None and len(weights) != len(coords):
            raise ValueError("weights must have one entry per coordinate")

        self.coords = list(coords)
        self.node_ids = list(node_ids) if node_ids is not None else [None] * len(
            coords
        )
        self.weights = list(weights) if weights is not None else [None] * len(coords)
        self._cumulative: Dict[float, List[float]] = {}

    def __len__(self) -> int:
        """Return number of nodes in route."""
        return len(self.coords)

    def __getitem__(self, index):
        """Allow indexing into nodes."""
        return self.coords[index]

    def __iter__(self):
        """Allow iteration over nodes."""
        return iter(self.coords)

    def get_bbox(self) -> Tuple[float, float, float, float]:
        """
        Bounding box of the route nodes.

        Returns:
            Tuple of (south, west, north, east) in decimal degrees
        """
        latitudes = [coord.latitude for coord in self.coords]
        longitudes = [coord.longitude for coord in self.coords]
        return (min(latitudes), min(longitudes), max(latitudes), max(longitudes))

    def segment_distances(self, radius: float = EARTH_RADIUS) -> List[float]:
        """Great-circle length of each leg, in units of radius."""
        return [
            distance(self.coords[i - 1], self.coords[i], radius)
            for i in range(1, len(self.coords))
        ]

    def segment_bearings(self) -> List[Optional[float]]:
        """Initial bearing of each leg; None for zero-length legs."""
        return [
            initial_bearing(self.coords[i - 1], self.coords[i])
            for i in range(1, len(self.coords))
        ]

    def cumulative_distances(self, radius: float = EARTH_RADIUS) -> List[float]:
        """
        Distance from the route start to each node.

        The list starts with 0.0 and is memoized per radius.
        """
        if radius not in self._cumulative:
            cumulative = [0.0]
            for leg in self.segment_distances(radius):
                cumulative.append(cumulative[-1] + leg)
            self._cumulative[radius] = cumulative
        return self._cumulative[radius]

    def total_distance(self, radius: float = EARTH_RADIUS) -> float:
        """Great-circle length of the whole route."""
        return self.cumulative_distances(radius)[-1]

    def rhumb_total_distance(self, radius: float = EARTH_RADIUS) -> float:
        """Length of the route if every leg is flown on a constant bearing."""
        return sum(
            rhumb_distance(self.coords[i - 1], self.coords[i], radius)
            for i in range(1, len(self.coords))
        )

    def enclosed_area(self, radius: float = EARTH_RADIUS) -> float:
        """Area of the polygon formed by the route nodes."""
        return area_of(self.coords, radius)

    @classmethod
    def from_json(cls, file_input: TextIO) -> "Route":
        """
        Parse a routing-service response into a route.

        The response is either a list of node objects or an object whose
        values are node objects. Each node has 'lat' and 'lon' (numbers or
        DMS strings) and optionally 'id' and 'w' (edge weight).

        Args:
            file_input: File-like object containing JSON data

        Returns:
            Route object

        Raises:
            json.JSONDecodeError: If the input is not valid JSON.
            ValueError: If a node is malformed or there are fewer than two nodes.
        """
        data = json.load(file_input)
        if isinstance(data, dict):
            raw_nodes = list(data.values())
        elif isinstance(data, list):
            raw_nodes = data
        else:
            raise ValueError("Routing response must be a JSON list or object")

        coords, node_ids, weights = [], [], []
        for i, raw in enumerate(raw_nodes):
            position, node_id, weight = _node_from_json(raw, i)
            coords.append(position)
            node_ids.append(node_id)
            weights.append(weight)

        route = cls(coords, node_ids, weights)
        logger.debug(f"Parsed {len(route)} nodes from routing response")
        return route

    @classmethod
    def from_gpx(cls, file_input: TextIO) -> "Route":
        """
        Parse a GPX file, concatenating all track segments and then all routes.

        Args:
            file_input: File-like object containing GPX data

        Returns:
            Route object

        Raises:
            gpxpy.gpx.GPXException: If GPX file is malformed.
            ValueError: If the file holds fewer than two points.
        """
        gpx_data = gpxpy.parse(file_input)

        coords = []
        for track in gpx_data.tracks:
            for segment in track.segments:
                for point in segment.points:
                    coords.append(LatLon(point.latitude, point.longitude))
        for gpx_route in gpx_data.routes:
            for point in gpx_route.points:
                coords.append(LatLon(point.latitude, point.longitude))

        route = cls(coords)
        logger.debug(f"Parsed {len(route)} points from GPX file")
        return route

    @classmethod
    def from_file(cls, filename: str) -> "Route":
        """
        Load a route from a .gpx file or a JSON routing response.

        Args:
            filename: Path to the file; '.gpx' (any case) selects GPX parsing

        Returns:
            Route object

        Raises:
            FileNotFoundError: If file doesn't exist.
            PermissionError: If file can't be read.
            ValueError: If the route is malformed.
        """
        logger.debug(f"Reading route file: {filename}")
        with open(filename, "r", encoding="utf-8") as f:
            if filename.lower().endswith(".gpx"):
                return cls.from_gpx(f)
            return cls.from_json(f)
