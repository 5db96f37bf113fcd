#!/usr/bin/env python3
"""
routegeo - Spherical-earth geodesy for route analysis.

This package provides great-circle and rhumb-line calculations on a
spherical earth model, a degrees/minutes/seconds codec, and tools for
describing routes returned by a routing service.
"""
import importlib.metadata

__version__ = importlib.metadata.version("routegeo")

# Import main classes for public API
from .geometry import EARTH_RADIUS, LatLon
from .great_circle import ParallelCrossing
from .dms import DmsFormat, parse_dms
from .route import Route
from .notes import RouteNote, Turn

__all__ = [
    "EARTH_RADIUS",
    "LatLon",
    "ParallelCrossing",
    "DmsFormat",
    "parse_dms",
    "Route",
    "RouteNote",
    "Turn",
]
