#!/usr/bin/env python3
"""
Spherical geodesy calculator.

Computes great-circle and rhumb-line distances, bearings, destinations and
intersections between points given in decimal degrees or
degrees/minutes/seconds, and describes routes returned by a routing service
(JSON) or stored as GPX files.
"""

from typing import List, Optional
import argparse
import json
import logging
import math
import sys

from gpxpy import gpx

from . import __version__
from .config import RouteGeoConfig
from .dms import NO_VALUE, compass_point, parse_dms, to_bearing
from .geometry import EARTH_RADIUS, LatLon
from .great_circle import (
    destination_point,
    distance,
    final_bearing,
    initial_bearing,
    intersection,
    midpoint,
)
from .metrics import collect_metrics, log_metrics
from .notes import describe_route, format_notes
from .rhumb import (
    rhumb_bearing,
    rhumb_destination_point,
    rhumb_distance,
    rhumb_midpoint,
)
from .route import Route

# Configure logging
logger = logging.getLogger("routegeo")


def dms_argument(value: str) -> float:
    """argparse type for decimal-degree or DMS values."""
    degrees = parse_dms(value)
    if math.isnan(degrees):
        raise argparse.ArgumentTypeError(f"cannot parse degrees from {value!r}")
    return degrees


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Spherical-earth geodesy calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--radius",
        type=float,
        default=EARTH_RADIUS,
        help="Earth radius in metres (default: 6371000)",
    )
    parser.add_argument(
        "--format",
        type=str,
        default="dms",
        choices=["d", "dm", "dms"],
        help="Output format for positions and bearings (default: dms)",
    )
    parser.add_argument(
        "--dp",
        type=int,
        default=None,
        help="Decimal places for positions and bearings (default: 4/2/0 by format)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Output structured metrics after describing a route",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"routegeo {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    distance_parser = subparsers.add_parser(
        "distance", help="Distance, bearings and midpoint between two points"
    )
    for name in ("lat1", "lon1", "lat2", "lon2"):
        distance_parser.add_argument(name, type=dms_argument)
    distance_parser.add_argument(
        "--rhumb", action="store_true", help="Use a rhumb line instead of a great circle"
    )

    destination_parser = subparsers.add_parser(
        "destination", help="Point reached from a start point, distance and bearing"
    )
    destination_parser.add_argument("lat", type=dms_argument)
    destination_parser.add_argument("lon", type=dms_argument)
    destination_parser.add_argument("distance", type=float, help="Distance in metres")
    destination_parser.add_argument("bearing", type=dms_argument, help="Bearing in degrees")
    destination_parser.add_argument(
        "--rhumb", action="store_true", help="Travel on a constant bearing"
    )

    intersection_parser = subparsers.add_parser(
        "intersection", help="Intersection of two paths given by points and bearings"
    )
    for name in ("lat1", "lon1", "bearing1", "lat2", "lon2", "bearing2"):
        intersection_parser.add_argument(name, type=dms_argument)

    route_parser = subparsers.add_parser(
        "route", help="Describe a route from a JSON routing response or GPX file"
    )
    route_parser.add_argument("filename", type=str, help="Route file to process")
    route_parser.add_argument(
        "--bearing-tolerance",
        type=float,
        default=20.0,
        help="Course change in degrees still counted as straight on (default: 20.0)",
    )

    area_parser = subparsers.add_parser(
        "area", help="Area of the polygon formed by the nodes of a route file"
    )
    area_parser.add_argument("filename", type=str, help="Polygon file to process")

    return parser


def setup_logging(config: RouteGeoConfig) -> None:
    """Setup logging configuration."""
    if hasattr(sys.stdout, "reconfigure") and sys.stdout.encoding != "utf-8":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
            if hasattr(sys.stderr, "reconfigure") and sys.stderr.encoding != "utf-8":
                sys.stderr.reconfigure(encoding="utf-8")
            logger.debug("Reconfigured stdout and stderr to UTF-8 encoding.")
        except (AttributeError, ValueError, OSError) as e:
            logger.debug(f"Could not reconfigure stdout/stderr to UTF-8: {e}")
    level = getattr(logging, config.log_level)

    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    # Create console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)


def format_bearing(bearing: Optional[float], config: RouteGeoConfig) -> str:
    """Format a bearing with its compass point, or NO_VALUE if undefined."""
    if bearing is None:
        return NO_VALUE
    formatted = to_bearing(bearing, config.dms_format, config.decimal_places)
    return f"{formatted} ({compass_point(bearing)})"


def run_distance(args: argparse.Namespace, config: RouteGeoConfig) -> None:
    """Print distance, bearings and midpoint between two points."""
    p1 = LatLon(args.lat1, args.lon1)
    p2 = LatLon(args.lat2, args.lon2)
    fmt, dp = config.dms_format, config.decimal_places

    if args.rhumb:
        dist = rhumb_distance(p1, p2, config.radius)
        print(f"Rhumb distance: {dist / 1000:.3f} km")
        print(f"Bearing: {format_bearing(rhumb_bearing(p1, p2), config)}")
        print(f"Midpoint: {rhumb_midpoint(p1, p2).to_string(fmt, dp)}")
        return

    dist = distance(p1, p2, config.radius)
    print(f"Distance: {dist / 1000:.3f} km")
    print(f"Initial bearing: {format_bearing(initial_bearing(p1, p2), config)}")
    print(f"Final bearing: {format_bearing(final_bearing(p1, p2), config)}")
    print(f"Midpoint: {midpoint(p1, p2).to_string(fmt, dp)}")


def run_destination(args: argparse.Namespace, config: RouteGeoConfig) -> None:
    """Print the point reached from a start point, distance and bearing."""
    start = LatLon(args.lat, args.lon)
    fmt, dp = config.dms_format, config.decimal_places

    if args.rhumb:
        end = rhumb_destination_point(start, args.distance, args.bearing, config.radius)
        print(f"Destination: {end.to_string(fmt, dp)}")
        return

    end = destination_point(start, args.distance, args.bearing, config.radius)
    print(f"Destination: {end.to_string(fmt, dp)}")
    print(f"Final bearing: {format_bearing(final_bearing(start, end), config)}")


def run_intersection(args: argparse.Namespace, config: RouteGeoConfig) -> None:
    """Print the intersection of two paths."""
    p1 = LatLon(args.lat1, args.lon1)
    p2 = LatLon(args.lat2, args.lon2)
    crossing = intersection(p1, args.bearing1, p2, args.bearing2)
    if crossing is None:
        print("No unique intersection")
        return
    print(
        f"Intersection: {crossing.to_string(config.dms_format, config.decimal_places)}"
    )


def load_route(filename: str) -> Route:
    """
    Load a route file, exiting with status 1 if it cannot be used.
    """
    try:
        route = Route.from_file(filename)
    except FileNotFoundError:
        logger.error(f"Route file not found: {filename}")
        sys.exit(1)
    except PermissionError:
        logger.error(f"Cannot read route file (permission denied): {filename}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON route file: {e}")
        sys.exit(1)
    except gpx.GPXException as e:
        logger.error(f"Invalid GPX file: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid route: {e}")
        sys.exit(1)
    logger.info(f"Loaded route with {len(route)} nodes")
    return route


def run_route(args: argparse.Namespace, config: RouteGeoConfig) -> None:
    """Print a turn-by-turn description of a route file."""
    route = load_route(args.filename)
    logger.info(f"Total route distance: {route.total_distance(config.radius) / 1000:.2f} km")

    notes = describe_route(route, config.bearing_tolerance, config.radius)
    for line in format_notes(notes, config.dms_format, config.decimal_places):
        print(line)

    metrics = collect_metrics(route, notes, config.radius)
    log_metrics(metrics, config)


def run_area(args: argparse.Namespace, config: RouteGeoConfig) -> None:
    """Print the area enclosed by the nodes of a route file."""
    route = load_route(args.filename)
    try:
        area = route.enclosed_area(config.radius)
    except ValueError as e:
        logger.error(f"Cannot compute area: {e}")
        sys.exit(1)
    print(f"Area: {area:.1f} m² ({area / 1e6:.3f} km²)")


COMMANDS = {
    "distance": run_distance,
    "destination": run_destination,
    "intersection": run_intersection,
    "route": run_route,
    "area": run_area,
}


def main(argv: Optional[List[str]] = None) -> None:
    """
    Parses command-line arguments and runs the selected calculation.
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = RouteGeoConfig.from_args(args)

    # Setup logging
    setup_logging(config)

    COMMANDS[args.command](args, config)


if __name__ == "__main__":
    main()
