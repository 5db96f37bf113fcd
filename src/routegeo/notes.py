#!/usr/bin/env python3
"""
Turn-by-turn route descriptions.
"""

from enum import Enum
from typing import Any, List, NamedTuple, Optional, Union
import logging

from .dms import DmsFormat, compass_point
from .geometry import EARTH_RADIUS, LatLon, wrap180
from .route import Route

logger = logging.getLogger(__name__)


class Turn(Enum):
    """Manoeuvre at the start of a route leg."""

    START = "start"
    STRAIGHT = "straight"
    LEFT = "left"
    RIGHT = "right"

    def __str__(self) -> str:
        return self.value


class RouteNote(NamedTuple):
    """One line of a route description: the leg arriving at a node."""

    index: int
    node_id: Any
    position: LatLon
    distance: float  # length of the leg ending here, 0 for the start
    bearing: Optional[float]  # initial bearing of that leg
    heading: Optional[str]  # compass point of the bearing
    turn: Turn


def classify_turn(
    previous_bearing: Optional[float], bearing: Optional[float], tolerance: float
) -> Turn:
    """
    Classify the change of course between two legs.

    Args:
        previous_bearing: Bearing of the previous leg in degrees
        bearing: Bearing of the new leg in degrees
        tolerance: Largest change in degrees still counted as straight on

    Returns:
        Turn.LEFT, Turn.RIGHT or Turn.STRAIGHT
    """
    if previous_bearing is None or bearing is None:
        return Turn.STRAIGHT
    change = wrap180(bearing - previous_bearing)
    if change > tolerance:
        return Turn.RIGHT
    if change < -tolerance:
        return Turn.LEFT
    return Turn.STRAIGHT


def describe_route(
    route: Route, bearing_tolerance: float = 20.0, radius: float = EARTH_RADIUS
) -> List[RouteNote]:
    """
    Build a route description with one note per node.

    Zero-length legs keep the bearing of the leg before them so that
    duplicated nodes do not register as turns.

    Args:
        route: Route to describe
        bearing_tolerance: Course change in degrees below which a leg is
            considered to continue straight on
        radius: Earth radius for leg distances

    Returns:
        Notes in route order, starting with a Turn.START note
    """
    distances = route.segment_distances(radius)
    bearings = route.segment_bearings()

    notes = [
        RouteNote(
            index=0,
            node_id=route.node_ids[0],
            position=route[0],
            distance=0.0,
            bearing=None,
            heading=None,
            turn=Turn.START,
        )
    ]

    previous_bearing: Optional[float] = None
    for i in range(1, len(route)):
        bearing = bearings[i - 1]
        if bearing is None:
            bearing = previous_bearing
        turn = classify_turn(previous_bearing, bearing, bearing_tolerance)
        notes.append(
            RouteNote(
                index=i,
                node_id=route.node_ids[i],
                position=route[i],
                distance=distances[i - 1],
                bearing=bearing,
                heading=compass_point(bearing) if bearing is not None else None,
                turn=turn,
            )
        )
        previous_bearing = bearing

    turns = sum(1 for note in notes if note.turn in (Turn.LEFT, Turn.RIGHT))
    logger.debug(f"Described route with {len(notes)} nodes and {turns} turns")
    return notes


def format_notes(
    notes: List[RouteNote],
    fmt: Union[str, DmsFormat] = DmsFormat.DMS,
    dp: Optional[int] = None,
) -> List[str]:
    """
    Render a route description as text lines.

    Args:
        notes: Output of describe_route
        fmt: DMS format used for positions
        dp: Decimal places used for positions

    Returns:
        Lines for the start, each leg, the destination and the total length
    """
    if not notes:
        return []

    lines = [f"Start: {notes[0].position.to_string(fmt, dp)}"]
    total = 0.0
    for note in notes[1:]:
        total += note.distance
        action = "follow the road"
        if note.turn in (Turn.LEFT, Turn.RIGHT):
            action = f"turn {note.turn} and follow the road"
        heading = f" heading {note.heading}" if note.heading else ""
        lines.append(
            f"{note.index}) {action} for {round(note.distance)} m{heading}"
            f" -> {note.position.to_string(fmt, dp)}"
        )

    lines.append(f"Destination: {notes[-1].position.to_string(fmt, dp)}")
    lines.append(f"Total route length: {total / 1000:.3f} km over {len(notes)} nodes")
    return lines
