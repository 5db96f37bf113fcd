"""
Module for collecting and logging metrics related to routes.
"""

import collections
import logging
from typing import Dict, List, NamedTuple

from .config import RouteGeoConfig
from .geometry import EARTH_RADIUS
from .notes import RouteNote
from .route import Route

logger = logging.getLogger(__name__)


class RouteMetrics(NamedTuple):
    """Container for route metrics data."""

    node_count: int
    total_distance: float
    rhumb_total_distance: float
    turn_counts: Dict[str, int]


def collect_metrics(
    route: Route, notes: List[RouteNote], radius: float = EARTH_RADIUS
) -> RouteMetrics:
    """
    Collect summary metrics for a described route.

    Args:
        route: The route that was described
        notes: Route notes from describe_route
        radius: Earth radius used for the distance totals

    Returns:
        RouteMetrics containing all collected metrics
    """
    turn_counts: Dict[str, int] = collections.defaultdict(int)
    for note in notes:
        turn_counts[note.turn.value] += 1

    return RouteMetrics(
        node_count=len(route),
        total_distance=route.total_distance(radius),
        rhumb_total_distance=route.rhumb_total_distance(radius),
        turn_counts=dict(turn_counts),
    )


def log_metrics(metrics: RouteMetrics, config: RouteGeoConfig) -> None:
    """
    Log detailed metrics after describing a route.

    Args:
        metrics: RouteMetrics containing collected metrics
        config: Settings; nothing is logged unless config.metrics is set
    """
    if not config.metrics:
        return

    logger.debug("=== ROUTEGEO_METRICS ===")
    logger.debug(f"node_count={metrics.node_count}")
    logger.debug(f"total_distance={metrics.total_distance:.3f}")
    logger.debug(f"rhumb_total_distance={metrics.rhumb_total_distance:.3f}")
    for turn, count in sorted(metrics.turn_counts.items()):
        logger.debug(f"turns[{turn}]={count}")
    logger.debug("=== END_ROUTEGEO_METRICS ===")
