import argparse
from dataclasses import dataclass
from typing import Optional

from .dms import DmsFormat, resolve_format
from .geometry import EARTH_RADIUS


@dataclass
class RouteGeoConfig:
    """Configuration for the routegeo CLI."""

    radius: float = EARTH_RADIUS
    dms_format: DmsFormat = DmsFormat.DMS
    decimal_places: Optional[int] = None
    bearing_tolerance: float = 20.0
    log_level: str = "WARNING"
    metrics: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RouteGeoConfig":
        """Build a configuration from parsed command-line arguments."""
        return cls(
            radius=args.radius,
            dms_format=resolve_format(args.format),
            decimal_places=args.dp,
            bearing_tolerance=getattr(args, "bearing_tolerance", 20.0),
            log_level=args.log_level,
            metrics=args.metrics,
        )
