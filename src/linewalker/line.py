#!/usr/bin/env python3
"""
Walking line data model and construction.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Tuple, Union
import logging
import math

from shapely.geometry import LineString, mapping

from .errors import InvalidParameters
from .geometry import GeoPoint, points_to_linestring
from .geometry_utils import destination_point, haversine_distance, normalize_bearing

logger = logging.getLogger(__name__)

DEFAULT_POINT_COUNT = 5
DEFAULT_SPACING = 10.0
DEFAULT_ARROW_LENGTH = 5.0

# Beyond this latitude the planar projection used for progress tracking degrades
POLAR_LATITUDE_LIMIT = 85.0


@dataclass(frozen=True)
class WalkingLine:
    """A straight line of evenly spaced waypoints anchored at a start point.

    Attributes:
        waypoints: Ordered waypoints; the first one is the start point.
        heading: Compass bearing the line was built along.
        spacing: Distance between consecutive waypoints in meters.
    """

    waypoints: Tuple[GeoPoint, ...]
    heading: float
    spacing: float

    @property
    def start(self) -> GeoPoint:
        return self.waypoints[0]

    @property
    def end(self) -> GeoPoint:
        return self.waypoints[-1]

    @property
    def length(self) -> float:
        """Great-circle distance from the first to the last waypoint in meters."""
        return haversine_distance(self.start, self.end)

    @property
    def linestring(self) -> LineString:
        """The line as a Shapely LineString in (longitude, latitude) order."""
        return points_to_linestring(self.waypoints)

    @property
    def __geo_interface__(self) -> Dict[str, Any]:
        return mapping(self.linestring)

    def __len__(self) -> int:
        return len(self.waypoints)

    def __getitem__(
        self, index: Union[int, slice]
    ) -> Union[GeoPoint, Tuple[GeoPoint, ...]]:
        """Index or slice the waypoints."""
        return self.waypoints[index]

    def __iter__(self) -> Iterator[GeoPoint]:
        return iter(self.waypoints)


def build_walking_line(
    start: GeoPoint,
    heading: float,
    point_count: int = DEFAULT_POINT_COUNT,
    spacing: float = DEFAULT_SPACING,
) -> WalkingLine:
    """
    Build a walking line of waypoints from a start point along a compass heading.

    Waypoint ``i`` lies ``i * spacing`` meters from ``start`` along ``heading``,
    so waypoint 0 is ``start`` itself.

    Args:
        start: Anchor point of the line
        heading: Compass bearing in degrees; finite values outside [0, 360) are wrapped
        point_count: Number of waypoints, at least 2
        spacing: Distance between consecutive waypoints in meters, > 0

    Returns:
        The constructed WalkingLine

    Raises:
        InvalidParameters: If point_count < 2, spacing <= 0, or heading/spacing
            is not finite
    """
    if point_count < 2:
        raise InvalidParameters(
            f"A walking line needs at least 2 points, got {point_count}"
        )
    if not math.isfinite(spacing) or spacing <= 0:
        raise InvalidParameters(f"Spacing must be a finite value > 0, got {spacing}")
    if not math.isfinite(heading):
        raise InvalidParameters(f"Heading must be finite, got {heading}")

    if abs(start.latitude) > POLAR_LATITUDE_LIMIT:
        logger.warning(
            f"Line start at latitude {start.latitude:.3f}° is within "
            f"{90 - POLAR_LATITUDE_LIMIT:.0f} degrees of a pole; progress tracking "
            f"will be inaccurate"
        )

    heading = normalize_bearing(heading)
    waypoints = tuple(
        destination_point(start, heading, i * spacing) for i in range(point_count)
    )

    logger.debug(
        f"Built walking line from {start} heading {heading:.1f}° with "
        f"{point_count} points every {spacing}m"
    )
    return WalkingLine(waypoints=waypoints, heading=heading, spacing=spacing)


def heading_arrow(
    origin: GeoPoint, heading: float, length: float = DEFAULT_ARROW_LENGTH
) -> Tuple[GeoPoint, GeoPoint]:
    """Return the endpoints of a short segment from origin pointing along heading."""
    return origin, destination_point(origin, heading, length)
