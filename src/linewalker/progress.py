#!/usr/bin/env python3
"""
Projection of positions onto a walking line and progress status tiers.

Lines are tens of meters long, so positions are projected in a local
tangent plane anchored at the first waypoint rather than on the sphere.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple
import logging
import math

from .errors import DegenerateLine, OutOfRange
from .geometry import METERS_PER_DEGREE, GeoPoint
from .geometry_utils import haversine_distance, normalize_longitude

logger = logging.getLogger(__name__)


class StatusTier(Enum):
    """Coarse progress status used for user-facing phrasing."""

    IN_PROGRESS = "in_progress"
    HALFWAY = "halfway"
    NEAR = "near"
    COMPLETE = "complete"

    def __str__(self) -> str:
        return self.value.replace("_", " ").capitalize()

    @property
    def message(self) -> str:
        return _TIER_MESSAGES[self]


_TIER_MESSAGES = {
    StatusTier.IN_PROGRESS: "Walking...",
    StatusTier.HALFWAY: "Halfway there!",
    StatusTier.NEAR: "Almost there!",
    StatusTier.COMPLETE: "Completed the line!",
}


def status_tier(progress: float) -> StatusTier:
    """
    Map a progress fraction to its status tier.

    Lower bounds are inclusive: 1.0 is COMPLETE, [0.8, 1.0) NEAR,
    [0.5, 0.8) HALFWAY and anything below 0.5 IN_PROGRESS.

    Raises:
        OutOfRange: If progress is NaN
    """
    if math.isnan(progress):
        raise OutOfRange("Progress must not be NaN")
    if progress >= 1.0:
        return StatusTier.COMPLETE
    if progress >= 0.8:
        return StatusTier.NEAR
    if progress >= 0.5:
        return StatusTier.HALFWAY
    return StatusTier.IN_PROGRESS


@dataclass(frozen=True)
class Projection:
    """Where a position falls relative to a walking line.

    Attributes:
        point: Nearest point on the line.
        progress: Fraction of the line covered, clamped to [0, 1].
        lateral_distance: Distance in meters from the position to ``point``.
    """

    point: GeoPoint
    progress: float
    lateral_distance: float

    @property
    def percent(self) -> float:
        return self.progress * 100.0

    @property
    def status(self) -> StatusTier:
        return status_tier(self.progress)


def _planar_offset(origin: GeoPoint, point: GeoPoint) -> Tuple[float, float]:
    """
    Signed east/north offset in meters of point from origin.

    Each axis is measured as the great-circle distance along a pure longitude
    or pure latitude displacement from origin.
    """
    x = haversine_distance(origin, GeoPoint(origin.latitude, point.longitude))
    y = haversine_distance(origin, GeoPoint(point.latitude, origin.longitude))
    if point.longitude < origin.longitude:
        x = -x
    if point.latitude < origin.latitude:
        y = -y
    return x, y


def project_onto_line(line: Sequence[GeoPoint], position: GeoPoint) -> Projection:
    """
    Project a position onto the straight line from the first to the last waypoint.

    Args:
        line: WalkingLine or any ordered sequence of at least two waypoints
        position: Position to project, typically a smoothed sample

    Returns:
        Projection with the nearest point on the line, clamped progress and
        lateral distance

    Raises:
        DegenerateLine: If the line has fewer than two waypoints or zero length
    """
    if len(line) < 2:
        raise DegenerateLine(f"Line needs at least 2 waypoints, got {len(line)}")

    start = line[0]
    end = line[-1]
    if start == end:
        raise DegenerateLine("Line start and end coincide")

    line_x, line_y = _planar_offset(start, end)
    user_x, user_y = _planar_offset(start, position)

    length_sq = line_x**2 + line_y**2
    if length_sq == 0:
        raise DegenerateLine("Line has zero planar length")

    raw_progress = (user_x * line_x + user_y * line_y) / length_sq
    progress = max(0.0, min(1.0, raw_progress))

    projected_x = progress * line_x
    projected_y = progress * line_y

    # Inverse of the planar approximation
    projected_lat = start.latitude + projected_y / METERS_PER_DEGREE
    projected_lon = start.longitude + projected_x / (
        METERS_PER_DEGREE * math.cos(math.radians(start.latitude))
    )
    projected = GeoPoint(
        latitude=max(-90.0, min(90.0, projected_lat)),
        longitude=normalize_longitude(projected_lon),
    )

    lateral_distance = haversine_distance(position, projected)

    logger.debug(
        f"Projected {position}: raw_progress={raw_progress:.4f}, "
        f"progress={progress:.4f}, lateral={lateral_distance:.2f}m"
    )
    return Projection(
        point=projected, progress=progress, lateral_distance=lateral_distance
    )


def progress_segment(
    line: Sequence[GeoPoint], projection: Projection
) -> List[GeoPoint]:
    """
    Return the part of the line already walked, for drawing a progress overlay.

    Args:
        line: The walking line the projection was made against
        projection: Latest projection onto that line

    Returns:
        Just the start point at zero progress, every waypoint once the line
        is complete, otherwise the start point and the projected point
    """
    if projection.progress <= 0:
        return [line[0]]
    if projection.progress >= 1:
        return list(line)
    return [line[0], projection.point]
