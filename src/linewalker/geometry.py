#!/usr/bin/env python3
"""
Geographic value types shared by the line walking core.

This module defines the immutable point and sample types that flow between
the location source, the smoother and the progress tracker, together with a
helper that turns a sequence of points into a Shapely LineString for
presentation layers.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import math

from shapely.geometry import LineString

from .errors import OutOfRange

# Mean Earth radius used by every spherical formula in the package
EARTH_RADIUS_M = 6371000.0

# Planar approximation constant: meters per degree of latitude
METERS_PER_DEGREE = 111320.0


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84-style latitude/longitude pair in decimal degrees.

    Raises:
        OutOfRange: If either coordinate is not finite or lies outside
            [-90, 90] / [-180, 180].
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.latitude) or not -90.0 <= self.latitude <= 90.0:
            raise OutOfRange(f"Latitude {self.latitude} outside [-90, 90]")
        if not math.isfinite(self.longitude) or not -180.0 <= self.longitude <= 180.0:
            raise OutOfRange(f"Longitude {self.longitude} outside [-180, 180]")

    def __str__(self) -> str:
        return f"{self.latitude:.5f}, {self.longitude:.5f}"


@dataclass(frozen=True)
class PositionSample:
    """A single reading from a location source.

    Attributes:
        point: Reported position.
        accuracy: Horizontal accuracy radius in meters, None when unknown.
        heading: Course over ground in compass degrees [0, 360), None when
            the source did not report one.
        timestamp: Seconds on the source's clock; non-decreasing per source.
    """

    point: GeoPoint
    accuracy: Optional[float] = None
    heading: Optional[float] = None
    timestamp: float = 0.0

    def __post_init__(self) -> None:
        if self.accuracy is not None and (
            not math.isfinite(self.accuracy) or self.accuracy < 0
        ):
            raise OutOfRange(f"Accuracy {self.accuracy} must be a finite value >= 0")
        if self.heading is not None and (
            not math.isfinite(self.heading) or not 0.0 <= self.heading < 360.0
        ):
            raise OutOfRange(f"Heading {self.heading} outside [0, 360)")

    @property
    def latitude(self) -> float:
        return self.point.latitude

    @property
    def longitude(self) -> float:
        return self.point.longitude


def points_to_linestring(points: Sequence[GeoPoint]) -> LineString:
    """
    Convert a sequence of GeoPoints to a Shapely LineString.

    Coordinates are emitted in (longitude, latitude) order, matching GeoJSON.

    Args:
        points: Ordered points of the polyline

    Returns:
        LineString in geographic coordinates

    Raises:
        ValueError: If fewer than two points are given
    """
    if len(points) < 2:
        raise ValueError("At least two positions are required to create a LineString.")

    return LineString([(point.longitude, point.latitude) for point in points])
