#!/usr/bin/env python3
"""
Great-circle distance and bearing calculations on a spherical Earth.
"""

import logging
import math

from .errors import InvalidParameters
from .geometry import EARTH_RADIUS_M, GeoPoint

logger = logging.getLogger(__name__)


def normalize_longitude(longitude: float) -> float:
    """Wrap a longitude in degrees into [-180, 180)."""
    if -180.0 <= longitude < 180.0:
        return longitude
    return (longitude + 180.0) % 360.0 - 180.0


def normalize_bearing(bearing: float) -> float:
    """Wrap a bearing in degrees into [0, 360)."""
    bearing = bearing % 360.0
    # -1e-20 % 360.0 rounds to 360.0
    return 0.0 if bearing == 360.0 else bearing


def haversine_distance(pos1: GeoPoint, pos2: GeoPoint) -> float:
    """
    Calculate the haversine distance between two positions.

    The haversine intermediate is clamped to [0, 1] so that rounding on
    near-antipodal points cannot push it outside the domain of asin(sqrt()).

    Args:
        pos1: First position
        pos2: Second position

    Returns:
        Distance in meters
    """
    lat1, lon1 = math.radians(pos1.latitude), math.radians(pos1.longitude)
    lat2, lon2 = math.radians(pos2.latitude), math.radians(pos2.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    a = min(1.0, max(0.0, a))

    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


def destination_point(origin: GeoPoint, bearing: float, distance: float) -> GeoPoint:
    """
    Find the point reached by travelling along a great circle.

    Args:
        origin: Starting position
        bearing: Initial compass bearing in degrees (0 = north, 90 = east)
        distance: Distance to travel in meters

    Returns:
        Destination position with longitude wrapped into [-180, 180).
        A zero distance returns ``origin`` itself.

    Raises:
        InvalidParameters: If distance is negative or either argument is not finite
    """
    if not math.isfinite(distance) or distance < 0:
        raise InvalidParameters(f"Distance must be a finite value >= 0, got {distance}")
    if not math.isfinite(bearing):
        raise InvalidParameters(f"Bearing must be finite, got {bearing}")
    if distance == 0:
        return origin

    delta = distance / EARTH_RADIUS_M
    phi1 = math.radians(origin.latitude)
    lambda1 = math.radians(origin.longitude)
    theta = math.radians(bearing)

    sin_phi2 = math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(
        delta
    ) * math.cos(theta)
    phi2 = math.asin(min(1.0, max(-1.0, sin_phi2)))
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )

    return GeoPoint(
        latitude=math.degrees(phi2),
        longitude=normalize_longitude(math.degrees(lambda2)),
    )


def calculate_bearing(start: GeoPoint, end: GeoPoint) -> float:
    """
    Calculate the initial great-circle bearing from one position to another.

    Args:
        start: Starting position
        end: Ending position

    Returns:
        Bearing in degrees, 0 = north, clockwise, in [0, 360)
    """
    lat1, lat2 = math.radians(start.latitude), math.radians(end.latitude)
    dlon = math.radians(end.longitude - start.longitude)

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(
        dlon
    )

    return normalize_bearing(math.degrees(math.atan2(y, x)))
