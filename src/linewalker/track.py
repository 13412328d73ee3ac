#!/usr/bin/env python3
"""
GPX import of recorded position samples and GPX export of walking lines.
"""

from typing import List, Optional, TextIO
import logging

import gpxpy
import gpxpy.gpx

from .geometry import GeoPoint, PositionSample
from .geometry_utils import normalize_bearing
from .line import WalkingLine

logger = logging.getLogger(__name__)

# Rough user equivalent range error, converts HDOP to an accuracy radius
METERS_PER_HDOP = 5.0


def _point_to_sample(point: gpxpy.gpx.GPXTrackPoint, index: int) -> PositionSample:
    timestamp = point.time.timestamp() if point.time is not None else float(index)

    accuracy: Optional[float] = None
    if point.horizontal_dilution is not None:
        accuracy = point.horizontal_dilution * METERS_PER_HDOP

    heading: Optional[float] = None
    course = getattr(point, "course", None)
    if course is not None:
        heading = normalize_bearing(course)

    return PositionSample(
        point=GeoPoint(latitude=point.latitude, longitude=point.longitude),
        accuracy=accuracy,
        heading=heading,
        timestamp=timestamp,
    )


def samples_from_gpx(file_input: TextIO) -> List[PositionSample]:
    """
    Parse a GPX document into position samples, one per track point.

    All tracks and segments are concatenated in document order. Points
    without a time are stamped with their index.

    Args:
        file_input: File-like object containing GPX data

    Returns:
        List of PositionSample objects

    Raises:
        gpxpy.gpx.GPXException: If the GPX document is malformed
        OutOfRange: If a point has invalid coordinates
    """
    gpx_data = gpxpy.parse(file_input)

    samples = []
    index = 0
    for track in gpx_data.tracks:
        for segment in track.segments:
            for point in segment.points:
                samples.append(_point_to_sample(point, index))
                index += 1

    if not samples:
        logger.warning("No track points found in GPX file")
    else:
        logger.debug(f"Parsed {len(samples)} track points from GPX file")
    return samples


def samples_from_file(filename: str) -> List[PositionSample]:
    """
    Load position samples from a GPX file.

    Raises:
        FileNotFoundError: If file doesn't exist.
        PermissionError: If file can't be read.
        gpxpy.gpx.GPXException: If GPX file is malformed.
    """
    logger.debug(f"Reading GPX file: {filename}")
    with open(filename, "r", encoding="utf-8") as f:
        return samples_from_gpx(f)


def line_to_gpx(line: WalkingLine) -> str:
    """
    Serialize a walking line as a GPX 1.1 document.

    The line becomes one route, and every waypoint is also emitted as a named
    GPX waypoint carrying its distance from the start.

    Args:
        line: WalkingLine to export

    Returns:
        GPX XML text
    """
    gpx = gpxpy.gpx.GPX()
    route = gpxpy.gpx.GPXRoute(
        name="Walking line",
        description=f"Heading {line.heading:.1f}°, {line.spacing:g}m spacing",
    )
    for i, point in enumerate(line):
        name = f"Point {i + 1}"
        description = f"Distance: {i * line.spacing:g} meters"
        route.points.append(
            gpxpy.gpx.GPXRoutePoint(point.latitude, point.longitude, name=name)
        )
        gpx.waypoints.append(
            gpxpy.gpx.GPXWaypoint(
                point.latitude, point.longitude, name=name, description=description
            )
        )
    gpx.routes.append(route)
    return gpx.to_xml(version="1.1")
