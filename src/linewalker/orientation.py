#!/usr/bin/env python3
"""
Conversion of device orientation readings into compass bearings.

Device orientation APIs report an angle that increases counter-clockwise in
the device's own frame. Everything else in linewalker works in compass
bearings (degrees clockwise from north), so raw angles must pass through
``orientation_to_bearing`` before they reach the line builder.
"""

from typing import Optional
import logging
import math

from .errors import OutOfRange
from .geometry import PositionSample
from .geometry_utils import normalize_bearing

logger = logging.getLogger(__name__)

COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def orientation_to_bearing(raw_angle: float) -> float:
    """
    Convert a raw device-frame orientation angle into a compass bearing.

    Args:
        raw_angle: Orientation angle in degrees as reported by the device

    Returns:
        Compass bearing ``(360 - raw_angle) mod 360`` in [0, 360)

    Raises:
        OutOfRange: If raw_angle is not finite
    """
    if not math.isfinite(raw_angle):
        raise OutOfRange(f"Orientation angle must be finite, got {raw_angle}")
    return normalize_bearing(360.0 - raw_angle)


def resolve_heading(
    explicit: Optional[float] = None,
    sample: Optional[PositionSample] = None,
    orientation: Optional[float] = None,
    default: float = 0.0,
) -> float:
    """
    Pick the heading to build a walking line along.

    Sources are tried in order: an explicit compass bearing, the heading the
    location source reported with the sample, the device orientation angle
    (inverted into compass terms), and finally ``default``.

    Args:
        explicit: Compass bearing chosen by the caller
        sample: Position sample whose reported heading may be used
        orientation: Raw device-frame orientation angle
        default: Fallback compass bearing

    Returns:
        Compass bearing in [0, 360)
    """
    if explicit is not None:
        if not math.isfinite(explicit):
            raise OutOfRange(f"Heading must be finite, got {explicit}")
        logger.debug(f"Using explicit heading {explicit:.1f}°")
        return normalize_bearing(explicit)

    if sample is not None and sample.heading is not None:
        logger.debug(f"Using heading reported by location source: {sample.heading:.1f}°")
        return sample.heading

    if orientation is not None:
        bearing = orientation_to_bearing(orientation)
        logger.debug(
            f"Using device orientation {orientation:.1f} -> bearing {bearing:.1f}°"
        )
        return bearing

    logger.debug(f"No heading available, falling back to default {default:.1f}°")
    return normalize_bearing(default)


def compass_direction(heading: float) -> str:
    """Return the 8-point compass label (N, NE, ... NW) for a heading."""
    sector = int(normalize_bearing(heading + 22.5) // 45.0)
    return COMPASS_POINTS[sector % len(COMPASS_POINTS)]


def format_heading(heading: Optional[float]) -> str:
    """Format a heading for display, e.g. ``45° NE``; ``--°`` when unknown."""
    if heading is None:
        return "--°"
    return f"{round(heading) % 360}° {compass_direction(heading)}"
