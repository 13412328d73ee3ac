#!/usr/bin/env python3
"""
linewalker - Track progress along a short walking line from noisy GPS samples.

This package builds a straight line of waypoints from a start point and a
compass heading, smooths incoming position samples, and projects them onto
the line to report progress, lateral distance and a status tier.
"""
import importlib.metadata

__version__ = importlib.metadata.version("linewalker")

# Import main classes for public API
from .errors import DegenerateLine, InvalidParameters, LineWalkerError, OutOfRange
from .geometry import GeoPoint, PositionSample
from .geometry_utils import destination_point, haversine_distance
from .line import WalkingLine, build_walking_line
from .progress import Projection, StatusTier, project_onto_line, status_tier
from .session import SessionUpdate, WalkingSession
from .smoothing import PositionSmoother

__all__ = [
    "DegenerateLine",
    "InvalidParameters",
    "LineWalkerError",
    "OutOfRange",
    "GeoPoint",
    "PositionSample",
    "destination_point",
    "haversine_distance",
    "WalkingLine",
    "build_walking_line",
    "Projection",
    "StatusTier",
    "project_onto_line",
    "status_tier",
    "SessionUpdate",
    "WalkingSession",
    "PositionSmoother",
]
