#!/usr/bin/env python3
"""
Rolling-average smoothing of noisy position samples.
"""

from collections import deque
from typing import Deque
import logging

from .errors import InvalidParameters
from .geometry import GeoPoint, PositionSample
from .geometry_utils import normalize_longitude

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 3


def _longitude_offset(longitude: float, reference: float) -> float:
    """Signed shortest difference in degrees from reference to longitude."""
    offset = longitude - reference
    if offset > 180.0:
        return offset - 360.0
    if offset < -180.0:
        return offset + 360.0
    return offset


class PositionSmoother:
    """
    Averages the most recent position samples to damp GPS jitter.

    Only latitude and longitude are averaged; accuracy, heading and timestamp
    of a smoothed sample are those of the newest raw sample. A small window
    keeps the lag bounded.

    Longitudes are averaged as offsets from the newest sample, so a window
    straddling the antimeridian stays near ±180° instead of jumping to 0°.

    Instances are meant for a single writer: one smoother per tracked session,
    fed in delivery order. Out-of-order or duplicate samples are tolerated but
    bias the average.
    """

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE):
        """Initializes a PositionSmoother.

        Args:
            window_size: Number of recent samples to average over, at least 1.

        Raises:
            InvalidParameters: If window_size is smaller than 1.
        """
        if window_size < 1:
            raise InvalidParameters(
                f"Smoothing window must hold at least 1 sample, got {window_size}"
            )
        self._window: Deque[PositionSample] = deque(maxlen=window_size)

    @property
    def window_size(self) -> int:
        return self._window.maxlen

    def __len__(self) -> int:
        return len(self._window)

    def push(self, sample: PositionSample) -> PositionSample:
        """
        Add a raw sample and return the smoothed estimate.

        The oldest sample is evicted once the window is full.

        Args:
            sample: Newest raw sample from the location source

        Returns:
            Synthetic sample at the mean position of the window
        """
        self._window.append(sample)

        count = len(self._window)
        avg_lat = sum(s.latitude for s in self._window) / count
        reference = sample.longitude
        offsets = [_longitude_offset(s.longitude, reference) for s in self._window]
        avg_lon = normalize_longitude(reference + sum(offsets) / count)

        logger.debug(
            f"Smoothed {count} samples to ({avg_lat:.6f}, {avg_lon:.6f})"
        )
        return PositionSample(
            point=GeoPoint(latitude=avg_lat, longitude=avg_lon),
            accuracy=sample.accuracy,
            heading=sample.heading,
            timestamp=sample.timestamp,
        )

    def reset(self) -> None:
        """Discard all buffered samples."""
        self._window.clear()
