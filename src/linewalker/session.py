#!/usr/bin/env python3
"""
Walking session lifecycle: start a line, feed samples, reset.

A session owns one smoother and at most one walking line. Callers deliver
position samples as they arrive and receive a SessionUpdate for each one.
"""

from enum import Enum
from typing import NamedTuple, Optional
import logging

from .config import LineWalkerConfig
from .geometry import PositionSample
from .line import WalkingLine, build_walking_line
from .metrics import MetricsAccumulator, SessionMetrics
from .orientation import format_heading, resolve_heading
from .progress import Projection, StatusTier, project_onto_line
from .smoothing import PositionSmoother

logger = logging.getLogger(__name__)


class AccuracyQuality(Enum):
    """How usable a reported accuracy radius is for starting a line."""

    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


def assess_accuracy(
    accuracy: Optional[float], required: float = 50.0, acceptable: float = 100.0
) -> AccuracyQuality:
    """
    Classify a horizontal accuracy radius.

    Args:
        accuracy: Accuracy radius in meters, None when unknown
        required: Largest radius considered good
        acceptable: Largest radius still considered usable

    Returns:
        AccuracyQuality for the radius
    """
    if accuracy is None:
        return AccuracyQuality.UNKNOWN
    if accuracy <= required:
        return AccuracyQuality.GOOD
    if accuracy <= acceptable:
        return AccuracyQuality.FAIR
    return AccuracyQuality.POOR


class SessionUpdate(NamedTuple):
    """Everything the presentation layer needs after one sample."""

    raw: PositionSample
    smoothed: PositionSample
    projection: Optional[Projection]
    status: Optional[StatusTier]


class WalkingSession:
    """Tracks one user walking one line."""

    def __init__(self, config: Optional[LineWalkerConfig] = None):
        self.config = config or LineWalkerConfig()
        self.smoother = PositionSmoother(self.config.smoothing_window)
        self._line: Optional[WalkingLine] = None
        self._totals = MetricsAccumulator()

    @property
    def line(self) -> Optional[WalkingLine]:
        return self._line

    @property
    def is_active(self) -> bool:
        return self._line is not None

    def start(
        self,
        sample: PositionSample,
        heading: Optional[float] = None,
        orientation: Optional[float] = None,
    ) -> WalkingLine:
        """
        Start a new line at the sample's position.

        Any previous line and smoothing window are discarded first.

        Args:
            sample: Starting position
            heading: Explicit compass bearing for the line
            orientation: Raw device orientation angle, used when neither
                ``heading`` nor the sample's own heading is available

        Returns:
            The newly built WalkingLine

        Raises:
            InvalidParameters: If the configured point count or spacing is unusable
        """
        if self._line is not None:
            logger.info("Replacing active walking line")
            self.reset()

        quality = assess_accuracy(
            sample.accuracy,
            self.config.required_accuracy,
            self.config.acceptable_accuracy,
        )
        if quality == AccuracyQuality.POOR:
            logger.warning(
                f"Poor GPS signal (±{sample.accuracy:.0f}m) - building line anyway"
            )
        else:
            logger.debug(f"Start position accuracy is {quality}")

        resolved = resolve_heading(
            explicit=heading,
            sample=sample,
            orientation=orientation,
            default=self.config.default_heading,
        )

        self.smoother.reset()
        self._line = build_walking_line(
            sample.point,
            resolved,
            point_count=self.config.point_count,
            spacing=self.config.spacing,
        )
        logger.info(
            f"Ready to walk: {self._line.length:.0f}m line heading "
            f"{format_heading(resolved)} from {sample.point}"
        )
        return self._line

    def update(self, sample: PositionSample) -> SessionUpdate:
        """
        Feed a new raw sample into the session.

        Samples are smoothed even before a line exists; projection and status
        are only filled in once a line has been started.

        Args:
            sample: Newest raw sample from the location source

        Returns:
            SessionUpdate for the sample
        """
        smoothed = self.smoother.push(sample)

        projection = None
        status = None
        if self._line is not None:
            projection = project_onto_line(self._line, smoothed.point)
            status = projection.status

        self._totals.record(projection)
        return SessionUpdate(
            raw=sample, smoothed=smoothed, projection=projection, status=status
        )

    def reset(self) -> None:
        """Discard the current line, smoothing window and session totals."""
        self._line = None
        self.smoother.reset()
        self._totals = MetricsAccumulator()
        logger.info("Walking session reset")

    def metrics(self) -> SessionMetrics:
        return self._totals.to_metrics()
