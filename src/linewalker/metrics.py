"""
Module for collecting and logging metrics about a walking session.
"""

import collections
import logging
from typing import TYPE_CHECKING, Dict, Iterable, NamedTuple, Optional

from .progress import Projection, StatusTier

if TYPE_CHECKING:
    from .session import SessionUpdate

logger = logging.getLogger(__name__)


class SessionMetrics(NamedTuple):
    """Container for walking session metrics."""

    samples_total: int
    samples_tracked: int
    final_progress: float
    max_progress: float
    max_lateral_distance: float
    mean_lateral_distance: float
    tier_counts: Dict[str, int]

    @property
    def completed(self) -> bool:
        return self.max_progress >= 1.0


class MetricsAccumulator:
    """
    Running totals for a walking session.

    Only counters and extrema are kept, so memory stays constant no matter
    how many samples a session receives.
    """

    def __init__(self):
        self.samples_total = 0
        self.samples_tracked = 0
        self.final_progress = 0.0
        self.max_progress = 0.0
        self.max_lateral_distance = 0.0
        self.lateral_distance_sum = 0.0
        self.tier_counts: Dict[str, int] = collections.defaultdict(int)

    def record(self, projection: Optional[Projection]) -> None:
        """
        Add one sample to the totals.

        Samples delivered before a line existed have no projection; they count
        towards the total but not towards any progress figure.
        """
        self.samples_total += 1
        if projection is None:
            return

        self.samples_tracked += 1
        self.final_progress = projection.progress
        self.max_progress = max(self.max_progress, projection.progress)
        self.max_lateral_distance = max(
            self.max_lateral_distance, projection.lateral_distance
        )
        self.lateral_distance_sum += projection.lateral_distance
        self.tier_counts[projection.status.value] += 1

    def to_metrics(self) -> SessionMetrics:
        tracked = self.samples_tracked
        return SessionMetrics(
            samples_total=self.samples_total,
            samples_tracked=tracked,
            final_progress=self.final_progress,
            max_progress=self.max_progress,
            max_lateral_distance=self.max_lateral_distance,
            mean_lateral_distance=(
                self.lateral_distance_sum / tracked if tracked else 0.0
            ),
            tier_counts=dict(self.tier_counts),
        )


def collect_metrics(updates: Iterable["SessionUpdate"]) -> SessionMetrics:
    """
    Collect metrics from a stream of session updates.

    The updates are consumed one at a time and not retained.

    Args:
        updates: Session updates in delivery order

    Returns:
        SessionMetrics summarizing the updates
    """
    totals = MetricsAccumulator()
    for update in updates:
        totals.record(update.projection)
    return totals.to_metrics()


def log_metrics(metrics: SessionMetrics, enabled: bool) -> None:
    """
    Log structured session metrics.

    Args:
        metrics: SessionMetrics to log
        enabled: Whether metrics output was requested
    """
    if not enabled:
        return

    logger.debug("=== LINEWALKER_METRICS ===")
    logger.debug(f"samples_total={metrics.samples_total}")
    logger.debug(f"samples_tracked={metrics.samples_tracked}")
    logger.debug(f"final_progress={metrics.final_progress:.4f}")
    logger.debug(f"max_progress={metrics.max_progress:.4f}")
    logger.debug(f"max_lateral_distance={metrics.max_lateral_distance:.2f}")
    logger.debug(f"mean_lateral_distance={metrics.mean_lateral_distance:.2f}")
    for tier in StatusTier:
        logger.debug(f"tier[{tier.value}]={metrics.tier_counts.get(tier.value, 0)}")
    logger.debug(f"completed={metrics.completed}")
    logger.debug("=== END_LINEWALKER_METRICS ===")
