import gc
import weakref

import pytest

from linewalker.config import LineWalkerConfig
from linewalker.errors import InvalidParameters
from linewalker.geometry import GeoPoint, PositionSample
from linewalker.geometry_utils import destination_point, haversine_distance
from linewalker.metrics import collect_metrics
from linewalker.progress import StatusTier
from linewalker.session import AccuracyQuality, WalkingSession, assess_accuracy

START = GeoPoint(latitude=37.7749, longitude=-122.4194)


def _sample(point, timestamp=0.0, accuracy=5.0, heading=None):
    return PositionSample(
        point=point, accuracy=accuracy, heading=heading, timestamp=timestamp
    )


def _north(distance, bearing=0.0, offset=0.0):
    point = destination_point(START, bearing, distance)
    if offset:
        point = destination_point(point, 90.0 if offset > 0 else 270.0, abs(offset))
    return point


@pytest.mark.parametrize(
    "accuracy, expected",
    [
        (None, AccuracyQuality.UNKNOWN),
        (0.0, AccuracyQuality.GOOD),
        (50.0, AccuracyQuality.GOOD),
        (50.1, AccuracyQuality.FAIR),
        (100.0, AccuracyQuality.FAIR),
        (150.0, AccuracyQuality.POOR),
    ],
)
def test_assess_accuracy(accuracy, expected):
    assert assess_accuracy(accuracy) == expected


def test_end_to_end_walk_north():
    """Start in San Francisco, heading north, and walk to just past halfway."""
    session = WalkingSession()
    line = session.start(_sample(START), heading=0.0)

    assert session.is_active
    assert len(line) == 5
    for i, waypoint in enumerate(line):
        assert haversine_distance(START, waypoint) == pytest.approx(i * 10.0, abs=0.5)
        assert waypoint.latitude >= START.latitude

    # Noisy samples around 20.5 m north of the start
    update = None
    for t, (distance, offset) in enumerate([(20.3, 0.4), (20.7, -0.5), (20.5, 0.1)]):
        update = session.update(_sample(_north(distance, offset=offset), timestamp=t))

    assert update.projection.progress == pytest.approx(0.5, abs=0.03)
    assert update.projection.lateral_distance < 1.0
    assert update.status == StatusTier.HALFWAY


def test_walk_to_completion_and_metrics():
    session = WalkingSession(LineWalkerConfig(smoothing_window=1))
    session.start(_sample(START), heading=90.0)

    statuses = []
    for t, distance in enumerate([0.0, 10.0, 22.0, 34.0, 45.0]):
        statuses.append(session.update(_sample(_north(distance, bearing=90.0), timestamp=t)).status)

    assert statuses == [
        StatusTier.IN_PROGRESS,
        StatusTier.IN_PROGRESS,
        StatusTier.HALFWAY,
        StatusTier.NEAR,
        StatusTier.COMPLETE,
    ]

    metrics = session.metrics()
    assert metrics.samples_total == 5
    assert metrics.samples_tracked == 5
    assert metrics.final_progress == 1.0
    assert metrics.max_progress == 1.0
    assert metrics.completed
    assert metrics.tier_counts == {
        "in_progress": 2,
        "halfway": 1,
        "near": 1,
        "complete": 1,
    }
    assert metrics.max_lateral_distance < 6.0


def test_update_before_start_smooths_without_projection():
    session = WalkingSession()
    update = session.update(_sample(START))

    assert update.projection is None
    assert update.status is None
    assert update.smoothed.point == START
    assert not session.is_active
    assert session.metrics().samples_tracked == 0


def test_heading_fallbacks():
    session = WalkingSession()

    line = session.start(_sample(START, heading=90.0))
    assert line.heading == 90.0

    line = session.start(_sample(START), orientation=90.0)
    assert line.heading == 270.0

    line = session.start(_sample(START))
    assert line.heading == 0.0


def test_configured_default_heading():
    session = WalkingSession(LineWalkerConfig(default_heading=180.0))
    assert session.start(_sample(START)).heading == 180.0


def test_start_clears_previous_smoothing_window():
    session = WalkingSession()
    far_away = destination_point(START, 0.0, 500.0)
    session.update(_sample(far_away))
    session.update(_sample(far_away))

    session.start(_sample(START), heading=0.0)
    update = session.update(_sample(START))

    assert update.smoothed.point == START
    assert update.projection.progress == 0.0


def test_reset_discards_line_and_history():
    session = WalkingSession()
    session.start(_sample(START), heading=0.0)
    session.update(_sample(_north(10.0)))

    session.reset()

    assert session.line is None
    assert not session.is_active
    assert session.metrics().samples_total == 0
    assert len(session.smoother) == 0


def test_restart_replaces_line():
    session = WalkingSession()
    first = session.start(_sample(START), heading=0.0)
    session.update(_sample(_north(10.0)))
    second = session.start(_sample(_north(10.0)), heading=90.0)

    assert second is session.line
    assert second != first
    assert session.metrics().samples_total == 0


def test_poor_accuracy_warns_but_builds_line(caplog):
    session = WalkingSession()
    with caplog.at_level("WARNING", logger="linewalker.session"):
        line = session.start(_sample(START, accuracy=250.0), heading=0.0)

    assert line is not None
    assert "Poor GPS signal" in caplog.text


def test_invalid_configuration_raises_on_start():
    session = WalkingSession(LineWalkerConfig(point_count=1))
    with pytest.raises(InvalidParameters):
        session.start(_sample(START))


def test_session_does_not_retain_raw_samples():
    session = WalkingSession()
    session.start(_sample(START), heading=0.0)

    alive = []
    for t in range(1000):
        sample = _sample(_north(t % 40), timestamp=t)
        alive.append(weakref.ref(sample))
        session.update(sample)
        del sample
    gc.collect()

    retained = [ref for ref in alive if ref() is not None]
    assert len(retained) <= session.smoother.window_size
    assert session.metrics().samples_total == 1000
    assert session.metrics().samples_tracked == 1000


def test_metrics_from_running_totals_match_collected_updates():
    session = WalkingSession(LineWalkerConfig(smoothing_window=1))
    session.update(_sample(START))
    session.start(_sample(START), heading=0.0)

    updates = []
    for t, (distance, offset) in enumerate([(5.0, 1.0), (25.0, -2.0), (12.0, 0.5)]):
        updates.append(
            session.update(_sample(_north(distance, offset=offset), timestamp=t))
        )

    metrics = session.metrics()
    collected = collect_metrics(updates)

    assert metrics.samples_total == 4
    assert metrics.samples_tracked == 3
    assert metrics.final_progress == pytest.approx(0.3, abs=0.01)
    assert metrics.max_progress == pytest.approx(25.0 / 40.0, abs=0.01)
    assert metrics.max_lateral_distance == pytest.approx(2.0, abs=0.05)
    assert metrics.mean_lateral_distance == pytest.approx(3.5 / 3, abs=0.05)
    assert collected.samples_tracked == metrics.samples_tracked
    assert collected.tier_counts == metrics.tier_counts
    assert collected.max_progress == metrics.max_progress
