import math

import pytest
from hypothesis import assume, given, strategies as st

from linewalker.geometry import GeoPoint, PositionSample
from linewalker.geometry_utils import destination_point, haversine_distance
from linewalker.line import build_walking_line
from linewalker.progress import StatusTier, project_onto_line, status_tier
from linewalker.smoothing import PositionSmoother

valid_lat = st.floats(-90.0, 90.0)
valid_lon = st.floats(-180.0, 180.0)
valid_position = st.builds(GeoPoint, latitude=valid_lat, longitude=valid_lon)
# Away from the poles, where the planar projection is meant to be used
walkable_position = st.builds(
    GeoPoint, latitude=st.floats(-80.0, 80.0), longitude=st.floats(-179.0, 179.0)
)
local_position = st.builds(
    GeoPoint, latitude=st.floats(-80.0, 80.0), longitude=st.floats(-170.0, 0.0)
)
bearing = st.floats(0.0, 360.0, exclude_max=True)


class TestDistanceProperties:
    @given(valid_position)
    def test_distance_to_self_is_zero(self, pos):
        assert haversine_distance(pos, pos) == 0

    @given(valid_position, valid_position)
    def test_distance_is_symmetric(self, pos1, pos2):
        assert haversine_distance(pos1, pos2) == pytest.approx(
            haversine_distance(pos2, pos1), rel=1e-12, abs=1e-9
        )

    @given(valid_position, valid_position)
    def test_distance_is_bounded_by_half_circumference(self, pos1, pos2):
        distance = haversine_distance(pos1, pos2)
        assert 0 <= distance <= math.pi * 6371000.0 + 1e-6

    @given(valid_position, valid_position, valid_position)
    def test_triangle_inequality(self, pos1, pos2, pos3):
        d12 = haversine_distance(pos1, pos2)
        d23 = haversine_distance(pos2, pos3)
        d13 = haversine_distance(pos1, pos3)
        # asin(sqrt(a)) loses precision near antipodal points
        assert d12 + d23 >= d13 - 1.0


class TestDestinationProperties:
    @given(valid_position, bearing)
    def test_zero_distance_is_identity(self, pos, heading):
        assert destination_point(pos, heading, 0) == pos

    @given(walkable_position, bearing, st.floats(0.1, 1000.0))
    def test_destination_is_at_requested_distance(self, pos, heading, distance):
        dest = destination_point(pos, heading, distance)
        assert -180.0 <= dest.longitude < 180.0
        assert haversine_distance(pos, dest) == pytest.approx(distance, rel=1e-6)


class TestProjectionProperties:
    @given(walkable_position, bearing, valid_position)
    def test_progress_is_clamped(self, start, heading, position):
        line = build_walking_line(start, heading)
        # Keep the user in the same hemisphere of longitudes as the line
        assume(abs(position.longitude - start.longitude) < 90.0)
        projection = project_onto_line(line, position)
        assert 0.0 <= projection.progress <= 1.0
        assert projection.lateral_distance >= 0.0

    @given(walkable_position, bearing, st.floats(0.0, 40.0))
    def test_points_on_line_have_matching_progress(self, start, heading, along):
        line = build_walking_line(start, heading)
        position = destination_point(start, heading, along)
        projection = project_onto_line(line, position)
        assert projection.progress == pytest.approx(along / 40.0, abs=0.01)
        assert projection.lateral_distance < 0.5

    @given(walkable_position, bearing, st.floats(0.5, 100.0))
    def test_beyond_end_is_complete(self, start, heading, extra):
        line = build_walking_line(start, heading)
        projection = project_onto_line(line, destination_point(start, heading, 40.0 + extra))
        assert projection.progress == 1.0
        assert projection.status == StatusTier.COMPLETE


class TestTierProperties:
    @given(st.floats(allow_nan=False))
    def test_every_progress_maps_to_one_tier(self, progress):
        assert isinstance(status_tier(progress), StatusTier)

    @given(st.floats(0.0, 1.0), st.floats(0.0, 1.0))
    def test_tiers_are_monotonic(self, p1, p2):
        order = list(StatusTier)
        low, high = sorted((p1, p2))
        assert order.index(status_tier(low)) <= order.index(status_tier(high))


class TestSmootherProperties:
    # Within one hemisphere of longitude the wrapped mean is the plain mean
    @given(st.lists(local_position, min_size=1, max_size=20), st.integers(1, 5))
    def test_smoothed_position_is_mean_of_window(self, points, window):
        smoother = PositionSmoother(window)
        for i, point in enumerate(points):
            smoothed = smoother.push(PositionSample(point=point, timestamp=float(i)))
        recent = points[-window:]
        assert smoothed.latitude == pytest.approx(
            sum(p.latitude for p in recent) / len(recent)
        )
        assert smoothed.longitude == pytest.approx(
            sum(p.longitude for p in recent) / len(recent), abs=1e-9
        )
        assert smoothed.timestamp == float(len(points) - 1)
        assert len(smoother) == min(window, len(points))
