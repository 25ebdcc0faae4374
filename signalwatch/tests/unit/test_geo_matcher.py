"""Unit tests for haversine distance and fuzzy location matching."""

from datetime import UTC, datetime, timedelta

import pytest

from signalwatch.models import Location
from signalwatch.repositories import LocationRepository
from signalwatch.services.geo_matcher import GeoMatcher, haversine_distance
from signalwatch.tests.factories import LocationFactory

POINT_A = (30.04440, 31.23570)
POINT_B = (30.04441, 31.23571)
POINT_C = (30.05000, 31.24000)


@pytest.fixture
def matcher(session) -> GeoMatcher:
    return GeoMatcher(LocationRepository(session))


async def _location_count(session) -> int:
    return await LocationRepository(session).count()


# =============================================================================
# haversine_distance
# =============================================================================


class TestHaversineDistance:
    def test_same_point_is_zero(self):
        assert haversine_distance(*POINT_A, *POINT_A) == 0.0

    def test_nearby_points(self):
        assert haversine_distance(*POINT_A, *POINT_B) == pytest.approx(1.47, abs=0.05)

    def test_far_points(self):
        assert haversine_distance(*POINT_A, *POINT_C) > 500

    def test_one_degree_of_latitude(self):
        assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_195, rel=1e-3)

    def test_symmetric(self):
        assert haversine_distance(*POINT_A, *POINT_C) == pytest.approx(
            haversine_distance(*POINT_C, *POINT_A)
        )


# =============================================================================
# GeoMatcher
# =============================================================================


class TestBoundingBox:
    def test_uses_configured_delta(self, matcher):
        box = matcher.bounding_box(30.0, 31.0)
        assert box.min_latitude == pytest.approx(29.9998)
        assert box.max_latitude == pytest.approx(30.0002)
        assert box.min_longitude == pytest.approx(30.9998)
        assert box.max_longitude == pytest.approx(31.0002)

    def test_custom_delta(self, session):
        matcher = GeoMatcher(LocationRepository(session), bbox_delta_deg=0.001)
        box = matcher.bounding_box(30.0, 31.0)
        assert box.max_latitude == pytest.approx(30.001)
        assert box.min_longitude == pytest.approx(30.999)


class TestFindOrCreateLocation:
    async def test_creates_location_when_none_exists(self, session, matcher):
        location = await matcher.find_or_create_location(*POINT_A, accuracy=12.5)

        assert location.id is not None
        assert location.latitude == POINT_A[0]
        assert location.longitude == POINT_A[1]
        assert location.accuracy == 12.5
        assert await _location_count(session) == 1

    async def test_nearby_point_reuses_location(self, session, matcher):
        first = await matcher.find_or_create_location(*POINT_A)
        second = await matcher.find_or_create_location(*POINT_B)

        assert second.id == first.id
        assert await _location_count(session) == 1

    async def test_far_point_creates_new_location(self, session, matcher):
        first = await matcher.find_or_create_location(*POINT_A)
        other = await matcher.find_or_create_location(*POINT_C)

        assert other.id != first.id
        assert await _location_count(session) == 2

    async def test_coordinates_are_not_rounded(self, matcher):
        location = await matcher.find_or_create_location(30.123456789, 31.987654321)
        assert location.latitude == 30.123456789
        assert location.longitude == 31.987654321

    async def test_inside_box_but_outside_radius_creates_new(self, session, matcher):
        # ~19m north: inside the 0.0002 degree box, outside the 15m radius
        first = await matcher.find_or_create_location(30.0, 31.0)
        second = await matcher.find_or_create_location(30.00017, 31.0)

        assert second.id != first.id
        assert await _location_count(session) == 2

    async def test_radius_override_per_call(self, session, matcher):
        first = await matcher.find_or_create_location(30.0, 31.0)
        second = await matcher.find_or_create_location(30.00017, 31.0, max_distance_m=20)

        assert second.id == first.id

    async def test_configured_default_radius(self, session):
        matcher = GeoMatcher(LocationRepository(session), match_radius_m=20.0)
        first = await matcher.find_or_create_location(30.0, 31.0)
        second = await matcher.find_or_create_location(30.00017, 31.0)

        assert second.id == first.id


class TestFindNearbyLocation:
    async def test_returns_none_when_empty(self, matcher):
        assert await matcher.find_nearby_location(*POINT_A) is None

    async def test_never_creates(self, session, matcher):
        await matcher.find_nearby_location(*POINT_A)
        assert await _location_count(session) == 0

    async def test_first_candidate_in_creation_order_wins(self, session, persist, matcher):
        base = datetime(2026, 1, 1, tzinfo=UTC)
        older = LocationFactory(latitude=30.00005, longitude=31.0, created_at=base)
        newer = LocationFactory(latitude=30.0, longitude=31.0, created_at=base + timedelta(hours=1))
        await persist(newer, older)

        match = await matcher.find_nearby_location(30.0, 31.0)

        assert isinstance(match, Location)
        assert match.id == older.id

    async def test_from_settings(self, session, settings):
        matcher = GeoMatcher.from_settings(LocationRepository(session), settings)
        assert matcher.match_radius_m == 15.0
        assert matcher.bbox_delta_deg == 0.0002

    async def test_large_radius_ignores_older_location_outside_box(self, session, persist, matcher):
        base = datetime(2026, 1, 1, tzinfo=UTC)
        # ~1.5km north, created first
        far = LocationFactory(latitude=30.0579, longitude=31.2357, created_at=base)
        # ~4m away, created later
        near = LocationFactory(
            latitude=30.04443, longitude=31.2357, created_at=base + timedelta(hours=1)
        )
        await persist(far, near)

        match = await matcher.find_nearby_location(30.0444, 31.2357, 2000)

        assert match is not None
        assert match.id == near.id
