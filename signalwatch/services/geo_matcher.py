"""Fuzzy location matching.

Reported coordinates are noisy, so every report would otherwise create a new
Location row. GeoMatcher treats two points as the same place when their
great-circle distance is within a radius:

1. A cheap bounding-box range query narrows the candidates.
2. The haversine distance refines them; the first candidate within the
   radius wins.
3. ``find_or_create_location`` creates a Location when nothing matches.

Find-or-create is a read followed by a conditional write. Two concurrent
requests for the same point can both miss and both insert; sequential calls
never produce two locations within the radius of each other.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from signalwatch.core.logging import get_logger
from signalwatch.models import Location

if TYPE_CHECKING:
    from signalwatch.core.config import Settings
    from signalwatch.repositories import LocationRepository

logger = get_logger(__name__)

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_MATCH_RADIUS_METERS = 15.0
DEFAULT_BBOX_DELTA_DEGREES = 0.0002


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two points given in decimal degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


@dataclass(frozen=True, slots=True)
class BoundingBox:
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    @classmethod
    def around(cls, latitude: float, longitude: float, lat_delta: float, lon_delta: float) -> BoundingBox:
        return cls(
            min_latitude=latitude - lat_delta,
            max_latitude=latitude + lat_delta,
            min_longitude=longitude - lon_delta,
            max_longitude=longitude + lon_delta,
        )


class GeoMatcher:
    """Deduplicates coordinates against stored locations.

    Attributes:
        match_radius_m: Default maximum distance for a match, in meters.
        bbox_delta_deg: Half-width of the candidate box, in degrees.
    """

    def __init__(
        self,
        locations: LocationRepository,
        *,
        match_radius_m: float = DEFAULT_MATCH_RADIUS_METERS,
        bbox_delta_deg: float = DEFAULT_BBOX_DELTA_DEGREES,
    ) -> None:
        self.locations = locations
        self.match_radius_m = match_radius_m
        self.bbox_delta_deg = bbox_delta_deg

    @classmethod
    def from_settings(cls, locations: LocationRepository, settings: Settings) -> GeoMatcher:
        return cls(
            locations,
            match_radius_m=settings.location_match_radius_meters,
            bbox_delta_deg=settings.location_bbox_delta_degrees,
        )

    def bounding_box(self, latitude: float, longitude: float) -> BoundingBox:
        """Candidate box around a point, a fixed angular delta on each side.

        The box does not grow with the radius. A radius wider than the box
        only relaxes the haversine check on the candidates inside it.
        """
        return BoundingBox.around(latitude, longitude, self.bbox_delta_deg, self.bbox_delta_deg)

    async def find_nearby_location(
        self,
        latitude: float,
        longitude: float,
        max_distance_m: float | None = None,
    ) -> Location | None:
        """Return the first stored location within the radius, or None."""
        radius = self.match_radius_m if max_distance_m is None else max_distance_m
        box = self.bounding_box(latitude, longitude)

        candidates = await self.locations.find_in_bounding_box(
            box.min_latitude, box.max_latitude, box.min_longitude, box.max_longitude
        )
        for candidate in candidates:
            distance = haversine_distance(latitude, longitude, candidate.latitude, candidate.longitude)
            if distance <= radius:
                logger.debug(
                    f"Matched location {candidate.id} at {distance:.1f}m "
                    f"(radius {radius}m, {len(candidates)} candidates)"
                )
                return candidate
        return None

    async def find_or_create_location(
        self,
        latitude: float,
        longitude: float,
        accuracy: float | None = None,
        *,
        max_distance_m: float | None = None,
        label: str | None = None,
    ) -> Location:
        """Return a stored location within the radius, creating one if none exists."""
        location = await self.find_nearby_location(latitude, longitude, max_distance_m)
        if location is not None:
            return location

        location = await self.locations.create(
            Location(latitude=latitude, longitude=longitude, accuracy=accuracy, label=label)
        )
        logger.info(f"Created location {location.id} at ({latitude}, {longitude})")
        return location
