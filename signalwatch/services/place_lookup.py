"""Place lookup enriched with historical carrier signal statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from signalwatch.core.exceptions import MissingFieldError, PlaceNotFoundError
from signalwatch.core.logging import get_logger
from signalwatch.services.carrier_signal import CarrierSignal, filter_carrier_signals

if TYPE_CHECKING:
    from signalwatch.services.carrier_signal import CarrierSignalAggregator
    from signalwatch.services.places_client import PlacesClient

logger = get_logger(__name__)

DEFAULT_PLACE_SIGNAL_RADIUS_METERS = 2000.0


@dataclass
class PlaceCoordinates:
    lat: float
    lng: float


@dataclass
class PlaceResult:
    name: str | None
    address: str | None
    location: PlaceCoordinates | None
    place_id: str | None
    rating: float | None
    total_ratings: int | None
    is_open: bool | None
    types: list[str] = field(default_factory=list)
    signal_by_carrier: list[CarrierSignal] = field(default_factory=list)


def normalize_candidate(candidate: dict[str, Any]) -> PlaceResult:
    """Flatten a raw provider candidate into a PlaceResult without signal data."""
    coords = (candidate.get("geometry") or {}).get("location") or {}
    lat, lng = coords.get("lat"), coords.get("lng")
    location = PlaceCoordinates(lat=lat, lng=lng) if lat is not None and lng is not None else None

    return PlaceResult(
        name=candidate.get("name"),
        address=candidate.get("formatted_address"),
        location=location,
        place_id=candidate.get("place_id"),
        rating=candidate.get("rating"),
        total_ratings=candidate.get("user_ratings_total"),
        is_open=(candidate.get("opening_hours") or {}).get("open_now"),
        types=list(candidate.get("types") or []),
    )


class PlaceLookupService:
    def __init__(
        self,
        places: PlacesClient,
        aggregator: CarrierSignalAggregator,
        *,
        signal_radius_m: float = DEFAULT_PLACE_SIGNAL_RADIUS_METERS,
    ) -> None:
        self.places = places
        self.aggregator = aggregator
        self.signal_radius_m = signal_radius_m

    async def find_place(
        self,
        input_text: str | None,
        carrier: str | None = None,
        min_signal_count: int | None = None,
    ) -> list[PlaceResult]:
        """Find places by free text and attach per-carrier signal statistics.

        Carrier and minimum-count filters apply to each place's signal list,
        not to the places themselves.

        Raises:
            MissingFieldError: ``input_text`` is empty.
            PlaceNotFoundError: The provider returned no candidates.
            PlaceLookupError: The provider call failed.
        """
        if not input_text or not input_text.strip():
            raise MissingFieldError("input")

        candidates = await self.places.find_candidates(input_text.strip())
        if not candidates:
            raise PlaceNotFoundError()

        results = []
        for candidate in candidates:
            place = normalize_candidate(candidate)
            if place.location is not None:
                signals = await self.aggregator.aggregate_by_carrier(
                    place.location.lat, place.location.lng, self.signal_radius_m
                )
                place.signal_by_carrier = filter_carrier_signals(signals, carrier, min_signal_count)
            results.append(place)

        logger.info(f"Place lookup returned {len(results)} places")
        return results
