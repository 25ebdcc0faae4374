"""Per-carrier signal statistics at a location.

Readings are grouped by carrier name, upper-cased, so "Vodafone" and
"VODAFONE" count together. Each group reports its mean dBm (rounded half-up)
and the quality band of the unrounded mean.
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from signalwatch.core.logging import get_logger
from signalwatch.models import SignalQuality

if TYPE_CHECKING:
    from signalwatch.repositories import ConnectivitySampleRepository
    from signalwatch.services.geo_matcher import GeoMatcher
    from signalwatch.services.signal_classifier import SignalClassifier

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CarrierSignal:
    carrier: str
    avg_dbm: int
    quality: SignalQuality
    count: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity (-90.5 -> -90)."""
    return math.floor(value + 0.5)


def filter_carrier_signals(
    signals: Iterable[CarrierSignal],
    carrier: str | None = None,
    min_count: int | None = None,
) -> list[CarrierSignal]:
    """Keep signals matching a carrier name (case-insensitive) and a minimum count."""
    result = list(signals)
    if carrier:
        wanted = carrier.upper()
        result = [s for s in result if s.carrier == wanted]
    if min_count is not None:
        result = [s for s in result if s.count >= min_count]
    return result


class CarrierSignalAggregator:
    """Aggregates historical cellular readings around a point by carrier."""

    def __init__(
        self,
        geo_matcher: GeoMatcher,
        samples: ConnectivitySampleRepository,
        classifier: SignalClassifier,
    ) -> None:
        self.geo_matcher = geo_matcher
        self.samples = samples
        self.classifier = classifier

    async def aggregate_by_carrier(
        self,
        latitude: float,
        longitude: float,
        max_distance_m: float | None = None,
    ) -> list[CarrierSignal]:
        """Return per-carrier statistics for the stored location nearest the point.

        Never creates a location: an empty list is returned when no stored
        location lies within ``max_distance_m``.
        """
        location = await self.geo_matcher.find_nearby_location(latitude, longitude, max_distance_m)
        if location is None:
            return []

        readings = await self.samples.get_cellular_readings_at_location(location.id)

        groups: dict[str, list[int]] = defaultdict(list)
        for reading in readings:
            if reading.carrier is None or reading.signal_dbm is None:
                continue
            groups[reading.carrier.upper()].append(reading.signal_dbm)

        signals = []
        for carrier, values in groups.items():
            mean = sum(values) / len(values)
            signals.append(
                CarrierSignal(
                    carrier=carrier,
                    avg_dbm=round_half_up(mean),
                    quality=self.classifier.classify(mean),
                    count=len(values),
                )
            )

        logger.debug(
            f"Aggregated {len(readings)} readings into {len(signals)} carriers at location {location.id}"
        )
        return signals
