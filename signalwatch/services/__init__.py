"""Business logic services."""

from signalwatch.services.alert_dispatcher import AlertDispatcher, DispatchOutcome
from signalwatch.services.carrier_signal import (
    CarrierSignal,
    CarrierSignalAggregator,
    filter_carrier_signals,
)
from signalwatch.services.connectivity_service import ConnectivityPingService, PingResult
from signalwatch.services.geo_matcher import GeoMatcher, haversine_distance
from signalwatch.services.notification import (
    NotificationChannel,
    NotificationDelivery,
    NotificationService,
)
from signalwatch.services.place_lookup import PlaceLookupService, PlaceResult
from signalwatch.services.places_client import PlacesClient
from signalwatch.services.signal_classifier import SignalClassifier, SignalThresholds

__all__ = [
    "AlertDispatcher",
    "CarrierSignal",
    "CarrierSignalAggregator",
    "ConnectivityPingService",
    "DispatchOutcome",
    "GeoMatcher",
    "NotificationChannel",
    "NotificationDelivery",
    "NotificationService",
    "PingResult",
    "PlaceLookupService",
    "PlaceResult",
    "PlacesClient",
    "SignalClassifier",
    "SignalThresholds",
    "filter_carrier_signals",
    "haversine_distance",
]
