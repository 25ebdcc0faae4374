"""FastAPI dependencies: caller identity and service construction.

Services are built per request around the request's database session, so
every repository used while handling one request shares one transaction.
Tests replace any of these through ``app.dependency_overrides``.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from signalwatch.core.config import Settings, get_settings
from signalwatch.core.database import get_db
from signalwatch.core.exceptions import AuthenticationError
from signalwatch.core.identity import Identity
from signalwatch.models.enums import UserRole
from signalwatch.repositories import ConnectivitySampleRepository, LocationRepository
from signalwatch.services.alert_dispatcher import AlertDispatcher
from signalwatch.services.carrier_signal import CarrierSignalAggregator
from signalwatch.services.connectivity_service import ConnectivityPingService
from signalwatch.services.geo_matcher import GeoMatcher
from signalwatch.services.notification import NotificationService, get_notification_service
from signalwatch.services.place_lookup import PlaceLookupService
from signalwatch.services.places_client import PlacesClient, get_places_client
from signalwatch.services.signal_classifier import SignalClassifier, SignalThresholds


async def get_identity(
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_user_role: str | None = Header(None, alias="X-User-Role"),
) -> Identity:
    """Read the caller identity forwarded by the authenticating gateway.

    Raises:
        AuthenticationError: The user id header is missing or the role is unknown.
    """
    if not x_user_id:
        raise AuthenticationError()
    if not x_user_role:
        return Identity(user_id=x_user_id)
    try:
        role = UserRole(x_user_role.strip().upper())
    except ValueError as e:
        raise AuthenticationError("Unknown user role", details={"role": x_user_role[:32]}) from e
    return Identity(user_id=x_user_id, role=role)


def get_notification_service_dep(
    settings: Settings = Depends(get_settings),
) -> NotificationService:
    return get_notification_service(settings)


def get_places_client_dep(settings: Settings = Depends(get_settings)) -> PlacesClient:
    return get_places_client(settings)


def get_signal_classifier(settings: Settings = Depends(get_settings)) -> SignalClassifier:
    return SignalClassifier(SignalThresholds.from_settings(settings))


def get_geo_matcher(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> GeoMatcher:
    return GeoMatcher.from_settings(LocationRepository(db), settings)


def get_alert_dispatcher(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service_dep),
) -> AlertDispatcher:
    return AlertDispatcher(db, notifier)


def get_ping_service(
    db: AsyncSession = Depends(get_db),
    geo_matcher: GeoMatcher = Depends(get_geo_matcher),
    classifier: SignalClassifier = Depends(get_signal_classifier),
    dispatcher: AlertDispatcher = Depends(get_alert_dispatcher),
    settings: Settings = Depends(get_settings),
) -> ConnectivityPingService:
    return ConnectivityPingService(
        db,
        geo_matcher,
        classifier,
        dispatcher,
        quiescence=timedelta(seconds=settings.ping_quiescence_seconds),
    )


def get_carrier_aggregator(
    db: AsyncSession = Depends(get_db),
    geo_matcher: GeoMatcher = Depends(get_geo_matcher),
    classifier: SignalClassifier = Depends(get_signal_classifier),
) -> CarrierSignalAggregator:
    return CarrierSignalAggregator(geo_matcher, ConnectivitySampleRepository(db), classifier)


def get_place_lookup_service(
    places: PlacesClient = Depends(get_places_client_dep),
    aggregator: CarrierSignalAggregator = Depends(get_carrier_aggregator),
    settings: Settings = Depends(get_settings),
) -> PlaceLookupService:
    return PlaceLookupService(
        places, aggregator, signal_radius_m=settings.place_signal_radius_meters
    )
