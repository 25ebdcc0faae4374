"""Test factories using factory_boy for generating test data.

Factories build plain model instances. Persist them with ``session.add`` (or
the ``persist`` fixture) when a test needs them in the database.

Usage:
    from signalwatch.tests.factories import AlertModeFactory, DeviceFactory, UserFactory

    user = UserFactory(alert_mode=AlertModeFactory())
    device = DeviceFactory(owner_id=user.id)
"""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

import factory
from factory import LazyFunction, Sequence

from signalwatch.models import (
    Alert,
    AlertMechanism,
    AlertMode,
    AlertStatus,
    AlertType,
    CellularSignalReading,
    ConnectivitySample,
    ConnectivityType,
    ContactType,
    Device,
    EmergencyContact,
    Location,
    User,
    UserRole,
)


def _uuid() -> str:
    return str(uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class AlertModeFactory(factory.Factory):
    class Meta:
        model = AlertMode

    id: str = LazyFunction(_uuid)
    key: str = AlertMechanism.MANUAL.value
    label: str = factory.LazyAttribute(lambda o: o.key.replace("_", " ").title())
    description: str | None = None
    created_at: datetime = LazyFunction(_now)

    class Params:
        automatic = factory.Trait(key=AlertMechanism.AUTOMATIC.value)


class UserFactory(factory.Factory):
    """Factory for User instances.

    Examples:
        user = UserFactory()
        admin = UserFactory(role=UserRole.ADMIN)
        user = UserFactory(alert_mode=AlertModeFactory(automatic=True))
    """

    class Meta:
        model = User

    id: str = LazyFunction(_uuid)
    email: str = Sequence(lambda n: f"user{n}@example.com")
    name: str = Sequence(lambda n: f"User {n}")
    phone: str | None = None
    role: UserRole = UserRole.USER
    alert_mode: AlertMode | None = None
    created_at: datetime = LazyFunction(_now)


class EmergencyContactFactory(factory.Factory):
    class Meta:
        model = EmergencyContact

    id: str = LazyFunction(_uuid)
    name: str = Sequence(lambda n: f"Contact {n}")
    phone: str | None = "+201000000000"
    email: str | None = Sequence(lambda n: f"contact{n}@example.com")
    type: ContactType = ContactType.EMERGENCY
    created_at: datetime = LazyFunction(_now)

    class Params:
        favorite = factory.Trait(type=ContactType.FAVORITE)


class DeviceFactory(factory.Factory):
    class Meta:
        model = Device

    id: str = LazyFunction(_uuid)
    name: str = Sequence(lambda n: f"Phone {n}")
    platform: str = "android"
    last_pinged: datetime | None = None
    created_at: datetime = LazyFunction(_now)


class LocationFactory(factory.Factory):
    class Meta:
        model = Location

    id: str = LazyFunction(_uuid)
    latitude: float = 30.0444
    longitude: float = 31.2357
    accuracy: float | None = None
    created_at: datetime = LazyFunction(_now)


class CellularSignalReadingFactory(factory.Factory):
    class Meta:
        model = CellularSignalReading

    id: str = LazyFunction(_uuid)
    carrier: str | None = "Vodafone"
    network_type: str | None = "4G"
    signal_level: int | None = 2
    signal_dbm: int | None = -90
    created_at: datetime = LazyFunction(_now)


class ConnectivitySampleFactory(factory.Factory):
    class Meta:
        model = ConnectivitySample

    id: str = LazyFunction(_uuid)
    connectivity_type: ConnectivityType = ConnectivityType.MOBILE
    is_connected: bool = True
    created_at: datetime = LazyFunction(_now)


class AlertFactory(factory.Factory):
    """Factory for Alert instances, PENDING low-signal alerts by default."""

    class Meta:
        model = Alert

    id: str = LazyFunction(_uuid)
    type: AlertType = AlertType.LOW_SIGNAL
    message: str = "Low signal detected on your device"
    status: AlertStatus = AlertStatus.PENDING
    mechanism: AlertMechanism = AlertMechanism.MANUAL
    created_at: datetime = LazyFunction(_now)
    resolved_at: datetime | None = None

    class Params:
        confirmed = factory.Trait(status=AlertStatus.CONFIRMED, resolved_at=LazyFunction(_now))
        dismissed = factory.Trait(status=AlertStatus.DISMISSED, resolved_at=LazyFunction(_now))
