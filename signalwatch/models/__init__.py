"""SQLAlchemy models for the SignalWatch connectivity monitor."""

from .alert import Alert
from .connectivity import CellularSignalReading, ConnectivitySample
from .device import Device
from .enums import (
    AlertMechanism,
    AlertStatus,
    AlertType,
    ConnectivityType,
    ContactType,
    SignalQuality,
    UserRole,
)
from .location import Location
from .user import AlertMode, EmergencyContact, User

__all__ = [
    "Alert",
    "AlertMechanism",
    "AlertMode",
    "AlertStatus",
    "AlertType",
    "CellularSignalReading",
    "ConnectivitySample",
    "ConnectivityType",
    "ContactType",
    "Device",
    "EmergencyContact",
    "Location",
    "SignalQuality",
    "User",
    "UserRole",
]
