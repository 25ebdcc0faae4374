"""Enumeration types for the SignalWatch data model."""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Role of an authenticated identity."""

    USER = "USER"
    ADMIN = "ADMIN"


class ContactType(str, Enum):
    """Tag distinguishing emergency contacts from favorites."""

    EMERGENCY = "EMERGENCY"
    FAVORITE = "FAVORITE"


class ConnectivityType(str, Enum):
    """Kind of network a device reported."""

    WIFI = "wifi"
    MOBILE = "mobile"
    NONE = "none"


class SignalQuality(str, Enum):
    """Discrete quality label for a signal strength in dBm.

    Bands (defaults, configurable via settings):
    - EXCELLENT: >= -70 dBm
    - GOOD: >= -85 dBm
    - WEAK: >= -100 dBm
    - NO_SIGNAL: anything lower
    """

    EXCELLENT = "Excellent"
    GOOD = "Good"
    WEAK = "Weak"
    NO_SIGNAL = "No Signal"

    def __str__(self) -> str:
        return self.value


class AlertType(str, Enum):
    """Kinds of anomaly an alert can report."""

    LOW_SIGNAL = "LOW_SIGNAL"
    HIGH_LATENCY = "HIGH_LATENCY"
    DEVICE_DISCONNECT = "DEVICE_DISCONNECT"
    BATTERY_LOW = "BATTERY_LOW"


class AlertStatus(str, Enum):
    """Alert lifecycle states.

    PENDING is the only non-terminal state. CONFIRMED and DISMISSED are
    reached exactly once and never left.
    """

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    DISMISSED = "DISMISSED"

    @property
    def is_terminal(self) -> bool:
        return self is not AlertStatus.PENDING


class AlertMechanism(str, Enum):
    """How a detected anomaly is turned into a notification.

    The value of AUTOMATIC and MANUAL is the alert mode key a user selects.
    UNCONFIGURED covers users without a mode and modes with any other key.
    """

    AUTOMATIC = "auto_alert"
    MANUAL = "manual_alert"
    UNCONFIGURED = "unconfigured"

    @classmethod
    def from_mode_key(cls, key: str | None) -> AlertMechanism:
        """Resolve an alert mode key into a mechanism, never raising."""
        if key == cls.AUTOMATIC.value:
            return cls.AUTOMATIC
        if key == cls.MANUAL.value:
            return cls.MANUAL
        return cls.UNCONFIGURED
