"""Signal strength classification.

Two independent rules live here:

- ``classify`` maps a dBm value to a quality band, used for reporting.
- ``is_low_signal`` decides whether a ping should go through alerting. It is
  stricter and also looks at the coarse 0-4 signal level.

Clients send signal fields as numbers or numeric strings. Anything that does
not parse as a finite number is treated as absent.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from signalwatch.models.enums import SignalQuality

if TYPE_CHECKING:
    from signalwatch.core.config import Settings


def parse_signal_value(value: Any) -> int | None:
    """Parse a client-supplied signal value into an integer.

    Floats are truncated toward zero. Booleans, blanks and non-numeric
    strings yield None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if math.isfinite(number) else None
    return None


@dataclass(frozen=True, slots=True)
class SignalThresholds:
    """Band floors for classification and ceilings for the low-signal rule."""

    excellent_min_dbm: int = -70
    good_min_dbm: int = -85
    weak_min_dbm: int = -100
    low_signal_max_dbm: int = -100
    low_signal_max_level: int = 1

    @classmethod
    def from_settings(cls, settings: Settings) -> SignalThresholds:
        return cls(
            excellent_min_dbm=settings.signal_excellent_min_dbm,
            good_min_dbm=settings.signal_good_min_dbm,
            weak_min_dbm=settings.signal_weak_min_dbm,
            low_signal_max_dbm=settings.low_signal_max_dbm,
            low_signal_max_level=settings.low_signal_max_level,
        )


class SignalClassifier:
    """Classifies signal strength against configurable thresholds."""

    def __init__(self, thresholds: SignalThresholds | None = None) -> None:
        self.thresholds = thresholds or SignalThresholds()

    def classify(self, dbm: float) -> SignalQuality:
        """Map a dBm value to a quality band.

        Bands are checked best-first and each lower bound is inclusive, so
        -70 is Excellent and -71 is Good with the default thresholds.
        """
        t = self.thresholds
        if dbm >= t.excellent_min_dbm:
            return SignalQuality.EXCELLENT
        if dbm >= t.good_min_dbm:
            return SignalQuality.GOOD
        if dbm >= t.weak_min_dbm:
            return SignalQuality.WEAK
        return SignalQuality.NO_SIGNAL

    def is_low_signal(self, dbm: Any = None, level: Any = None) -> bool:
        """Return True if either the dBm or the coarse level is at or below its ceiling."""
        t = self.thresholds
        parsed_dbm = parse_signal_value(dbm)
        parsed_level = parse_signal_value(level)
        dbm_low = parsed_dbm is not None and parsed_dbm <= t.low_signal_max_dbm
        level_low = parsed_level is not None and parsed_level <= t.low_signal_max_level
        return dbm_low or level_low
