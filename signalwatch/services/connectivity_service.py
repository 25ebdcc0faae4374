"""Connectivity ping and log ingestion.

A ping is the device's liveness heartbeat. It carries the current signal
reading and is processed in this order:

1. Verify the caller owns the device.
2. Refresh ``last_pinged`` unless the previous value is newer than the
   quiescence window.
3. Evaluate the low-signal rule. On low signal, resolve the optional
   location, persist a reading and a disconnected "mobile" sample, then hand
   the event to the AlertDispatcher.

When the signal is fine nothing but the liveness timestamp is written.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from signalwatch.core.exceptions import (
    ConnectivitySampleNotFoundError,
    DeviceNotFoundError,
    MissingFieldError,
)
from signalwatch.core.logging import get_logger
from signalwatch.models import (
    Alert,
    AlertMechanism,
    CellularSignalReading,
    ConnectivitySample,
    ConnectivityType,
    Device,
    Location,
)
from signalwatch.repositories import (
    CellularSignalReadingRepository,
    ConnectivitySampleRepository,
    DeviceRepository,
)
from signalwatch.services.signal_classifier import parse_signal_value

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from signalwatch.api.schemas.connectivity import (
        ConnectivityLogCreate,
        LocationInput,
        PingRequest,
    )
    from signalwatch.core.identity import Identity
    from signalwatch.services.alert_dispatcher import AlertDispatcher
    from signalwatch.services.geo_matcher import GeoMatcher
    from signalwatch.services.signal_classifier import SignalClassifier

logger = get_logger(__name__)

LOW_SIGNAL_WARNING = "Low signal detected"
DEFAULT_QUIESCENCE = timedelta(minutes=5)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes for timezone-aware columns
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


@dataclass
class PingResult:
    device_id: str
    last_pinged: datetime | None
    status: str = "connected"
    warning: str | None = None
    pending_alert: Alert | None = None
    mechanism: AlertMechanism | None = None

    @property
    def low_signal(self) -> bool:
        return self.warning is not None


class ConnectivityPingService:
    """Handles device pings and connectivity logs for authenticated callers."""

    def __init__(
        self,
        session: AsyncSession,
        geo_matcher: GeoMatcher,
        classifier: SignalClassifier,
        dispatcher: AlertDispatcher,
        *,
        quiescence: timedelta = DEFAULT_QUIESCENCE,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.session = session
        self.geo_matcher = geo_matcher
        self.classifier = classifier
        self.dispatcher = dispatcher
        self.quiescence = quiescence
        self.clock = clock
        self.devices = DeviceRepository(session)
        self.samples = ConnectivitySampleRepository(session)
        self.readings = CellularSignalReadingRepository(session)

    async def _get_owned_device(self, device_id: str | None, identity: Identity) -> Device:
        if not device_id:
            raise MissingFieldError("deviceId")
        device = await self.devices.get_owned(device_id, identity.user_id)
        if device is None:
            raise DeviceNotFoundError(device_id)
        return device

    async def _resolve_location(self, location: LocationInput | None) -> Location | None:
        if location is None:
            return None
        return await self.geo_matcher.find_or_create_location(
            location.latitude, location.longitude, location.accuracy
        )

    async def ping(self, identity: Identity, request: PingRequest) -> PingResult:
        """Record a liveness ping and run low-signal alerting.

        Raises:
            MissingFieldError: No device id was supplied.
            DeviceNotFoundError: The device does not exist or is not the caller's.
            NotificationDeliveryError: The automatic alert email failed. The
                liveness update, reading and sample stay committed.
        """
        device = await self._get_owned_device(request.device_id, identity)

        now = self.clock()
        previous = _as_utc(device.last_pinged)
        if previous is None or now - previous > self.quiescence:
            device.last_pinged = now
            await self.devices.update(device)
            last_pinged = now
        else:
            last_pinged = previous

        if not self.classifier.is_low_signal(request.signal_dbm, request.signal_level):
            return PingResult(device_id=device.id, last_pinged=last_pinged)

        location = await self._resolve_location(request.location)
        reading = await self.readings.create(
            CellularSignalReading(
                carrier=request.carrier,
                network_type=request.network_type,
                signal_level=parse_signal_value(request.signal_level),
                signal_dbm=parse_signal_value(request.signal_dbm),
                asu_level=parse_signal_value(request.asu_level),
                mcc=request.mcc,
                mnc=request.mnc,
                created_at=now,
            )
        )
        sample = await self.samples.create(
            ConnectivitySample(
                device_id=device.id,
                connectivity_type=ConnectivityType.MOBILE,
                is_connected=False,
                location=location,
                reading=reading,
                created_at=now,
            )
        )
        logger.info(
            f"Low signal on device {device.id} "
            f"(dbm={reading.signal_dbm}, level={reading.signal_level}), sample {sample.id}"
        )

        outcome = await self.dispatcher.dispatch_low_signal(identity.user_id, device, sample)
        return PingResult(
            device_id=device.id,
            last_pinged=last_pinged,
            warning=LOW_SIGNAL_WARNING,
            pending_alert=outcome.alert,
            mechanism=outcome.mechanism,
        )

    async def record_sample(
        self,
        identity: Identity,
        payload: ConnectivityLogCreate,
        *,
        disconnected: bool = False,
    ) -> ConnectivitySample:
        """Store a connectivity log, or a disconnect event when ``disconnected`` is set.

        Disconnect events are always stored with type ``none`` and the
        connected flag cleared.
        """
        device = await self._get_owned_device(payload.device_id, identity)

        if disconnected:
            connectivity_type = ConnectivityType.NONE
        elif payload.connectivity_type is None:
            raise MissingFieldError("connectivityType")
        else:
            connectivity_type = payload.connectivity_type

        now = self.clock()
        location = await self._resolve_location(payload.location)

        reading = None
        if payload.mobile is not None:
            mobile = payload.mobile
            reading = await self.readings.create(
                CellularSignalReading(
                    carrier=mobile.carrier,
                    network_type=mobile.network_type,
                    signal_level=parse_signal_value(mobile.signal_level),
                    signal_dbm=parse_signal_value(mobile.signal_dbm),
                    asu_level=parse_signal_value(mobile.asu_level),
                    mcc=mobile.mcc,
                    mnc=mobile.mnc,
                    created_at=now,
                )
            )

        sample = await self.samples.create(
            ConnectivitySample(
                device_id=device.id,
                connectivity_type=connectivity_type,
                is_connected=not disconnected,
                ip_address=payload.ip_address,
                wifi_ssid=payload.wifi_ssid,
                wifi_bssid=payload.wifi_bssid,
                location=location,
                reading=reading,
                created_at=now,
            )
        )
        event = "Disconnect" if disconnected else "Connectivity log"
        logger.info(f"{event} recorded for device {device.id}: sample {sample.id}")
        return sample

    async def get_sample(self, identity: Identity, sample_id: str) -> ConnectivitySample:
        """Fetch a sample visible to the caller: the device owner or an admin."""
        sample = await self.samples.get_with_relations(sample_id)
        if sample is None:
            raise ConnectivitySampleNotFoundError(sample_id)
        if not identity.is_admin and sample.device.owner_id != identity.user_id:
            raise ConnectivitySampleNotFoundError(sample_id)
        return sample
