"""Pydantic schemas for connectivity (ping and log) API endpoints.

Signal fields are accepted as numbers or numeric strings, since mobile
clients report them both ways. They are parsed leniently by the service, so
a malformed value counts as absent instead of failing the request.
"""

from datetime import datetime

from pydantic import ConfigDict, Field

from signalwatch.api.schemas.alerts import AlertResponse
from signalwatch.api.schemas.common import CamelModel
from signalwatch.models.enums import ConnectivityType

RawSignalValue = int | float | str | None


class LocationInput(CamelModel):
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    accuracy: float | None = Field(None, ge=0, description="Measurement radius in meters")


class MobileInfoInput(CamelModel):
    """Cellular details reported with a connectivity log."""

    carrier: str | None = Field(None, max_length=128)
    network_type: str | None = Field(None, max_length=16, description='e.g. "4G" or "5G"')
    signal_level: RawSignalValue = Field(None, description="Coarse level 0-4")
    signal_dbm: RawSignalValue = Field(None, description="Signal strength in dBm")
    asu_level: RawSignalValue = None
    mcc: str | None = Field(None, max_length=8, description="Mobile country code")
    mnc: str | None = Field(None, max_length=8, description="Mobile network code")


class PingRequest(CamelModel):
    """Liveness ping with the current signal reading."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "deviceId": "550e8400-e29b-41d4-a716-446655440002",
                "signalDbm": -110,
                "signalLevel": 1,
                "carrier": "Vodafone",
                "networkType": "4G",
                "location": {"latitude": 30.0444, "longitude": 31.2357, "accuracy": 12},
            }
        },
    )

    device_id: str | None = Field(None, description="Device UUID")
    signal_dbm: RawSignalValue = None
    signal_level: RawSignalValue = None
    carrier: str | None = Field(None, max_length=128)
    network_type: str | None = Field(None, max_length=16)
    asu_level: RawSignalValue = None
    mcc: str | None = Field(None, max_length=8)
    mnc: str | None = Field(None, max_length=8)
    location: LocationInput | None = None


class PingResponse(CamelModel):
    status: str = Field(..., description='Always "connected"')
    device_id: str
    last_pinged: datetime | None = Field(None, description="Stored liveness timestamp")
    warning: str | None = Field(None, description="Present when the signal is low")
    pending_alert: AlertResponse | None = Field(
        None, description="Pending alert created under the manual alert mode"
    )


class ConnectivityLogCreate(CamelModel):
    """A connectivity observation from a device."""

    device_id: str | None = Field(None, description="Device UUID")
    connectivity_type: ConnectivityType | None = Field(None, description="wifi, mobile or none")
    ip_address: str | None = Field(None, max_length=64)
    wifi_ssid: str | None = Field(None, max_length=255)
    wifi_bssid: str | None = Field(None, max_length=64)
    location: LocationInput | None = None
    mobile: MobileInfoInput | None = None


class LocationResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    latitude: float
    longitude: float
    accuracy: float | None = None
    label: str | None = None
    created_at: datetime


class CellularSignalReadingResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    carrier: str | None = None
    network_type: str | None = None
    signal_level: int | None = None
    signal_dbm: int | None = None
    asu_level: int | None = None
    mcc: str | None = None
    mnc: str | None = None
    created_at: datetime


class ConnectivitySampleResponse(CamelModel):
    """Schema for a stored connectivity log with its nested location and reading."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    device_id: str
    connectivity_type: ConnectivityType
    is_connected: bool
    ip_address: str | None = None
    wifi_ssid: str | None = None
    wifi_bssid: str | None = None
    location: LocationResponse | None = None
    reading: CellularSignalReadingResponse | None = None
    created_at: datetime
