"""Pydantic schemas for API request/response validation."""

from signalwatch.api.schemas.alerts import AlertActionResponse, AlertListResponse, AlertResponse
from signalwatch.api.schemas.connectivity import (
    CellularSignalReadingResponse,
    ConnectivityLogCreate,
    ConnectivitySampleResponse,
    LocationInput,
    LocationResponse,
    MobileInfoInput,
    PingRequest,
    PingResponse,
)
from signalwatch.api.schemas.places import (
    CarrierSignalResponse,
    PlaceCoordinates,
    PlaceResponse,
)

__all__ = [
    "AlertActionResponse",
    "AlertListResponse",
    "AlertResponse",
    "CarrierSignalResponse",
    "CellularSignalReadingResponse",
    "ConnectivityLogCreate",
    "ConnectivitySampleResponse",
    "LocationInput",
    "LocationResponse",
    "MobileInfoInput",
    "PingRequest",
    "PingResponse",
    "PlaceCoordinates",
    "PlaceResponse",
]
