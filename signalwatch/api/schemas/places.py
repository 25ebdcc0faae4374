"""Pydantic schemas for the place lookup endpoint."""

from pydantic import ConfigDict, Field

from signalwatch.api.schemas.common import CamelModel
from signalwatch.models.enums import SignalQuality


class PlaceCoordinates(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    lat: float
    lng: float


class CarrierSignalResponse(CamelModel):
    """Historical signal statistics for one carrier near a place."""

    model_config = ConfigDict(from_attributes=True)

    carrier: str = Field(..., description="Carrier name, upper-cased")
    avg_dbm: int = Field(..., description="Mean dBm, rounded half-up")
    quality: SignalQuality = Field(..., description="Quality band of the unrounded mean")
    count: int = Field(..., description="Number of readings")


class PlaceResponse(CamelModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "name": "Cairo Tower",
                "address": "Zamalek, Cairo Governorate, Egypt",
                "location": {"lat": 30.0459, "lng": 31.2243},
                "place_id": "ChIJ2dGMjMMfWBQRz7Ew4Fv4sHI",
                "rating": 4.6,
                "totalRatings": 51234,
                "isOpen": True,
                "types": ["tourist_attraction", "point_of_interest"],
                "signalByCarrier": [
                    {"carrier": "VODAFONE", "avgDbm": -90, "quality": "Weak", "count": 3}
                ],
            }
        },
    )

    name: str | None = None
    address: str | None = None
    location: PlaceCoordinates | None = None
    # Provider identifier, exposed under the provider's own key
    place_id: str | None = Field(None, alias="place_id")
    rating: float | None = None
    total_ratings: int | None = None
    is_open: bool | None = None
    types: list[str] = Field(default_factory=list)
    signal_by_carrier: list[CarrierSignalResponse] = Field(default_factory=list)
