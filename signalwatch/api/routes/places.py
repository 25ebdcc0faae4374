"""API routes for place lookup with carrier signal overlay.

Endpoints:
    GET /api/places/find?input=...&carrier=...&minSignalCount=...
"""

from fastapi import APIRouter, Depends, Query

from signalwatch.api.dependencies import get_identity, get_place_lookup_service
from signalwatch.api.schemas.places import PlaceResponse
from signalwatch.core.identity import Identity
from signalwatch.services.place_lookup import PlaceLookupService

router = APIRouter(prefix="/api/places", tags=["places"])


@router.get(
    "/find",
    response_model=list[PlaceResponse],
    responses={
        400: {"description": "Missing input"},
        404: {"description": "No place found"},
        503: {"description": "Place lookup provider failed"},
    },
)
async def find_place(
    input_text: str | None = Query(None, alias="input", description="Free-text place query"),
    carrier: str | None = Query(None, description="Only report this carrier (case-insensitive)"),
    min_signal_count: int | None = Query(
        None, alias="minSignalCount", ge=0, description="Only report carriers with this many readings"
    ),
    identity: Identity = Depends(get_identity),  # noqa: ARG001
    service: PlaceLookupService = Depends(get_place_lookup_service),
) -> list[PlaceResponse]:
    """Find places by text and attach historical signal statistics per carrier."""
    places = await service.find_place(input_text, carrier, min_signal_count)
    return [PlaceResponse.model_validate(place) for place in places]
