"""API routes for device connectivity telemetry.

Endpoints:
    POST /api/connectivity              - Store a connectivity log
    POST /api/connectivity/ping         - Liveness ping with low-signal alerting
    POST /api/connectivity/disconnect   - Store a disconnect event
    GET  /api/connectivity/{sample_id}  - Read a connectivity log
"""

from fastapi import APIRouter, Depends, status

from signalwatch.api.dependencies import get_identity, get_ping_service
from signalwatch.api.schemas.alerts import AlertResponse
from signalwatch.api.schemas.connectivity import (
    ConnectivityLogCreate,
    ConnectivitySampleResponse,
    PingRequest,
    PingResponse,
)
from signalwatch.core.identity import Identity
from signalwatch.services.connectivity_service import ConnectivityPingService

router = APIRouter(prefix="/api/connectivity", tags=["connectivity"])


@router.post(
    "",
    response_model=ConnectivitySampleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing device id or connectivity type"},
        404: {"description": "Device not found or not owned by user"},
    },
)
async def create_connectivity_log(
    payload: ConnectivityLogCreate,
    identity: Identity = Depends(get_identity),
    service: ConnectivityPingService = Depends(get_ping_service),
) -> ConnectivitySampleResponse:
    sample = await service.record_sample(identity, payload)
    return ConnectivitySampleResponse.model_validate(sample)


@router.post(
    "/ping",
    response_model=PingResponse,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Missing device id"},
        404: {"description": "Device not found or not owned by user"},
        503: {"description": "Automatic alert email could not be delivered"},
    },
)
async def ping(
    payload: PingRequest,
    identity: Identity = Depends(get_identity),
    service: ConnectivityPingService = Depends(get_ping_service),
) -> PingResponse:
    """Refresh device liveness and evaluate the reported signal.

    A low reading adds ``warning`` to the response, plus ``pendingAlert`` when
    the user confirms alerts manually.
    """
    result = await service.ping(identity, payload)
    return PingResponse(
        status=result.status,
        device_id=result.device_id,
        last_pinged=result.last_pinged,
        warning=result.warning,
        pending_alert=(
            AlertResponse.model_validate(result.pending_alert) if result.pending_alert else None
        ),
    )


@router.post(
    "/disconnect",
    response_model=ConnectivitySampleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing device id"},
        404: {"description": "Device not found or not owned by user"},
    },
)
async def create_disconnect_event(
    payload: ConnectivityLogCreate,
    identity: Identity = Depends(get_identity),
    service: ConnectivityPingService = Depends(get_ping_service),
) -> ConnectivitySampleResponse:
    sample = await service.record_sample(identity, payload, disconnected=True)
    return ConnectivitySampleResponse.model_validate(sample)


@router.get(
    "/{sample_id}",
    response_model=ConnectivitySampleResponse,
    responses={404: {"description": "Connectivity log not found"}},
)
async def get_connectivity_log(
    sample_id: str,
    identity: Identity = Depends(get_identity),
    service: ConnectivityPingService = Depends(get_ping_service),
) -> ConnectivitySampleResponse:
    sample = await service.get_sample(identity, sample_id)
    return ConnectivitySampleResponse.model_validate(sample)
