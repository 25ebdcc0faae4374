"""API routes for the caller's alerts.

Endpoints:
    GET  /api/alerts                    - List the caller's alerts
    POST /api/alerts/{alert_id}/confirm - Confirm a pending alert
    POST /api/alerts/{alert_id}/dismiss - Dismiss a pending alert
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from signalwatch.api.dependencies import get_alert_dispatcher, get_identity
from signalwatch.api.schemas.alerts import AlertActionResponse, AlertListResponse, AlertResponse
from signalwatch.core.database import get_db
from signalwatch.core.identity import Identity
from signalwatch.models.enums import AlertStatus
from signalwatch.repositories import AlertRepository
from signalwatch.services.alert_dispatcher import AlertDispatcher

router = APIRouter(prefix="/api/alerts", tags=["alerts"])

ACTION_RESPONSES: dict[int | str, dict[str, str]] = {
    400: {"description": "Alert already handled"},
    404: {"description": "Alert not found or access denied"},
}


@router.get("", response_model=AlertListResponse)
async def list_alerts(
    alert_status: AlertStatus | None = Query(None, alias="status", description="Filter by status"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> AlertListResponse:
    """List the caller's alerts, newest first."""
    alerts = await AlertRepository(db).get_by_user_id(
        identity.user_id, status=alert_status, limit=limit, offset=offset
    )
    items = [AlertResponse.model_validate(alert) for alert in alerts]
    return AlertListResponse(alerts=items, count=len(items))


@router.post("/{alert_id}/confirm", response_model=AlertActionResponse, responses=ACTION_RESPONSES)
async def confirm_alert(
    alert_id: str,
    identity: Identity = Depends(get_identity),
    dispatcher: AlertDispatcher = Depends(get_alert_dispatcher),
) -> AlertActionResponse:
    """Confirm a pending alert. The alert owner is emailed the alert message."""
    alert = await dispatcher.confirm_alert(alert_id, identity)
    return AlertActionResponse(
        message="Alert confirmed and action triggered",
        alert=AlertResponse.model_validate(alert),
    )


@router.post("/{alert_id}/dismiss", response_model=AlertActionResponse, responses=ACTION_RESPONSES)
async def dismiss_alert(
    alert_id: str,
    identity: Identity = Depends(get_identity),
    dispatcher: AlertDispatcher = Depends(get_alert_dispatcher),
) -> AlertActionResponse:
    alert = await dispatcher.dismiss_alert(alert_id, identity)
    return AlertActionResponse(message="Alert dismissed", alert=AlertResponse.model_validate(alert))
